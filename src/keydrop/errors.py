"""Failures the verification flow can raise.

Each error carries a message that is safe to return to the caller; the
handler turns any of them into a 500 response (``ValidationError`` into a
400) and logs the details server-side.
"""

from typing import Optional


class KeydropError(Exception):
    default_message = "Verification failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(KeydropError):
    default_message = "Invalid request"


class FetchError(KeydropError):
    default_message = "Failed to fetch keys list"


class OrderFetchError(FetchError):
    default_message = "Failed to fetch order"


class AuthError(KeydropError):
    default_message = "Failed to obtain PayPal access token"


class OrderNotCompleted(KeydropError):
    default_message = "Order not completed"

    def __init__(self, order_id: str, status: Optional[str] = None):
        super().__init__()
        self.order_id = order_id
        self.status = status


class NoKeyAvailable(KeydropError):
    def __init__(self, category_label: str):
        super().__init__(f"No unused keys available for {category_label}")
        self.category_label = category_label


class NotificationError(KeydropError):
    default_message = "Notification failed"

    def __init__(self, message: Optional[str] = None, report=None):
        super().__init__(message)
        self.report = report
