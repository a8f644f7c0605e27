"""Operator SMS and purchaser email, dispatched independently.

Both channels are always attempted; each outcome is recorded so a failure on
one side never hides whether the other went out.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests
from twilio.base.exceptions import TwilioException

from keydrop.emailjs import EmailJSClient
from keydrop.errors import NotificationError
from keydrop.logger import get_logger
from keydrop.orders import Order

logger = get_logger("notifier")

SMS = "sms"
EMAIL = "email"


def sms_body(order: Order) -> str:
    return f"New payment received! Payer: {order.payer_name}, Amount: {order.amount} {order.currency}"


@dataclass
class ChannelOutcome:
    channel: str
    ok: bool
    error: Optional[str] = None


@dataclass
class NotificationReport:
    outcomes: List[ChannelOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def failed(self) -> List[ChannelOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def as_dict(self) -> Dict[str, str]:
        return {o.channel: "sent" if o.ok else "failed" for o in self.outcomes}

    def summary(self) -> str:
        parts = [f"{o.channel}: {o.error}" for o in self.failed]
        return "Notification failed (" + "; ".join(parts) + ")"


class Notifier:
    def __init__(self, sms_client, from_number: str, operator_number: str, email_client: EmailJSClient):
        self.sms_client = sms_client
        self.from_number = from_number
        self.operator_number = operator_number
        self.email_client = email_client

    def send_sms(self, order: Order) -> str:
        try:
            resp = self.sms_client.messages.create(
                body=sms_body(order),
                from_=self.from_number,
                to=self.operator_number,
            )
        except (TwilioException, requests.RequestException) as e:
            raise NotificationError(f"SMS failed: {e}") from e
        sid = getattr(resp, "sid", "<no-sid>")
        logger.info("notifier.sms_sent", extra={"sid": sid, "order_id": order.order_id})
        return sid

    def send_email(self, order: Order, purchase_key: str, download_text: str) -> str:
        result = self.email_client.send(order.payer_email, order.payer_name, purchase_key, download_text)
        logger.info("notifier.email_sent", extra={"order_id": order.order_id})
        return result

    def _attempt(self, channel: str, send: Callable[[], Any]) -> ChannelOutcome:
        try:
            send()
        except NotificationError as e:
            logger.error(
                "notifier.channel_failed",
                extra={"channel": channel, "error": str(e)},
            )
            return ChannelOutcome(channel=channel, ok=False, error=str(e))
        return ChannelOutcome(channel=channel, ok=True)

    def notify(self, order: Order, purchase_key: str, download_text: str) -> NotificationReport:
        return NotificationReport(
            outcomes=[
                self._attempt(SMS, lambda: self.send_sms(order)),
                self._attempt(EMAIL, lambda: self.send_email(order, purchase_key, download_text)),
            ]
        )
