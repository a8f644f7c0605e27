import base64
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from keydrop.config import PAYPAL_SANDBOX_BASE
from keydrop.errors import AuthError, OrderFetchError, OrderNotCompleted
from keydrop.logger import get_logger
from keydrop.orders import COMPLETED

logger = get_logger("paypal")


class PayPalClient:
    """
    Minimal PayPal REST client: client-credentials token exchange and
    checkout order lookup. A fresh token is requested for every verification.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = PAYPAL_SANDBOX_BASE,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _basic_auth(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode()
        return "Basic " + base64.b64encode(raw).decode()

    def get_access_token(self) -> str:
        url = f"{self.base_url}/v1/oauth2/token"
        try:
            resp = self.session.post(
                url,
                headers={
                    "Authorization": self._basic_auth(),
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data="grant_type=client_credentials",
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("paypal.token_request_error", extra={"error": str(e)})
            raise AuthError() from e

        if not resp.ok:
            logger.error("paypal.token_bad_status", extra={"status": resp.status_code})
            raise AuthError()

        try:
            token = resp.json().get("access_token")
        except ValueError as e:
            raise AuthError() from e

        if not token:
            logger.error("paypal.token_missing")
            raise AuthError()
        return token

    def get_order(self, order_id: str, access_token: str) -> Dict[str, Any]:
        url = f"{self.base_url}/v2/checkout/orders/{quote(order_id, safe='')}"
        try:
            resp = self.session.get(
                url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("paypal.order_request_error", extra={"order_id": order_id, "error": str(e)})
            raise OrderFetchError() from e

        if not resp.ok:
            logger.error(
                "paypal.order_bad_status",
                extra={"order_id": order_id, "status": resp.status_code},
            )
            raise OrderFetchError()

        try:
            return resp.json()
        except ValueError as e:
            raise OrderFetchError("Order response was not valid JSON") from e

    def verify_order(self, order_id: str) -> Dict[str, Any]:
        """
        Return the order payload if PayPal reports it COMPLETED,
        otherwise raise OrderNotCompleted.
        """
        token = self.get_access_token()
        data = self.get_order(order_id, token)
        status = data.get("status")
        if status != COMPLETED:
            logger.warning("paypal.order_not_completed", extra={"order_id": order_id, "status": status})
            raise OrderNotCompleted(order_id, status)

        logger.info("paypal.order_verified", extra={"order_id": order_id})
        return data
