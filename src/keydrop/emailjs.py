from typing import Optional

import requests

from keydrop.config import EMAILJS_SEND_URL
from keydrop.errors import NotificationError
from keydrop.logger import get_logger

logger = get_logger("emailjs")


class EmailJSClient:
    """Sends templated emails through the EmailJS REST API."""

    def __init__(
        self,
        service_id: str,
        template_id: str,
        public_key: str,
        private_key: Optional[str] = None,
        api_url: str = EMAILJS_SEND_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.private_key = private_key
        self.api_url = api_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_payload(self, to_email: str, name: str, purchase_key: str, download_link: str) -> dict:
        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": {
                "to_email": to_email,
                "name": name,
                "purchase_key": purchase_key,
                "download_link": download_link,
            },
        }
        if self.private_key:
            payload["accessToken"] = self.private_key
        return payload

    def send(self, to_email: str, name: str, purchase_key: str, download_link: str) -> str:
        payload = self.build_payload(to_email, name, purchase_key, download_link)
        try:
            resp = self.session.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"EmailJS failed: {e}") from e

        if not resp.ok:
            raise NotificationError(f"EmailJS failed: {resp.status_code} {resp.text}")

        logger.info("emailjs.sent", extra={"to": to_email, "status": resp.status_code})
        # EmailJS answers with a plain "OK" body
        return resp.text
