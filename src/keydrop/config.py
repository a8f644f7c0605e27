"""Runtime settings for the webhook.

Values come from the Secrets Manager secret named by ``KEYDROP_SECRET_NAME``
(when set) layered over the process environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from keydrop.logger import get_logger
from keydrop.secrets import get_keydrop_secrets

logger = get_logger("config")

PAYPAL_SANDBOX_BASE = "https://api-m.sandbox.paypal.com"
EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"
DEFAULT_KEY_POOL_URL = "https://raw.githubusercontent.com/Malik-2-Wavy/Pc-Keys/refs/heads/main/Keys"
DEFAULT_HTTP_TIMEOUT = "10"

REQUIRED = (
    "PAYPAL_CLIENT_ID",
    "PAYPAL_CLIENT_SECRET",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
    "MY_PHONE_NUMBER",
    "EMAILJS_SERVICE_ID",
    "EMAILJS_TEMPLATE_ID",
    "EMAILJS_PUBLIC_KEY",
)

KEY_CLAIM_MODES = ("locked", "unlocked")


@dataclass(frozen=True)
class Settings:
    paypal_client_id: str
    paypal_client_secret: str
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str
    operator_phone_number: str
    emailjs_service_id: str
    emailjs_template_id: str
    emailjs_public_key: str
    emailjs_private_key: Optional[str] = None
    paypal_api_base: str = PAYPAL_SANDBOX_BASE
    emailjs_api_url: str = EMAILJS_SEND_URL
    key_pool_url: str = DEFAULT_KEY_POOL_URL
    http_timeout: Optional[float] = 10.0
    serialize_key_claims: bool = True


def _parse_timeout(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        msg = (
            f"Invalid HTTP_TIMEOUT_SECONDS='{raw}'. "
            "Must be a number of seconds (0 disables timeouts)."
        )
        logger.error(msg)
        raise RuntimeError(msg)
    if value < 0:
        msg = f"Invalid HTTP_TIMEOUT_SECONDS='{raw}'. Must not be negative."
        logger.error(msg)
        raise RuntimeError(msg)
    return value or None


def _parse_claim_mode(raw: str) -> bool:
    mode = raw.strip().lower()
    if mode not in KEY_CLAIM_MODES:
        msg = f"Invalid KEY_CLAIM_MODE='{raw}'. Expected one of: {', '.join(KEY_CLAIM_MODES)}."
        logger.error(msg)
        raise RuntimeError(msg)
    return mode == "locked"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from Secrets Manager values layered over the environment.

    Raises RuntimeError with a clear message if something is missing/invalid.
    """
    environ = os.environ if environ is None else environ

    values = dict(environ)
    values.update({k: str(v) for k, v in get_keydrop_secrets(environ).items() if v is not None})

    missing = [name for name in REQUIRED if not values.get(name)]
    if missing:
        msg = f"Missing required configuration: {', '.join(missing)}"
        logger.error(msg)
        raise RuntimeError(msg)

    settings = Settings(
        paypal_client_id=values["PAYPAL_CLIENT_ID"],
        paypal_client_secret=values["PAYPAL_CLIENT_SECRET"],
        twilio_account_sid=values["TWILIO_ACCOUNT_SID"],
        twilio_auth_token=values["TWILIO_AUTH_TOKEN"],
        twilio_phone_number=values["TWILIO_PHONE_NUMBER"],
        operator_phone_number=values["MY_PHONE_NUMBER"],
        emailjs_service_id=values["EMAILJS_SERVICE_ID"],
        emailjs_template_id=values["EMAILJS_TEMPLATE_ID"],
        emailjs_public_key=values["EMAILJS_PUBLIC_KEY"],
        emailjs_private_key=values.get("EMAILJS_PRIVATE_KEY") or None,
        paypal_api_base=(values.get("PAYPAL_API_BASE") or PAYPAL_SANDBOX_BASE).rstrip("/"),
        emailjs_api_url=values.get("EMAILJS_API_URL") or EMAILJS_SEND_URL,
        key_pool_url=values.get("KEY_POOL_URL") or DEFAULT_KEY_POOL_URL,
        http_timeout=_parse_timeout(values.get("HTTP_TIMEOUT_SECONDS") or DEFAULT_HTTP_TIMEOUT),
        serialize_key_claims=_parse_claim_mode(values.get("KEY_CLAIM_MODE") or "locked"),
    )

    logger.debug(
        "config.loaded",
        extra={
            "paypal_api_base": settings.paypal_api_base,
            "key_pool_url": settings.key_pool_url,
            "http_timeout": settings.http_timeout,
            "serialize_key_claims": settings.serialize_key_claims,
        },
    )
    return settings
