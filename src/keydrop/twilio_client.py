# keydrop/twilio_client.py

from twilio.rest import Client as TwilioClient

from keydrop.config import Settings
from keydrop.logger import get_logger

logger = get_logger("twilio_client")


def build_client(settings: Settings):
    """
    Build and return a Twilio client plus a small config dict.

    Returns:
        (client, conf) where:
          - client: twilio.rest.Client
          - conf: dict with {"from_number": "...", "to_number": "..."}
    """
    missing = [
        name
        for name, value in [
            ("account_sid", settings.twilio_account_sid),
            ("auth_token", settings.twilio_auth_token),
            ("from_number", settings.twilio_phone_number),
            ("to_number", settings.operator_phone_number),
        ]
        if not value
    ]

    if missing:
        logger.error("Missing Twilio settings", extra={"missing": missing})
        raise RuntimeError(f"Missing Twilio settings: {', '.join(missing)}")

    client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
    logger.info("Twilio client initialized successfully")

    conf = {
        "from_number": settings.twilio_phone_number,
        # operator handset that receives the sale summary
        "to_number": settings.operator_phone_number,
    }

    return client, conf
