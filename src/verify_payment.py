import json
from dataclasses import dataclass
from typing import Optional

from keydrop.allocator import KeyAllocator
from keydrop.config import Settings, load_settings
from keydrop.emailjs import EmailJSClient
from keydrop.errors import KeydropError, NotificationError, ValidationError
from keydrop.keypool import KeyPool
from keydrop.logger import get_logger
from keydrop.notifier import Notifier
from keydrop.orders import Order, download_links, email_download_text
from keydrop.paypal import PayPalClient
from keydrop.twilio_client import build_client

logger = get_logger("verify_payment")

SUCCESS_MESSAGE = "Payment verified, SMS and email sent"
FALLBACK_MESSAGE = "Verification failed"


@dataclass
class Services:
    paypal: PayPalClient
    allocator: KeyAllocator
    notifier: Notifier


def build_services(settings: Settings) -> Services:
    """Wire the collaborators for one container from its settings."""
    timeout = settings.http_timeout
    pool = KeyPool(settings.key_pool_url, timeout=timeout)
    twilio_client, twilio_conf = build_client(settings)
    email_client = EmailJSClient(
        service_id=settings.emailjs_service_id,
        template_id=settings.emailjs_template_id,
        public_key=settings.emailjs_public_key,
        private_key=settings.emailjs_private_key,
        api_url=settings.emailjs_api_url,
        timeout=timeout,
    )
    return Services(
        paypal=PayPalClient(
            settings.paypal_client_id,
            settings.paypal_client_secret,
            base_url=settings.paypal_api_base,
            timeout=timeout,
        ),
        allocator=KeyAllocator(pool.fetch, serialize=settings.serialize_key_claims),
        notifier=Notifier(
            twilio_client,
            from_number=twilio_conf["from_number"],
            operator_number=twilio_conf["to_number"],
            email_client=email_client,
        ),
    )


# Built on first use and kept for the lifetime of the container, so the
# allocator's used-key set survives across invocations.
_services: Optional[Services] = None


def get_services() -> Services:
    global _services
    if _services is None:
        _services = build_services(load_settings())
    return _services


def _response(status_code: int, body: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _error(status_code: int, message: str, **extra) -> dict:
    return _response(status_code, {"status": "error", "message": message, **extra})


def _parse_body(event: dict) -> dict:
    """
    Extract and parse the JSON body from the Lambda event.

    - For API Gateway / HttpApi: event["body"] should be a JSON string.
    - For direct tests: event might already be the payload.
    """
    body = event.get("body")

    if isinstance(body, str):
        if not body.strip():
            return {}
        raw_body = body
    elif isinstance(body, dict):
        return body
    else:
        # Fallback: treat the whole event as the payload for direct invokes
        return event

    try:
        return json.loads(raw_body)
    except json.JSONDecodeError:
        logger.warning(
            "verify.invalid_json",
            extra={"body_preview": str(raw_body)[:200]},
        )
        raise


def _order_id_from(event: dict) -> str:
    """
    Return the order identifier from the request, or raise ValidationError.
    Numeric identifiers are accepted and converted to strings.
    """
    try:
        payload = _parse_body(event)
    except json.JSONDecodeError as e:
        raise ValidationError("Invalid JSON body") from e
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON body")

    order_id = payload.get("orderId")
    if isinstance(order_id, (int, float)) and not isinstance(order_id, bool):
        order_id = str(order_id)
    elif order_id is not None and not isinstance(order_id, str):
        raise ValidationError("orderId must be a string")

    if not order_id or not order_id.strip():
        raise ValidationError("Missing orderId")
    return order_id.strip()


def process_order(order_id: str, services: Services) -> dict:
    """
    Verify the order, claim a key for its category and notify both parties.
    Returns the success body; any failure propagates to the caller.
    """
    order = Order.from_paypal(services.paypal.verify_order(order_id))
    logger.info(
        "verify.order_verified",
        extra={"order_id": order_id, "category": order.category.value, "items": len(order.items)},
    )

    purchase_key = services.allocator.claim(order.category)

    links = download_links(order)
    logger.debug("verify.download_links", extra={"order_id": order_id, "links": links})

    report = services.notifier.notify(order, purchase_key, email_download_text(links))
    if not report.ok:
        raise NotificationError(report.summary(), report=report)

    return {"status": "success", "message": SUCCESS_MESSAGE}


def lambda_handler(event, context):
    logger.info(
        "verify.lambda_start",
        extra={"request_id": getattr(context, "aws_request_id", None)},
    )

    # 1) Parse and validate input before touching any upstream service
    try:
        order_id = _order_id_from(event or {})
    except ValidationError as e:
        logger.warning("verify.invalid_request", extra={"error": str(e)})
        return _error(400, e.message)

    # 2) Verify, allocate, notify
    try:
        body = process_order(order_id, get_services())
    except ValidationError as e:
        logger.warning("verify.invalid_request", extra={"order_id": order_id, "error": str(e)})
        return _error(400, e.message)
    except NotificationError as e:
        logger.error("verify.notification_error", extra={"order_id": order_id, "error": str(e)})
        extra = {"notifications": e.report.as_dict()} if e.report is not None else {}
        return _error(500, e.message, **extra)
    except KeydropError as e:
        logger.error(
            "verify.failed",
            extra={"order_id": order_id, "error_type": type(e).__name__, "error": str(e)},
        )
        return _error(500, e.message)
    except Exception as e:
        logger.exception("verify.unexpected_error", extra={"order_id": order_id})
        return _error(500, str(e) or FALLBACK_MESSAGE)

    logger.info("verify.completed", extra={"order_id": order_id})
    return _response(200, body)
