"""
KeyDrop Webhook Helpers
=======================

Shared modules for the AWS-native payment-confirmation webhook that verifies
PayPal orders, hands out license keys and notifies buyer and operator.

- logger.py          → structured JSON logging
- secrets.py         → AWS Secrets Manager integration
- config.py          → settings from Secrets Manager / environment
- errors.py          → failure taxonomy surfaced by the handler
- keypool.py         → remote license-key list fetcher
- allocator.py       → per-process unique key allocation
- orders.py          → PayPal order model, catalog and download links
- paypal.py          → PayPal token exchange and order verification
- twilio_client.py   → authenticated Twilio client builder
- emailjs.py         → EmailJS REST sender
- notifier.py        → SMS + email dispatch with per-channel outcomes
"""

__version__ = "1.0.0"
__author__ = "KeyDrop Engineering"
__license__ = "MIT"

__all__ = ["__version__", "__author__"]
