"""Hand-written stand-ins for requests sessions and the Twilio client."""

import json

import requests


class StubResponse:
    def __init__(self, status_code=200, json_body=None, text=None):
        self.status_code = status_code
        self._json = json_body
        if text is None:
            text = json.dumps(json_body) if json_body is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


class StubSession:
    """Replays queued responses (or raises queued exceptions) and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


class StubTwilioMsg:
    def __init__(self, sid="SMXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX"):
        self.sid = sid


class StubMessages:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    # Twilio SDK uses .messages.create(...)
    def create(self, body, from_, to):
        if self.error is not None:
            raise self.error
        self.sent.append({"body": body, "from": from_, "to": to})
        return StubTwilioMsg()


class StubTwilioClient:
    def __init__(self, error=None):
        self.messages = StubMessages(error)


class StubEmailClient:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, to_email, name, purchase_key, download_link):
        if self.error is not None:
            raise self.error
        self.sent.append(
            {"to_email": to_email, "name": name, "purchase_key": purchase_key, "download_link": download_link}
        )
        return "OK"


def paypal_order(status="COMPLETED", items=None, order_id="5O190127TN364715T"):
    if items is None:
        items = [{"sku": "ar_pack", "name": "AR Pack"}]
    return {
        "id": order_id,
        "status": status,
        "payer": {
            "name": {"given_name": "Jane", "surname": "Doe"},
            "email_address": "jane@example.com",
        },
        "purchase_units": [
            {
                "amount": {"value": "19.99", "currency_code": "USD"},
                "items": items,
            }
        ],
    }


CONNECTION_ERROR = requests.ConnectionError("connection refused")
