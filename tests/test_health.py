import json

import health
from keydrop import __version__


def test_health_ok():
    resp = health.lambda_handler({"requestContext": {"http": {"method": "GET", "path": "/healthz"}}}, None)
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"status": "ok"}


def test_version():
    resp = health.lambda_handler({"rawPath": "/version"}, None)
    assert json.loads(resp["body"]) == {"version": __version__}
