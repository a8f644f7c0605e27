import dataclasses

import pytest

from keydrop.config import load_settings
from keydrop.twilio_client import build_client

from test_config import ENV


def test_build_client_returns_numbers():
    client, conf = build_client(load_settings(dict(ENV)))

    assert client.username == "ACxxx"
    assert conf == {"from_number": "+15550000001", "to_number": "+15550000002"}


def test_build_client_rejects_missing_credentials():
    settings = dataclasses.replace(load_settings(dict(ENV)), twilio_auth_token="")
    with pytest.raises(RuntimeError, match="auth_token"):
        build_client(settings)
