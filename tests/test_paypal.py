import base64

import pytest

from keydrop.errors import AuthError, OrderFetchError, OrderNotCompleted
from keydrop.paypal import PayPalClient

from stubs import CONNECTION_ERROR, StubResponse, StubSession, paypal_order

BASE = "https://api-m.sandbox.paypal.com"
TOKEN = StubResponse(200, {"access_token": "A21AA-token", "token_type": "Bearer"})


def _client(*responses):
    session = StubSession(*responses)
    return PayPalClient("client-id", "client-secret", base_url=BASE + "/", session=session), session


def test_token_exchange_uses_basic_auth_and_client_credentials():
    client, session = _client(TOKEN)

    assert client.get_access_token() == "A21AA-token"

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE}/v1/oauth2/token"
    assert call["data"] == "grant_type=client_credentials"
    expected = base64.b64encode(b"client-id:client-secret").decode()
    assert call["headers"]["Authorization"] == f"Basic {expected}"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"


@pytest.mark.parametrize(
    "response",
    [
        StubResponse(401, {"error": "invalid_client"}),
        StubResponse(200, {"token_type": "Bearer"}),
        StubResponse(200, text="<html>"),
        CONNECTION_ERROR,
    ],
)
def test_unusable_token_response_raises_auth_error(response):
    client, _ = _client(response)
    with pytest.raises(AuthError):
        client.get_access_token()


def test_verify_completed_order_returns_payload():
    order = paypal_order()
    client, session = _client(TOKEN, StubResponse(200, order))

    assert client.verify_order(order["id"]) == order

    lookup = session.calls[1]
    assert lookup["method"] == "GET"
    assert lookup["url"] == f"{BASE}/v2/checkout/orders/{order['id']}"
    assert lookup["headers"]["Authorization"] == "Bearer A21AA-token"


def test_verify_pending_order_raises_not_completed():
    client, _ = _client(TOKEN, StubResponse(200, paypal_order(status="APPROVED")))

    with pytest.raises(OrderNotCompleted, match="Order not completed") as exc:
        client.verify_order("ORDER-1")
    assert exc.value.status == "APPROVED"


@pytest.mark.parametrize("response", [StubResponse(404, {"name": "RESOURCE_NOT_FOUND"}), CONNECTION_ERROR])
def test_order_lookup_failure_raises_fetch_error(response):
    client, _ = _client(TOKEN, response)
    with pytest.raises(OrderFetchError):
        client.verify_order("ORDER-1")


def test_token_failure_stops_before_order_lookup():
    client, session = _client(StubResponse(500, {}))
    with pytest.raises(AuthError):
        client.verify_order("ORDER-1")
    assert len(session.calls) == 1


def test_order_id_is_escaped_into_a_single_path_segment():
    client, session = _client(TOKEN, StubResponse(200, paypal_order()))

    client.verify_order("../../v1/identity/oauth2/userinfo?x=1")

    lookup = session.calls[1]
    assert lookup["url"] == (
        f"{BASE}/v2/checkout/orders/..%2F..%2Fv1%2Fidentity%2Foauth2%2Fuserinfo%3Fx%3D1"
    )
