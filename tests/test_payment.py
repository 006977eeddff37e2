import hashlib
import hmac

import pytest
import requests

from app.api.deps import close_payment_gateway, get_payment_gateway
from app.services.payment import RazorpayGateway
from app.utils.base import UpstreamFailure
from tests.fakes import FakeResponse, FakeSession


BASE = "https://api.razorpay.test/v1"


def _sign(secret, order_id, payment_id):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def test_verify_signature_accepts_gateway_signature():
    gateway = RazorpayGateway("key", "secret", base_url=BASE, session=FakeSession({}))

    assert gateway.verify_signature("order_1", "pay_1", _sign("secret", "order_1", "pay_1"))


@pytest.mark.parametrize("signature", ["", "deadbeef", None, "ü"])
def test_verify_signature_rejects_others(signature):
    gateway = RazorpayGateway("key", "secret", base_url=BASE, session=FakeSession({}))

    assert not gateway.verify_signature("order_1", "pay_1", signature)


def test_signature_depends_on_both_ids():
    gateway = RazorpayGateway("key", "secret", base_url=BASE, session=FakeSession({}))

    assert not gateway.verify_signature("order_2", "pay_1", _sign("secret", "order_1", "pay_1"))


def test_create_order_posts_paise_amount():
    session = FakeSession({("POST", f"{BASE}/orders"): FakeResponse({"id": "order_1", "amount": 49900})})
    gateway = RazorpayGateway("key", "secret", base_url=BASE + "/", session=session)

    order = gateway.create_order(49900, currency="INR", notes={"exam": "Math101"})

    assert order["id"] == "order_1"
    method, url, kwargs = session.calls[0]
    assert kwargs["json"]["amount"] == 49900
    assert kwargs["json"]["payment_capture"] == 1
    assert kwargs["json"]["receipt"].startswith("rcpt_")
    assert kwargs["auth"] == ("key", "secret")


@pytest.mark.parametrize("outcome", [
    FakeResponse({"error": {"description": "bad"}}, status_code=400),
    requests.ConnectionError("connection refused"),
])
def test_gateway_failures_raise_upstream_failure(outcome):
    session = FakeSession({("GET", f"{BASE}/payments/pay_1"): outcome})
    gateway = RazorpayGateway("key", "secret", base_url=BASE, session=session)

    with pytest.raises(UpstreamFailure) as info:
        gateway.fetch_payment("pay_1")
    assert info.value.status_code == 500
    assert info.value.details


def test_gateway_is_shared_until_closed(monkeypatch):
    get_payment_gateway.cache_clear()
    gateway = get_payment_gateway()
    assert get_payment_gateway() is gateway

    session = FakeSession({})
    monkeypatch.setattr(gateway, "session", session)
    close_payment_gateway()

    assert session.closed is True
    assert get_payment_gateway() is not gateway
    close_payment_gateway()


def test_close_without_gateway_is_a_no_op():
    get_payment_gateway.cache_clear()

    close_payment_gateway()

    assert get_payment_gateway.cache_info().currsize == 0
