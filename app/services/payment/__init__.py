from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Any

import requests

from app.utils.base import UpstreamFailure


logger = logging.getLogger(__name__)


class RazorpayGateway:
    """Thin Razorpay REST client: orders, payments and checkout signature checks."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Razorpay %s %s failed: %s", method, path, exc)
            raise UpstreamFailure("Payment gateway request failed", details=str(exc)) from exc

    def create_order(self, amount: int, currency: str = "INR", notes: dict | None = None) -> dict[str, Any]:
        """Create an auto-captured order; ``amount`` is in the smallest currency unit."""
        return self._request("POST", "/orders", json={
            "amount": amount,
            "currency": currency,
            "receipt": f"rcpt_{int(time.time() * 1000)}",
            "notes": notes or {},
            "payment_capture": 1,
        })

    def close(self) -> None:
        self.session.close()

    def fetch_order(self, order_id: str) -> dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}")

    def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        return self._request("GET", f"/payments/{payment_id}")

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        expected = self.expected_signature(order_id, payment_id).encode()
        return hmac.compare_digest(expected, (signature or "").encode())
