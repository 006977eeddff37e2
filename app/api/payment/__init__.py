import logging
import math

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_payment_gateway
from app.services.payment import RazorpayGateway
from app.utils.base import InvalidFormat, MissingField, SignatureMismatch


logger = logging.getLogger(__name__)

router = APIRouter()


class CreateOrderBody(BaseModel):
    amount: float | str | None = None
    currency: str = "INR"
    notes: dict | None = None


class VerifyPaymentBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str | None = Field(default=None, alias="orderId")
    payment_id: str | None = Field(default=None, alias="paymentId")
    signature: str | None = None


@router.post("/create-order", status_code=201)
def create_order(body: CreateOrderBody, gateway: RazorpayGateway = Depends(get_payment_gateway)) -> dict:
    """PUBLIC: Open a gateway order; ``amount`` is in rupees."""
    try:
        amount = float(body.amount)
    except (TypeError, ValueError):
        raise InvalidFormat("Invalid amount") from None
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidFormat("Invalid amount")

    order = gateway.create_order(round(amount * 100), currency=body.currency, notes=body.notes)
    return {
        "success": True,
        "order": {
            "id": order.get("id"),
            "amount": order.get("amount"),
            "currency": order.get("currency"),
            "receipt": order.get("receipt"),
        },
    }


@router.post("/verify-payment")
def verify_payment(body: VerifyPaymentBody, gateway: RazorpayGateway = Depends(get_payment_gateway)) -> dict:
    """PUBLIC: Trust a checkout only when its signature, order and capture state all check out."""
    if not body.order_id or not body.payment_id or not body.signature:
        raise MissingField("Missing required parameters", required=["orderId", "paymentId", "signature"])

    if not gateway.verify_signature(body.order_id, body.payment_id, body.signature):
        logger.warning("Signature mismatch for order %s", body.order_id)
        raise SignatureMismatch()

    payment = gateway.fetch_payment(body.payment_id)
    order = gateway.fetch_order(body.order_id)
    if payment.get("order_id") != body.order_id:
        raise InvalidFormat("Invalid payment details", details="Payment order ID mismatch")
    if payment.get("amount") != order.get("amount"):
        raise InvalidFormat("Invalid payment details", details="Payment amount mismatch")
    if payment.get("status") != "captured":
        raise InvalidFormat("Payment not captured", status=payment.get("status"))

    logger.info("Verified payment %s for order %s", body.payment_id, body.order_id)
    return {
        "success": True,
        "payment": {
            "orderId": body.order_id,
            "paymentId": body.payment_id,
            "amount": payment["amount"] / 100,
            "status": payment.get("status"),
            "method": payment.get("method"),
            "email": payment.get("email"),
            "contact": payment.get("contact"),
            "createdAt": payment.get("created_at"),
        },
    }
