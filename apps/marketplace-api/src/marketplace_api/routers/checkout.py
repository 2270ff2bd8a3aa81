"""Checkout validation endpoint."""

from fastapi import APIRouter

from catalog_engines.engines.checkout import CheckoutData, CheckoutItem, validate_checkout
from marketplace_api.schemas import CheckoutValidationRequest

checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/validate")
def validate(body: CheckoutValidationRequest):
    data = CheckoutData(
        items=[CheckoutItem(id=item.id, quantity=item.quantity) for item in body.items],
        delivery_method=body.delivery_method,
        selected_address=body.selected_address,
        selected_pickup_point=body.selected_pickup_point,
        payment_method=body.payment_method,
        payment_reference=body.payment_reference,
    )
    errors = validate_checkout(data, channel=body.channel)
    return {
        "valid": not errors,
        "errors": [{"field": e.field, "message": e.message} for e in errors],
    }
