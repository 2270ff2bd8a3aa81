"""
Checkout validation.

Validates the checkout form before an order is created. Returns a list of
field errors (empty when valid) instead of raising, so the client can show
every problem at once.
"""

from dataclasses import dataclass, field

from catalog_engines.contracts.types import CheckoutChannel, DeliveryMethod, PaymentMethod

REFERENCE_PAYMENT_METHODS = {
    PaymentMethod.MONCASH.value: "MonCash",
    PaymentMethod.NATCASH.value: "NatCash",
    PaymentMethod.TRANSFER.value: "transferencia",
}

EMPTY_CART_MESSAGES = {
    CheckoutChannel.B2C.value: "Tu carrito está vacío",
    CheckoutChannel.B2B.value: "Tu pedido está vacío",
}


@dataclass
class CheckoutItem:
    id: str
    quantity: int


@dataclass
class CheckoutData:
    items: list[CheckoutItem] = field(default_factory=list)
    delivery_method: str | None = None
    selected_address: str | None = None
    selected_pickup_point: str | None = None
    payment_method: str | None = None
    payment_reference: str | None = None


@dataclass
class CheckoutValidationError:
    field: str
    message: str


def validate_checkout(
    data: CheckoutData,
    channel: str = CheckoutChannel.B2C.value,
) -> list[CheckoutValidationError]:
    """Validate a B2C or B2B checkout form."""
    channel = CheckoutChannel(channel).value
    errors: list[CheckoutValidationError] = []

    if not data.items:
        errors.append(CheckoutValidationError("items", EMPTY_CART_MESSAGES[channel]))

    if not data.delivery_method:
        errors.append(CheckoutValidationError("deliveryMethod", "Selecciona un método de entrega"))

    if data.delivery_method == DeliveryMethod.ADDRESS.value and not data.selected_address:
        errors.append(CheckoutValidationError("selectedAddress", "Selecciona una dirección de entrega"))

    if data.delivery_method == DeliveryMethod.PICKUP.value and not data.selected_pickup_point:
        errors.append(CheckoutValidationError("selectedPickupPoint", "Selecciona un punto de recogida"))

    if not data.payment_method:
        errors.append(CheckoutValidationError("paymentMethod", "Selecciona un método de pago"))

    method_name = REFERENCE_PAYMENT_METHODS.get(data.payment_method or "")
    if method_name and not (data.payment_reference or "").strip():
        errors.append(
            CheckoutValidationError("paymentReference", f"Ingresa tu referencia de {method_name}")
        )

    return errors


def get_field_error(errors: list[CheckoutValidationError], field_name: str) -> str | None:
    return next((e.message for e in errors if e.field == field_name), None)


def has_field_error(errors: list[CheckoutValidationError], field_name: str) -> bool:
    return any(e.field == field_name for e in errors)
