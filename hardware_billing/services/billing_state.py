# ==============================================================================
# REDUCTORES DEL BORRADOR DE FACTURA
# ==============================================================================
# Cada función recibe un BillingState y retorna uno nuevo. Nada de I/O.
# Los cambios de líneas del carrito están en cart_service.py.
# ==============================================================================

from datetime import date
from typing import Any, Optional

from hardware_billing.errors import ValidationError
from hardware_billing.models import BillingState, Customer, PaymentMethod
from hardware_billing.utils import clamp, to_float


def select_customer(state: BillingState, customer: Optional[Customer]) -> BillingState:
    return state.evolve(customer=customer)


def set_markup(state: BillingState, value: Any) -> BillingState:
    """Recargo en %; no numérico → 0, acotado a 0-100."""
    return state.evolve(markup=clamp(to_float(value), 0, 100))


def set_discount(state: BillingState, value: Any) -> BillingState:
    return state.evolve(discount=clamp(to_float(value), 0, 100))


def set_payment_method(state: BillingState, method: Any) -> BillingState:
    """
    Raises:
        ValidationError: Si el método no es cash ni credit
    """
    try:
        payment_method = PaymentMethod(method)
    except ValueError:
        raise ValidationError('Invalid payment method')
    return state.evolve(payment_method=payment_method)


def set_amount_paid(state: BillingState, value: Any) -> BillingState:
    """Se guarda el texto tal cual; el calculador interpreta blanco/no numérico como 0."""
    return state.evolve(amount_paid='' if value is None else str(value))


def set_bill_date(state: BillingState, value: Any) -> BillingState:
    try:
        bill_date = date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError('Invalid bill date')
    return state.evolve(bill_date=bill_date.isoformat())


def reset(state: BillingState = None) -> BillingState:
    """Borrador nuevo (con un draft_id nuevo)."""
    return BillingState()
