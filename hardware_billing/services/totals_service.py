# ==============================================================================
# CALCULADORA DE TOTALES
# ==============================================================================
# Función pura: sin I/O ni efectos secundarios.
#
# Orden fijo (el recargo se aplica ANTES del descuento):
#   1. subtotal          = Σ line.total
#   2. markup_amount     = subtotal * clamp(markup) / 100
#   3. marked_up         = subtotal + markup_amount
#   4. discount_amount   = marked_up * clamp(discount) / 100
#   5. grand_total       = marked_up - discount_amount
#   6. total_cost        = Σ quantity * unit_cost
#   7. profit            = grand_total - total_cost
#   8. paid              = grand_total (cash) | amount_paid numérico (credit)
#   9. remaining         = grand_total - paid
#  10. new_balance       = customer.balance + remaining (0 sin cliente)
#
# No se redondea entre pasos; el redondeo es solo de presentación/persistencia.
# ==============================================================================

from typing import Any, Optional, Tuple

from hardware_billing.models import BillingState, Cart, Customer, PaymentMethod, Totals
from hardware_billing.utils import clamp, to_float


def apply_adjustments(subtotal: float, markup: Any, discount: Any) -> Tuple[float, float, float, float]:
    """
    Pasos 2 a 5: recargo y después descuento.

    Returns:
        (markup_amount, marked_up_subtotal, discount_amount, grand_total)
    """
    markup_amount = subtotal * clamp(to_float(markup), 0, 100) / 100
    marked_up_subtotal = subtotal + markup_amount
    discount_amount = marked_up_subtotal * clamp(to_float(discount), 0, 100) / 100
    return markup_amount, marked_up_subtotal, discount_amount, marked_up_subtotal - discount_amount


def calculate_totals(
    cart: Cart,
    markup: Any = 0,
    discount: Any = 0,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    amount_paid: Any = '',
    customer: Optional[Customer] = None
) -> Totals:
    """
    Calcula los totales de una factura.

    Args:
        cart: Carrito con las líneas
        markup: Recargo en porcentaje (se acota a 0-100)
        discount: Descuento en porcentaje (se acota a 0-100)
        payment_method: cash o credit
        amount_paid: Monto pagado tal como se ingresó (solo para credit)
        customer: Cliente seleccionado (para el saldo proyectado)

    Returns:
        Totals sin redondear
    """
    subtotal = sum(line.total for line in cart)
    markup_amount, marked_up_subtotal, discount_amount, grand_total = apply_adjustments(
        subtotal, markup, discount
    )

    total_cost = sum(line.total_cost for line in cart)
    profit = grand_total - total_cost

    if PaymentMethod(payment_method) == PaymentMethod.CASH:
        paid = grand_total
    else:
        paid = to_float(amount_paid)
    remaining = grand_total - paid

    projected = (customer.balance + remaining) if customer is not None else 0.0

    return Totals(
        subtotal=subtotal,
        markup_amount=markup_amount,
        marked_up_subtotal=marked_up_subtotal,
        discount_amount=discount_amount,
        grand_total=grand_total,
        total_cost=total_cost,
        profit=profit,
        paid=paid,
        remaining=remaining,
        projected_new_balance=projected,
    )


def totals_for(state: BillingState) -> Totals:
    """Atajo: totales del borrador completo."""
    return calculate_totals(
        state.cart,
        state.markup,
        state.discount,
        state.payment_method,
        state.amount_paid,
        state.customer,
    )
