# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Reductores puros sobre Cart (inmutable) + CartService, que guarda el
# borrador de factura en la sesión de Flask (session['billing']).
#
# El stock que se valida es el del último snapshot de items: es una
# validación orientativa, el backend es quien descuenta el stock real.
# ==============================================================================

from typing import Any, Dict, Optional

from flask import session

from hardware_billing.errors import OutOfStockError, StockExceededError, ValidationError
from hardware_billing.models import BillingState, Cart, Customer, Item, LineItem, PaymentMethod
from hardware_billing.services import billing_state
from hardware_billing.services.totals_service import totals_for
from hardware_billing.utils import format_money, parse_number


# ==============================================================================
# REDUCTORES PUROS
# ==============================================================================

def _check_index(cart: Cart, index: Any) -> int:
    number = parse_number(index)
    if number is None or number != int(number) or not 0 <= number < len(cart):
        raise ValidationError('Invalid line index')
    return int(number)


def add_line(cart: Cart, item: Item, current_stock: int) -> Cart:
    """
    Agrega una unidad del item.

    Si el item ya está en el carrito incrementa la cantidad en vez de
    duplicar la fila.

    Raises:
        OutOfStockError: current_stock < 1
        StockExceededError: la cantidad resultante supera el stock
    """
    if current_stock < 1:
        raise OutOfStockError()

    index = cart.index_of(item.id)
    if index is not None:
        line = cart[index]
        if line.quantity + 1 > current_stock:
            raise StockExceededError('Cannot add more than available stock!')
        return cart.with_line(index, LineItem(
            item_id=line.item_id,
            name=line.name,
            quantity=line.quantity + 1,
            unit_price=line.unit_price,
            unit_cost=line.unit_cost,
            custom_price=line.custom_price,
            item_type=line.item_type,
            size=line.size,
        ))

    new_line = LineItem(
        item_id=item.id,
        name=item.name,
        quantity=1,
        unit_price=item.selling_price,
        unit_cost=item.cost_price,
        custom_price=item.selling_price,
        item_type=item.item_type,
        size=item.size,
    )
    return Cart(cart.lines + (new_line,))


def set_quantity(cart: Cart, index: Any, qty: Any, current_stock: int) -> Cart:
    """
    Fija la cantidad de una línea.

    Raises:
        ValidationError: índice inválido o qty no es un entero >= 1
        StockExceededError: qty > current_stock
    """
    position = _check_index(cart, index)
    number = parse_number(qty)
    if number is None or number < 1 or number != int(number):
        raise ValidationError('Quantity must be at least 1')
    if number > current_stock:
        raise StockExceededError()
    line = cart[position]
    return cart.with_line(position, LineItem(
        item_id=line.item_id,
        name=line.name,
        quantity=int(number),
        unit_price=line.unit_price,
        unit_cost=line.unit_cost,
        custom_price=line.custom_price,
        item_type=line.item_type,
        size=line.size,
    ))


def set_custom_price(cart: Cart, index: Any, price: Any) -> Cart:
    """Precio personalizado; si no es un número >= 0 vuelve al precio unitario."""
    position = _check_index(cart, index)
    line = cart[position]
    number = parse_number(price)
    if number is None or number < 0:
        number = line.unit_price
    return cart.with_line(position, LineItem(
        item_id=line.item_id,
        name=line.name,
        quantity=line.quantity,
        unit_price=line.unit_price,
        unit_cost=line.unit_cost,
        custom_price=number,
        item_type=line.item_type,
        size=line.size,
    ))


def remove_line(cart: Cart, index: Any) -> Cart:
    """Quita la línea. No toca el stock."""
    position = _check_index(cart, index)
    return Cart(cart.lines[:position] + cart.lines[position + 1:])


# ==============================================================================
# SERVICIO CON SESIÓN
# ==============================================================================

class CartService:
    """
    Servicio para el borrador de factura de la sesión.

    Responsabilidades:
    - Agregar/editar/quitar líneas validando contra el snapshot de stock
    - Ajustes (recargo, descuento, forma de pago, monto pagado, cliente)
    - Vista del borrador con totales formateados

    El borrador se almacena en session['billing'].
    """

    SESSION_KEY = 'billing'

    def __init__(self, inventory_service, customer_service=None):
        """
        Args:
            inventory_service: Servicio de inventario (snapshot de items)
            customer_service: Servicio de clientes (para seleccionar cliente)
        """
        self.inventory_service = inventory_service
        self.customer_service = customer_service

    def get_state(self) -> BillingState:
        return BillingState.from_dict(session.get(self.SESSION_KEY))

    def save_state(self, state: BillingState) -> BillingState:
        session[self.SESSION_KEY] = state.to_dict()
        session.modified = True
        return state

    def _stock_of(self, item_id: str) -> int:
        # Un item que ya no está en el snapshot cuenta como sin stock
        item = self.inventory_service.get_item(item_id)
        return item.stock if item else 0

    # =========================================================================
    # LÍNEAS
    # =========================================================================

    def add_item(self, item_id: str) -> BillingState:
        item = self.inventory_service.get_item(item_id)
        if item is None:
            raise ValidationError('Item not found')
        state = self.get_state()
        cart = add_line(state.cart, item, item.stock)
        return self.save_state(state.evolve(cart=cart))

    def update_quantity(self, index: Any, qty: Any) -> BillingState:
        state = self.get_state()
        position = _check_index(state.cart, index)
        stock = self._stock_of(state.cart[position].item_id)
        cart = set_quantity(state.cart, position, qty, stock)
        return self.save_state(state.evolve(cart=cart))

    def update_price(self, index: Any, price: Any) -> BillingState:
        state = self.get_state()
        cart = set_custom_price(state.cart, index, price)
        return self.save_state(state.evolve(cart=cart))

    def remove_item(self, index: Any) -> BillingState:
        state = self.get_state()
        return self.save_state(state.evolve(cart=remove_line(state.cart, index)))

    # =========================================================================
    # AJUSTES
    # =========================================================================

    def set_adjustments(self, data: Dict[str, Any]) -> BillingState:
        """
        Aplica los campos presentes en data: markup, discount,
        paymentMethod, amountPaid, billDate.
        """
        state = self.get_state()
        if 'markup' in data:
            state = billing_state.set_markup(state, data['markup'])
        if 'discount' in data:
            state = billing_state.set_discount(state, data['discount'])
        if 'paymentMethod' in data:
            state = billing_state.set_payment_method(state, data['paymentMethod'])
        if 'amountPaid' in data:
            state = billing_state.set_amount_paid(state, data['amountPaid'])
        if 'billDate' in data:
            state = billing_state.set_bill_date(state, data['billDate'])
        return self.save_state(state)

    def select_customer(self, customer_id: Optional[str]) -> BillingState:
        """Selecciona (o quita, con None) el cliente del borrador."""
        customer: Optional[Customer] = None
        if customer_id:
            customer = self.customer_service.get_customer(customer_id)
        state = billing_state.select_customer(self.get_state(), customer)
        return self.save_state(state)

    def clear(self) -> BillingState:
        """Descarta el borrador completo."""
        return self.save_state(billing_state.reset(self.get_state()))

    # =========================================================================
    # VISTA
    # =========================================================================

    def get_view(self, state: BillingState = None) -> Dict[str, Any]:
        """
        Borrador con totales formateados a 2 decimales.

        Returns:
            Dict listo para jsonify
        """
        state = state or self.get_state()
        totals = totals_for(state)
        lines = []
        for index, line in enumerate(state.cart):
            lines.append({
                'index': index,
                'itemId': line.item_id,
                'label': line.label(),
                'qty': line.quantity,
                'unitPrice': format_money(line.unit_price),
                'customPrice': format_money(line.price),
                'total': format_money(line.total),
            })
        return {
            'draftId': state.draft_id,
            'items': lines,
            'itemsCount': len(state.cart),
            'customer': state.customer.to_dict() if state.customer else None,
            'markup': state.markup,
            'discount': state.discount,
            'paymentMethod': state.payment_method.value,
            'amountPaid': state.amount_paid,
            'billDate': state.bill_date,
            'totals': {
                'subtotal': format_money(totals.subtotal),
                'markup': format_money(totals.markup_amount),
                'discount': format_money(totals.discount_amount),
                'grandTotal': format_money(totals.grand_total),
                'profit': format_money(totals.profit),
                'paid': format_money(totals.paid),
                'remaining': format_money(totals.remaining),
                'newBalance': format_money(totals.projected_new_balance),
            },
            'isCredit': state.payment_method == PaymentMethod.CREDIT,
        }
