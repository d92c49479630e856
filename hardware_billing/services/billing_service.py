# ==============================================================================
# SERVICIO DE FACTURACIÓN
# ==============================================================================
# Cierra el borrador: valida, arma el payload de la factura, lo envía UNA
# vez al backend y verifica la respuesta {bill, transactions}.
#
# Orden de validación (ninguna toca el backend):
#   1. carrito vacío      → EmptyCartError
#   2. sin cliente        → NoCustomerError
#   3. crédito y pagado > total → OverpaymentError
#
# El backend aplica la factura al libro mayor:
#   saldo nuevo = saldo anterior + (grandTotal - partialPayment)
# ==============================================================================

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, List, Optional, Tuple

from hardware_billing import config
from hardware_billing.errors import (
    BillingError,
    EmptyCartError,
    InvalidResponseError,
    NoCustomerError,
    OverpaymentError,
    TransportError,
    ValidationError,
)
from hardware_billing.models import (
    Bill,
    BillLine,
    BillStatus,
    BillingState,
    Customer,
    LineItem,
    PaymentMethod,
    Transaction,
)
from hardware_billing.performance_logger import profile_function
from hardware_billing.repositories.bill_repository import BillRepository
from hardware_billing.repositories.customer_repository import CustomerRepository
from hardware_billing.services import billing_state
from hardware_billing.services.activity_service import ActivityService
from hardware_billing.services.request_guard import InFlightRegistry
from hardware_billing.services.totals_service import totals_for
from hardware_billing.utils import clamp, format_date_short, money, to_float

BILL_FILTERS = ('all', BillStatus.COMPLETED.value, BillStatus.PENDING.value)


@dataclass(frozen=True)
class CheckoutResult:
    """
    Resultado de un checkout exitoso.

    Attributes:
        bill: Factura creada por el backend
        transactions: Movimientos generados en la cuenta del cliente
        customer: Cliente releído tras la factura (None si no se pudo leer)
        message: Texto de confirmación para el usuario
        state: Borrador nuevo que reemplaza al facturado
    """
    bill: Bill
    transactions: Tuple[Transaction, ...]
    customer: Optional[Customer]
    message: str
    state: BillingState


def _persisted_line(line: LineItem) -> BillLine:
    base = BillLine.from_line(line)
    return replace(base, total=money(base.total), total_cost=money(base.total_cost))


def build_bill(state: BillingState) -> Bill:
    """
    Arma la factura a enviar a partir del borrador.

    El dinero se redondea a 2 decimales aquí (límite de persistencia);
    el estado se decide con el total ya redondeado. El pago a crédito se
    compara con el total antes de redondear.

    Raises:
        EmptyCartError, NoCustomerError
        ValidationError: Pago a crédito negativo
        OverpaymentError: Pago a crédito mayor al total
    """
    if state.cart.is_empty:
        raise EmptyCartError()
    if state.customer is None:
        raise NoCustomerError()

    totals = totals_for(state)
    grand_total = money(totals.grand_total)
    if state.payment_method == PaymentMethod.CASH:
        paid = grand_total
    else:
        if totals.paid < 0:
            raise ValidationError('Amount paid cannot be negative!')
        if totals.paid > totals.grand_total:
            raise OverpaymentError()
        paid = money(totals.paid)

    status = BillStatus.COMPLETED if paid >= grand_total else BillStatus.PENDING
    return Bill(
        customer_id=state.customer.id,
        customer_name=state.customer.name,
        items=tuple(_persisted_line(line) for line in state.cart),
        subtotal=money(totals.subtotal),
        markup=clamp(to_float(state.markup), 0, 100),
        discount=clamp(to_float(state.discount), 0, 100),
        grand_total=grand_total,
        payment_type=state.payment_method,
        partial_payment=paid,
        status=status,
    )


def build_bill_payload(state: BillingState) -> dict:
    """Cuerpo de POST /bills para el borrador."""
    return build_bill(state).to_payload()


def checkout_message(bill: Bill, transactions: List[Transaction]) -> str:
    """
    "Bill #a1b2c3 saved successfully! Transactions: bill: Rs. 313.50 (...), ..."
    """
    symbol = config.CURRENCY_SYMBOL
    parts = ', '.join(
        f"{t.type}: {symbol} {abs(t.amount):.2f} ({t.description})"
        for t in transactions
    )
    return f"Bill #{bill.short_id} saved successfully! Transactions: {parts}"


class BillingService:
    """
    Servicio de facturas.

    Responsabilidades:
    - Checkout del borrador (con guard de petición en curso)
    - Número de factura sugerido
    - Historial y detalle de facturas
    """

    def __init__(
        self,
        bill_repo: BillRepository,
        customer_repo: CustomerRepository,
        inventory_service=None,
        activity_service: ActivityService = None,
        registry: InFlightRegistry = None
    ):
        self.bill_repo = bill_repo
        self.customer_repo = customer_repo
        self.inventory_service = inventory_service
        self.activity_service = activity_service
        self.registry = registry or InFlightRegistry()

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    @staticmethod
    def _parse_response(data: Any) -> Tuple[Bill, Tuple[Transaction, ...]]:
        """
        Exige {bill: {_id: ...}, transactions: [...]}.

        Raises:
            InvalidResponseError: Si falta el id o las transacciones
        """
        if not isinstance(data, dict):
            raise InvalidResponseError('Invalid bill response from server')
        raw_bill = data.get('bill')
        raw_transactions = data.get('transactions')
        if not isinstance(raw_bill, dict) or not str(raw_bill.get('_id') or raw_bill.get('id') or '').strip():
            raise InvalidResponseError('Invalid bill response from server')
        if not isinstance(raw_transactions, list):
            raise InvalidResponseError('Invalid bill response from server')
        transactions = tuple(
            Transaction.from_dict(t) for t in raw_transactions if isinstance(t, dict)
        )
        return Bill.from_dict(raw_bill), transactions

    def _refresh_after_checkout(self, customer_id: str) -> Optional[Customer]:
        """Relee el cliente y el stock. Una falla aquí no anula la factura."""
        customer = None
        try:
            customer = self.customer_repo.get_customer(customer_id)
        except TransportError as exc:
            print(f'[ADVERTENCIA] Factura guardada pero no se pudo releer el cliente: {exc.message}')
            if self.activity_service:
                self.activity_service.log_warning(
                    f'Customer refresh after checkout failed: {exc.message}', customer_id
                )
        if self.inventory_service is not None:
            try:
                self.inventory_service.reload()
            except TransportError as exc:
                print(f'[ADVERTENCIA] Factura guardada pero no se pudo recargar el stock: {exc.message}')
                if self.activity_service:
                    self.activity_service.log_warning(f'Item reload after checkout failed: {exc.message}')
        return customer

    @profile_function(name="Guardar factura")
    def checkout(self, state: BillingState) -> CheckoutResult:
        """
        Guarda el borrador como factura.

        El borrador recibido no se modifica; en caso de error el llamador
        conserva su estado tal cual.

        Raises:
            EmptyCartError, NoCustomerError, OverpaymentError: Sin llamar al backend
            DuplicateRequestError: El mismo borrador ya se está guardando
            TransportError: Falla de red o rechazo del backend
            InvalidResponseError: Respuesta sin id de factura
        """
        bill = build_bill(state)

        with self.registry.guard(f'checkout:{state.draft_id}'):
            try:
                data = self.bill_repo.create_bill(bill.to_payload())
                created, transactions = self._parse_response(data)
            except BillingError as exc:
                if self.activity_service:
                    self.activity_service.log_checkout_failed(
                        bill.customer_name, bill.grand_total, exc.message
                    )
                raise

        if not created.customer_name:
            created = replace(created, customer_name=bill.customer_name)

        if self.activity_service:
            self.activity_service.log_bill_created(created, bill.customer_name, list(transactions))

        customer = self._refresh_after_checkout(bill.customer_id)

        return CheckoutResult(
            bill=created,
            transactions=transactions,
            customer=customer,
            message=checkout_message(created, list(transactions)),
            state=billing_state.reset(state),
        )

    # =========================================================================
    # HISTORIAL
    # =========================================================================

    def next_bill_number(self, today: date = None) -> str:
        """BILL-<año>-<cantidad de facturas + 1, 3 dígitos>"""
        today = today or date.today()
        count = self.bill_repo.count_bills()
        return f"BILL-{today.year}-{count + 1:03d}"

    @profile_function(name="Cargar facturas")
    def list_bills(self, status: str = 'all', search: str = '') -> List[Bill]:
        """
        Args:
            status: all, completed o pending
            search: Palabras clave; cada una debe aparecer en el cliente,
                el id de la factura o la fecha ('5 mar 2024')

        Raises:
            ValidationError: Filtro desconocido
        """
        status = (status or 'all').strip().lower()
        if status not in BILL_FILTERS:
            raise ValidationError('Invalid status filter')
        bills = self.bill_repo.list_bills(None if status == 'all' else status)

        keywords = (search or '').lower().split()
        if not keywords:
            return bills

        def matches(bill: Bill) -> bool:
            fields = (bill.customer_name.lower(), bill.id.lower(), format_date_short(bill.created_at).lower())
            return all(any(k in f for f in fields) for k in keywords)

        return [bill for bill in bills if matches(bill)]

    def get_bill(self, bill_id: str) -> Bill:
        return self.bill_repo.get_bill(bill_id)
