# ==============================================================================
# SERVICIO DE ACTIVIDAD
# ==============================================================================
# Centraliza el registro local de operaciones con mensajes legibles.
# La regla: toda operación que cambia datos en el backend deja un registro.
# ==============================================================================

from typing import Any, Dict, List

from hardware_billing import config
from hardware_billing.models import Bill, Customer, Transaction
from hardware_billing.repositories.activity_repository import ActivityRepository


class ActivityService:
    """
    Registro y consulta de actividad.

    Tipos de evento: BILL, PAYMENT, CUSTOMER, ITEM, SYSTEM
    """

    TYPE_BILL = 'BILL'
    TYPE_PAYMENT = 'PAYMENT'
    TYPE_CUSTOMER = 'CUSTOMER'
    TYPE_ITEM = 'ITEM'
    TYPE_SYSTEM = 'SYSTEM'

    def __init__(self, activity_repo: ActivityRepository):
        self.activity_repo = activity_repo

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """El registro es local: si el disco falla se avisa y la operación sigue."""
        try:
            self.activity_repo.log(log_type, message, related_id, details)
        except OSError as exc:
            print(f'[ADVERTENCIA] No se pudo registrar actividad ({log_type}): {exc}')

    # =========================================================================
    # FACTURAS Y PAGOS
    # =========================================================================

    def log_bill_created(self, bill: Bill, customer_name: str, transactions: List[Transaction]) -> None:
        """Registra una factura guardada en el backend."""
        symbol = config.CURRENCY_SYMBOL
        message = (
            f"Bill #{bill.short_id} saved for {customer_name or 'N/A'} - "
            f"Total: {symbol} {bill.grand_total:.2f} - Paid: {symbol} {bill.partial_payment:.2f} - "
            f"Status: {bill.status.value}"
        )
        self.log(
            self.TYPE_BILL,
            message,
            bill.id,
            {
                'grand_total': bill.grand_total,
                'partial_payment': bill.partial_payment,
                'payment_type': bill.payment_type.value,
                'items_count': len(bill.items),
                'transactions': [t.id for t in transactions],
            }
        )

    def log_checkout_failed(self, customer_name: str, grand_total: float, error: str) -> None:
        message = f"Checkout failed for {customer_name or 'N/A'} ({config.CURRENCY_SYMBOL} {grand_total:.2f}): {error}"
        self.log(self.TYPE_BILL, message, details={'error': error})

    def log_payment(self, customer: Customer, amount: float, method: str) -> None:
        message = f"Payment received from {customer.name}: {config.CURRENCY_SYMBOL} {amount:.2f} ({method})"
        self.log(
            self.TYPE_PAYMENT,
            message,
            customer.id,
            {'amount': amount, 'method': method}
        )

    # =========================================================================
    # CLIENTES E ITEMS
    # =========================================================================

    def log_customer(self, action: str, name: str, customer_id: str = '') -> None:
        """
        Args:
            action: created, updated o deleted
        """
        self.log(self.TYPE_CUSTOMER, f"Customer {name} {action}", customer_id)

    def log_item(self, action: str, name: str, item_id: str = '') -> None:
        self.log(self.TYPE_ITEM, f"Item {name} {action}", item_id)

    def log_warning(self, message: str, related_id: str = '') -> None:
        self.log(self.TYPE_SYSTEM, message, related_id)

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_recent(self, limit: int = 100, log_type: str = None) -> List[Dict[str, Any]]:
        if log_type:
            return self.activity_repo.get_logs_by_type(log_type)[:limit]
        return self.activity_repo.get_recent_logs(limit)
