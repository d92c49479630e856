# ==============================================================================
# REPOSITORIO DE TRANSACCIONES Y PAGOS
# ==============================================================================
# Las transacciones son del backend (solo lectura aquí).
# POST /payments registra un abono manual que el backend aplica al saldo.
# ==============================================================================

from typing import Any, Dict, List

from hardware_billing.models import Transaction
from hardware_billing.repositories.api_client import RemoteRepository


class TransactionRepository(RemoteRepository):
    """Acceso al libro mayor de clientes."""

    def list_for_customer(self, customer_id: str) -> List[Transaction]:
        """GET /transactions?customerId=:id"""
        error = 'Failed to fetch transactions'
        data = self._expect_list(
            self.client.get('/transactions', error, params={'customerId': customer_id}),
            error
        )
        return [Transaction.from_dict(d) for d in data if isinstance(d, dict)]

    def create_payment(self, payload: Dict[str, Any]) -> Any:
        """POST /payments con {customerId, amount, paymentMethod, description}."""
        return self.client.post('/payments', payload, 'Failed to record payment')
