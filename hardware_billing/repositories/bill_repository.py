# ==============================================================================
# REPOSITORIO DE FACTURAS
# ==============================================================================
# Encapsula /bills del servicio de persistencia.
#
# Conciliación del libro mayor (lado backend, contrato del que dependemos):
# POST /bills → {bill, transactions}
#   - saldo del cliente = saldo anterior + (grandTotal - partialPayment)
#   - stock de cada item -= quantity
# ==============================================================================

from typing import Any, Dict, List, Optional

from hardware_billing.models import Bill
from hardware_billing.repositories.api_client import RemoteRepository


class BillRepository(RemoteRepository):
    """Acceso a facturas."""

    def list_bills(self, status: Optional[str] = None) -> List[Bill]:
        """
        GET /bills[?status=completed|pending]

        Args:
            status: Filtro de estado (None = todas)
        """
        error = 'Failed to fetch bills'
        params = {'status': status} if status else None
        data = self._expect_list(self.client.get('/bills', error, params=params), error)
        return [Bill.from_dict(d) for d in data if isinstance(d, dict)]

    def count_bills(self) -> int:
        """Cantidad total de facturas (para el número de factura sugerido)."""
        error = 'Failed to generate bill number'
        return len(self._expect_list(self.client.get('/bills', error), error))

    def get_bill(self, bill_id: str) -> Bill:
        error = 'Failed to fetch bill details'
        data = self._expect_dict(self.client.get(f'/bills/{bill_id}', error), error)
        return Bill.from_dict(data)

    def create_bill(self, payload: Dict[str, Any]) -> Any:
        """
        POST /bills

        Returns:
            Respuesta cruda; BillingService valida su estructura
        """
        return self.client.post('/bills', payload, 'Failed to save bill')
