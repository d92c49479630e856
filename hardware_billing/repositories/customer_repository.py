# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================
# Encapsula /customers del servicio de persistencia.
# El saldo (balance) nunca se escribe desde aquí salvo el 0 inicial al crear.
# ==============================================================================

from typing import Any, Dict, List, Optional

from hardware_billing.models import Customer
from hardware_billing.repositories.api_client import RemoteRepository


class CustomerRepository(RemoteRepository):
    """Acceso a clientes."""

    def list_customers(self) -> List[Customer]:
        error = 'Failed to fetch customers'
        data = self._expect_list(self.client.get('/customers', error), error)
        return [Customer.from_dict(d) for d in data if isinstance(d, dict)]

    def get_customer(self, customer_id: str) -> Customer:
        """
        GET /customers/:id

        Raises:
            TransportError: Si no existe o el backend falla
        """
        error = 'Failed to fetch customer details'
        data = self._expect_dict(self.client.get(f'/customers/{customer_id}', error), error)
        return Customer.from_dict(data)

    def create_customer(self, payload: Dict[str, Any]) -> Optional[Customer]:
        """POST /customers. Retorna el cliente creado si el backend lo devuelve."""
        data = self.client.post('/customers', payload, 'Failed to add customer')
        return Customer.from_dict(data) if isinstance(data, dict) else None

    def update_customer(self, customer_id: str, payload: Dict[str, Any]) -> Optional[Customer]:
        data = self.client.put(f'/customers/{customer_id}', payload, 'Failed to update customer')
        return Customer.from_dict(data) if isinstance(data, dict) else None

    def delete_customer(self, customer_id: str) -> None:
        self.client.delete(f'/customers/{customer_id}', 'Failed to delete customer')
