# ==============================================================================
# SERVICIO DE CLIENTES
# ==============================================================================
# Alta, edición, baja y búsqueda de clientes.
# El saldo lo calcula el backend: aquí solo se envía balance=0 al crear.
# ==============================================================================

from typing import Any, Dict, List, Optional

from hardware_billing.errors import TransportError
from hardware_billing.models import Customer, Transaction
from hardware_billing.performance_logger import profile_function
from hardware_billing.repositories.customer_repository import CustomerRepository
from hardware_billing.repositories.transaction_repository import TransactionRepository
from hardware_billing.services.activity_service import ActivityService
from hardware_billing.services.request_guard import InFlightRegistry
from hardware_billing.services.validation import validate_customer


class CustomerService:
    """Servicio de clientes y de su libro mayor (solo lectura)."""

    def __init__(
        self,
        customer_repo: CustomerRepository,
        transaction_repo: TransactionRepository,
        activity_service: ActivityService = None,
        registry: InFlightRegistry = None
    ):
        self.customer_repo = customer_repo
        self.transaction_repo = transaction_repo
        self.activity_service = activity_service
        self.registry = registry or InFlightRegistry()

    @profile_function(name="Cargar clientes")
    def list_customers(self) -> List[Customer]:
        return self.customer_repo.list_customers()

    def get_customer(self, customer_id: str) -> Customer:
        return self.customer_repo.get_customer(customer_id)

    def refresh_customer(self, customer_id: str) -> Optional[Customer]:
        """
        Relee el cliente después de un pago ya guardado. None si falla:
        el pago no se anula por no poder mostrar el saldo nuevo.
        """
        try:
            return self.customer_repo.get_customer(customer_id)
        except TransportError as exc:
            print(f'[ADVERTENCIA] No se pudo releer el cliente {customer_id}: {exc.message}')
            if self.activity_service:
                self.activity_service.log_warning(f'Customer refresh failed: {exc.message}', customer_id)
            return None

    def search(self, term: str) -> List[Customer]:
        """
        Coincidencia parcial (sin mayúsculas) en nombre, teléfono o número
        de cuenta. Término vacío → lista vacía.
        """
        term = (term or '').strip().lower()
        if not term:
            return []
        return [
            c for c in self.list_customers()
            if term in c.name.lower()
            or term in c.phone.lower()
            or term in c.account_number.lower()
        ]

    def create_customer(self, data: Dict[str, Any]) -> Optional[Customer]:
        """
        Raises:
            ValidationError: Formulario inválido (no se envía nada)
            TransportError: Falla del backend (ej: número de cuenta repetido)
        """
        payload = validate_customer(data)
        payload['balance'] = 0
        with self.registry.guard(f"customer:create:{payload['accountNumber']}"):
            customer = self.customer_repo.create_customer(payload)
        if self.activity_service:
            self.activity_service.log_customer('created', payload['name'], customer.id if customer else '')
        return customer

    def update_customer(self, customer_id: str, data: Dict[str, Any]) -> Optional[Customer]:
        payload = validate_customer(data)
        with self.registry.guard(f"customer:update:{customer_id}"):
            customer = self.customer_repo.update_customer(customer_id, payload)
        if self.activity_service:
            self.activity_service.log_customer('updated', payload['name'], customer_id)
        return customer

    def delete_customer(self, customer_id: str) -> None:
        with self.registry.guard(f"customer:delete:{customer_id}"):
            self.customer_repo.delete_customer(customer_id)
        if self.activity_service:
            self.activity_service.log_customer('deleted', customer_id, customer_id)

    def list_transactions(self, customer_id: str) -> List[Transaction]:
        return self.transaction_repo.list_for_customer(customer_id)
