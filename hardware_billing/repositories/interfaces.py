# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que usan los servicios. Permiten:
#
# 1. INDEPENDENCIA DEL TRANSPORTE
#    - Los servicios dependen de estos protocolos, no del cliente HTTP
#
# 2. TESTING
#    - Un doble en memoria que cumpla el protocolo reemplaza al backend
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from hardware_billing.models import Bill, Customer, Item, SalesReportRow, Transaction


@runtime_checkable
class IItemRepository(Protocol):
    """Catálogo de items (GET/POST/PUT/DELETE /items)."""

    def list_items(self) -> List[Item]:
        ...

    def create_item(self, payload: Dict[str, Any]) -> Any:
        ...

    def update_item(self, item_id: str, payload: Dict[str, Any]) -> Any:
        ...

    def delete_item(self, item_id: str) -> None:
        ...


@runtime_checkable
class ICustomerRepository(Protocol):
    """Clientes (/customers)."""

    def list_customers(self) -> List[Customer]:
        ...

    def get_customer(self, customer_id: str) -> Customer:
        ...

    def create_customer(self, payload: Dict[str, Any]) -> Optional[Customer]:
        ...

    def update_customer(self, customer_id: str, payload: Dict[str, Any]) -> Optional[Customer]:
        ...

    def delete_customer(self, customer_id: str) -> None:
        ...


@runtime_checkable
class IBillRepository(Protocol):
    """Facturas (/bills). create_bill retorna la respuesta sin validar."""

    def list_bills(self, status: Optional[str] = None) -> List[Bill]:
        ...

    def count_bills(self) -> int:
        ...

    def get_bill(self, bill_id: str) -> Bill:
        ...

    def create_bill(self, payload: Dict[str, Any]) -> Any:
        ...


@runtime_checkable
class ITransactionRepository(Protocol):
    """Libro mayor (/transactions) y pagos manuales (/payments)."""

    def list_for_customer(self, customer_id: str) -> List[Transaction]:
        ...

    def create_payment(self, payload: Dict[str, Any]) -> Any:
        ...


@runtime_checkable
class IReportRepository(Protocol):

    def sales_report(
        self,
        period: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[SalesReportRow]:
        ...


@runtime_checkable
class IActivityRepository(Protocol):
    """Registro local de actividad."""

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        ...

    def load(self) -> List[Dict[str, Any]]:
        ...

    def get_recent_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        ...
