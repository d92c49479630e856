# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto central para obtener el cliente HTTP, los repositorios y los
# servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (se inyecta un PersistenceClient con una sesión falsa)
#   - Cambiar el backend sin tocar servicios ni rutas
# ==============================================================================

from typing import Optional

from hardware_billing import config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (backend REST + JSON local)
# ═══════════════════════════════════════════════════════════════════════════════
from hardware_billing.repositories import (
    ActivityRepository,
    BillRepository,
    CustomerRepository,
    ItemRepository,
    PersistenceClient,
    ReportRepository,
    TransactionRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from hardware_billing.services import (
    ActivityService,
    BillingService,
    CartService,
    CustomerService,
    InFlightRegistry,
    InventoryService,
    PaymentService,
    ReportService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación (singleton).

    Uso:
        container = get_container()
        bills = container.billing_service.list_bills()

    En tests:
        AppContainer.reset_instance()
        container = get_container(data_dir=tmp_path, client=fake_client)
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, data_dir: str = None, client: PersistenceClient = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, data_dir: str = None, client: PersistenceClient = None):
        """
        Args:
            data_dir: Carpeta del registro de actividad (default config.DATA_DIR)
            client: Cliente HTTP ya construido (default: desde config)
        """
        if self._initialized:
            return

        self._data_dir = data_dir or config.DATA_DIR
        self._api_client: Optional[PersistenceClient] = client

        # Un solo registro de peticiones en curso para toda la app
        self.registry = InFlightRegistry()

        self.reset()
        self._initialized = True

    # =========================================================================
    # CLIENTE Y REPOSITORIOS
    # =========================================================================

    @property
    def api_client(self) -> PersistenceClient:
        """Cliente del servicio de persistencia (singleton)."""
        if self._api_client is None:
            self._api_client = PersistenceClient(
                config.API_BASE_URL,
                token=config.API_TOKEN,
                timeout=config.API_TIMEOUT,
            )
        return self._api_client

    @property
    def item_repo(self) -> ItemRepository:
        if self._item_repo is None:
            self._item_repo = ItemRepository(self.api_client)
        return self._item_repo

    @property
    def customer_repo(self) -> CustomerRepository:
        if self._customer_repo is None:
            self._customer_repo = CustomerRepository(self.api_client)
        return self._customer_repo

    @property
    def bill_repo(self) -> BillRepository:
        if self._bill_repo is None:
            self._bill_repo = BillRepository(self.api_client)
        return self._bill_repo

    @property
    def transaction_repo(self) -> TransactionRepository:
        if self._transaction_repo is None:
            self._transaction_repo = TransactionRepository(self.api_client)
        return self._transaction_repo

    @property
    def report_repo(self) -> ReportRepository:
        if self._report_repo is None:
            self._report_repo = ReportRepository(self.api_client)
        return self._report_repo

    @property
    def activity_repo(self) -> ActivityRepository:
        """Repositorio de actividad (activity.json local)."""
        if self._activity_repo is None:
            self._activity_repo = ActivityRepository(self._data_dir)
        return self._activity_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def activity_service(self) -> ActivityService:
        if self._activity_service is None:
            self._activity_service = ActivityService(self.activity_repo)
        return self._activity_service

    @property
    def inventory_service(self) -> InventoryService:
        if self._inventory_service is None:
            self._inventory_service = InventoryService(
                self.item_repo,
                self.activity_service,
                self.registry
            )
        return self._inventory_service

    @property
    def customer_service(self) -> CustomerService:
        if self._customer_service is None:
            self._customer_service = CustomerService(
                self.customer_repo,
                self.transaction_repo,
                self.activity_service,
                self.registry
            )
        return self._customer_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.inventory_service, self.customer_service)
        return self._cart_service

    @property
    def billing_service(self) -> BillingService:
        if self._billing_service is None:
            self._billing_service = BillingService(
                self.bill_repo,
                self.customer_repo,
                self.inventory_service,
                self.activity_service,
                self.registry
            )
        return self._billing_service

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            self._payment_service = PaymentService(
                self.transaction_repo,
                self.activity_service,
                self.registry
            )
        return self._payment_service

    @property
    def report_service(self) -> ReportService:
        if self._report_service is None:
            self._report_service = ReportService(self.report_repo)
        return self._report_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia repositorios y servicios (el cliente HTTP se conserva).
        Útil para testing o para descartar el snapshot de items.
        """
        self._item_repo = None
        self._customer_repo = None
        self._bill_repo = None
        self._transaction_repo = None
        self._report_repo = None
        self._activity_repo = None

        self._activity_service = None
        self._inventory_service = None
        self._customer_service = None
        self._cart_service = None
        self._billing_service = None
        self._payment_service = None
        self._report_service = None

    @classmethod
    def get_instance(cls, data_dir: str = None, client: PersistenceClient = None) -> 'AppContainer':
        """
        Args:
            data_dir, client: Solo se usan en la primera llamada
        """
        if cls._instance is None:
            return cls(data_dir, client)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(data_dir: str = None, client: PersistenceClient = None) -> AppContainer:
    """Contenedor de dependencias global."""
    return AppContainer.get_instance(data_dir, client)
