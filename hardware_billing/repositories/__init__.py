# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia. Items, clientes,
# facturas, transacciones y reportes viven en el servicio de persistencia
# (REST); solo el registro de actividad se guarda en un JSON local.
#
# ESTRUCTURA:
# ├── interfaces.py              → Protocolos (contratos de los servicios)
# ├── api_client.py              → Cliente HTTP + RemoteRepository
# ├── base.py                    → Almacén JSON local (lista de registros)
# ├── item_repository.py         → /items
# ├── customer_repository.py     → /customers
# ├── bill_repository.py         → /bills
# ├── transaction_repository.py  → /transactions y /payments
# ├── report_repository.py       → /reports/sales
# └── activity_repository.py     → activity.json
# ==============================================================================

# Interfaces
from .interfaces import (
    IItemRepository,
    ICustomerRepository,
    IBillRepository,
    ITransactionRepository,
    IReportRepository,
    IActivityRepository,
)

# Implementaciones concretas
from .api_client import PersistenceClient, RemoteRepository
from .base import JsonListStore
from .item_repository import ItemRepository
from .customer_repository import CustomerRepository
from .bill_repository import BillRepository
from .transaction_repository import TransactionRepository
from .report_repository import ReportRepository
from .activity_repository import ActivityRepository

__all__ = [
    # Interfaces
    'IItemRepository',
    'ICustomerRepository',
    'IBillRepository',
    'ITransactionRepository',
    'IReportRepository',
    'IActivityRepository',

    # Clases base
    'PersistenceClient',
    'RemoteRepository',
    'JsonListStore',

    # Implementaciones
    'ItemRepository',
    'CustomerRepository',
    'BillRepository',
    'TransactionRepository',
    'ReportRepository',
    'ActivityRepository',
]
