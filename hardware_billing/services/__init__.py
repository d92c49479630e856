# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los errores se lanzan como subclases de BillingError (errors.py)
#
# ESTRUCTURA:
# ├── totals_service.py    → Calculadora de totales (pura)
# ├── billing_state.py     → Reductores del borrador de factura
# ├── cart_service.py      → Líneas del carrito + borrador en sesión
# ├── billing_service.py   → Checkout, número de factura, historial
# ├── validation.py        → Validación de clientes e items
# ├── request_guard.py     → Guard de peticiones en curso
# ├── inventory_service.py → Snapshot y gestión de items
# ├── customer_service.py  → Clientes y sus transacciones
# ├── payment_service.py   → Pagos manuales
# ├── report_service.py    → Reporte de ventas
# ├── export_service.py    → CSV y recibo imprimible
# └── activity_service.py  → Registro de actividad
# ==============================================================================

from hardware_billing.services import billing_state
from hardware_billing.services.totals_service import apply_adjustments, calculate_totals, totals_for
from hardware_billing.services.request_guard import InFlightRegistry
from hardware_billing.services.activity_service import ActivityService
from hardware_billing.services.inventory_service import InventoryService
from hardware_billing.services.customer_service import CustomerService
from hardware_billing.services.cart_service import CartService
from hardware_billing.services.billing_service import BillingService, CheckoutResult
from hardware_billing.services.payment_service import PaymentService
from hardware_billing.services.report_service import ReportService

__all__ = [
    'billing_state',
    'apply_adjustments',
    'calculate_totals',
    'totals_for',
    'InFlightRegistry',
    'ActivityService',
    'InventoryService',
    'CustomerService',
    'CartService',
    'BillingService',
    'CheckoutResult',
    'PaymentService',
    'ReportService',
]
