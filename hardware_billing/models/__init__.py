# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Inmutables (frozen): cada cambio produce una instancia nueva
#   - Serialización explícita hacia/desde el formato del backend
# ==============================================================================

from .entities import (
    # Enumeraciones
    PaymentMethod,
    BillStatus,
    TransactionType,
    ReportPeriod,

    # Inventario y clientes
    Item,
    Customer,

    # Carrito y totales
    LineItem,
    Cart,
    Totals,
    BillingState,

    # Facturas y libro mayor
    Bill,
    BillLine,
    Transaction,

    # Reportes
    SalesReportRow,
)

__all__ = [
    'PaymentMethod',
    'BillStatus',
    'TransactionType',
    'ReportPeriod',
    'Item',
    'Customer',
    'LineItem',
    'Cart',
    'Totals',
    'BillingState',
    'Bill',
    'BillLine',
    'Transaction',
    'SalesReportRow',
]
