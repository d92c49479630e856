# ==============================================================================
# HARDWARE BILLING - Facturación y cuentas de clientes de la ferretería
# ==============================================================================
# La app Flask está en hardware_billing.main (ver wsgi.py en la raíz).
# ==============================================================================

__version__ = '1.0.0'
