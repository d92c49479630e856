# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Todos los valores se leen desde variables de entorno con un default seguro
# para desarrollo. main.py los vuelca en app.config al iniciar.
#
# Comando (producción):
#   export BILLING_API_URL="https://mi-backend.example.com/api"
#   export BILLING_SECRET_KEY="clave_secreta_muy_larga_y_aleatoria"
# ==============================================================================

import os

BASE = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name: str, default: bool) -> bool:
    """Interpreta '1', 'true', 'yes', 'on' como verdadero."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# ═══════════════════════════════════════════════════════════════════════════════
# MODO PRODUCCIÓN
# ═══════════════════════════════════════════════════════════════════════════════
# True = exige configuración real (clave secreta, URL del backend)
# False = modo desarrollo
PRODUCTION_MODE = _env_flag('BILLING_PRODUCTION', False)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIO DE PERSISTENCIA (backend REST)
# ═══════════════════════════════════════════════════════════════════════════════
API_BASE_URL = os.environ.get('BILLING_API_URL', 'http://localhost:5000/api').rstrip('/')
API_TOKEN = os.environ.get('BILLING_API_TOKEN') or None
API_TIMEOUT = _env_float('BILLING_API_TIMEOUT', 15.0)

# ═══════════════════════════════════════════════════════════════════════════════
# SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
DEFAULT_SECRET = 'hardware_billing_dev_secret_change_in_production'
SECRET_KEY = os.environ.get('BILLING_SECRET_KEY')

# ═══════════════════════════════════════════════════════════════════════════════
# ARCHIVOS LOCALES (registro de actividad y logs de rendimiento)
# ═══════════════════════════════════════════════════════════════════════════════
DATA_DIR = os.environ.get('BILLING_DATA_DIR', BASE)
LOGS_DIR = os.environ.get('BILLING_LOGS_DIR', os.path.join(BASE, 'logs'))
ENABLE_PROFILING = _env_flag('BILLING_ENABLE_PROFILING', True)

# ═══════════════════════════════════════════════════════════════════════════════
# DATOS DE LA TIENDA (encabezado del recibo)
# ═══════════════════════════════════════════════════════════════════════════════
SHOP_NAME = os.environ.get('SHOP_NAME', 'PAKISTAN HARDWARE PVT LTD')
SHOP_ADDRESS = os.environ.get('SHOP_ADDRESS', 'PAKISTAN CHOWK MARDAN')
SHOP_PHONE = os.environ.get('SHOP_PHONE', '+9213456789')
CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', 'Rs.')

# ═══════════════════════════════════════════════════════════════════════════════
# SERVIDOR DE DESARROLLO
# ═══════════════════════════════════════════════════════════════════════════════
DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
PORT = int(os.environ.get('FLASK_PORT', 8000))
