# ==============================================================================
# WSGI Entry Point - Para Gunicorn/Waitress en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/              <- Directorio de trabajo
#   ├── wsgi.py             <- Este archivo
#   ├── pyproject.toml
#   └── hardware_billing/   <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# Variables de entorno principales:
#   BILLING_API_URL      URL del servicio de persistencia
#   BILLING_SECRET_KEY   Clave de sesión (obligatoria en producción)
# ==============================================================================

from hardware_billing.main import app

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=8000)
