# ==============================================================================
# PROFILING DE RUTAS Y LLAMADAS AL BACKEND
# ==============================================================================
# Cada petición Flask deja una línea en logs/performance.log; las que pasan
# los umbrales también van a logs/slow_routes.log. Las funciones marcadas
# con @profile_function (las que llaman al servicio de persistencia) acumulan
# estadísticas en memoria y las lentas se anotan en logs/slow_functions.log.
#
# Formato de línea:
#   2024-03-05 10:00:00 | 200 |    412 ms | POST /api/cart/checkout | Guardar factura
#
# ACTIVAR/DESACTIVAR: BILLING_ENABLE_PROFILING=0
# ==============================================================================

import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Dict

from hardware_billing import config

ENABLE_PROFILING = config.ENABLE_PROFILING

# Milisegundos. Cada llamada cruza la red, por eso son más altos que en local.
THRESHOLD_WARNING = 500
THRESHOLD_CRITICAL = 1500

LOGS_DIR = config.LOGS_DIR
PERFORMANCE_LOG = os.path.join(LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(LOGS_DIR, 'slow_functions.log')

# Nombre legible por "MÉTODO regla"
ROUTE_NAMES = {
    'GET /api/items': 'Listar items',
    'POST /api/items': 'Crear item',
    'PUT /api/items/<item_id>': 'Editar item',
    'DELETE /api/items/<item_id>': 'Eliminar item',
    'GET /api/customers': 'Listar clientes',
    'POST /api/customers': 'Crear cliente',
    'PUT /api/customers/<customer_id>': 'Editar cliente',
    'DELETE /api/customers/<customer_id>': 'Eliminar cliente',
    'GET /api/customers/<customer_id>/transactions': 'Ver transacciones',

    'GET /api/cart': 'Ver factura en curso',
    'POST /api/cart/add': 'Agregar item a la factura',
    'POST /api/cart/quantity': 'Cambiar cantidad',
    'POST /api/cart/price': 'Cambiar precio',
    'POST /api/cart/remove': 'Quitar línea',
    'POST /api/cart/adjustments': 'Recargo/descuento/pago',
    'POST /api/cart/customer': 'Seleccionar cliente',
    'POST /api/cart/clear': 'Descartar factura',
    'POST /api/cart/checkout': 'Guardar factura',
    'GET /api/cart/bill-number': 'Número de factura',

    'GET /api/bills': 'Historial de facturas',
    'GET /api/bills/<bill_id>': 'Detalle de factura',
    'POST /api/payments': 'Registrar pago',
    'GET /api/reports/sales': 'Reporte de ventas',
    'GET /api/activity': 'Registro de actividad',

    'GET /receipt/<bill_id>': 'Recibo de factura',
    'GET /cart/receipt': 'Recibo de factura en curso',
    'GET /bills/export': 'Exportar facturas CSV',
    'GET /customers/export': 'Exportar clientes CSV',
    'GET /customers/<customer_id>/transactions/export': 'Exportar transacciones CSV',
    'GET /reports/sales/export': 'Exportar reporte CSV',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESCRITURA
# ═══════════════════════════════════════════════════════════════════════════

_write_lock = threading.Lock()


def _now():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _level(time_ms):
    """None, 'WARNING' o 'CRITICAL' según los umbrales."""
    if time_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if time_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


def _append(filepath, line):
    try:
        with _write_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as fh:
                fh.write(line + '\n')
    except OSError as exc:
        # El profiling nunca debe tumbar una petición
        print(f'[ADVERTENCIA] No se pudo escribir {filepath}: {exc}')


def route_label(method, rule):
    return ROUTE_NAMES.get(f'{method} {rule}', f'{method} {rule}')


def log_route_performance(method, path, rule, time_ms, status=None):
    """
    Una línea por petición en performance.log.

    Args:
        path: Ruta pedida (/api/bills/65f0...)
        rule: Regla de Flask (/api/bills/<bill_id>), para el nombre legible
    """
    if not ENABLE_PROFILING:
        return
    code = status if status is not None else '-'
    _append(
        PERFORMANCE_LOG,
        f'{_now()} | {code} | {time_ms:6.0f} ms | {method} {path} | {route_label(method, rule)}'
    )


def log_slow_route(method, path, rule, time_ms, level='WARNING'):
    if not ENABLE_PROFILING:
        return
    threshold = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
    _append(
        SLOW_ROUTES_LOG,
        f'{_now()} [{level}] {route_label(method, rule)} ({method} {path}) '
        f'{time_ms:.0f} ms >= {threshold} ms'
    )


# ═══════════════════════════════════════════════════════════════════════════
# HOOKS DE FLASK
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """Registra el cronómetro de peticiones en la app (si está activado)."""
    if not ENABLE_PROFILING:
        return

    from flask import g, request

    @app.before_request
    def _profiling_start():
        g.profiling_start = time.perf_counter()

    @app.after_request
    def _profiling_stop(response):
        start = g.pop('profiling_start', None)
        if start is None or request.path.startswith('/static'):
            return response

        elapsed_ms = (time.perf_counter() - start) * 1000
        rule = request.url_rule.rule if request.url_rule else request.path
        log_route_performance(request.method, request.path, rule, elapsed_ms, response.status_code)
        level = _level(elapsed_ms)
        if level:
            log_slow_route(request.method, request.path, rule, elapsed_ms, level)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class _CallStats:
    calls: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def add(self, elapsed_ms):
        self.calls += 1
        self.total_ms += elapsed_ms
        self.max_ms = max(self.max_ms, elapsed_ms)

    def summary(self):
        avg = self.total_ms / self.calls if self.calls else 0
        return {'calls': self.calls, 'avg_time': round(avg, 2), 'max_time': round(self.max_ms, 2)}


_stats: Dict[str, _CallStats] = {}
_stats_lock = threading.Lock()


def profile_function(func=None, name=None):
    """
    Mide una función (normalmente una que llama al backend).

    Uso:
        @profile_function
        def reload(self): ...

        @profile_function(name="Guardar factura")
        def checkout(self, state): ...
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn
        label = name or fn.__name__

        @wraps(fn)
        def timed(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                with _stats_lock:
                    _stats.setdefault(label, _CallStats()).add(elapsed_ms)
                level = _level(elapsed_ms)
                if level:
                    _append(SLOW_FUNCTIONS_LOG, f'{_now()} [{level}] {label} {elapsed_ms:.0f} ms')

        return timed

    if func is not None:
        return decorator(func)
    return decorator


def get_function_stats():
    """{nombre: {calls, avg_time, max_time}} (ms)"""
    with _stats_lock:
        return {label: stats.summary() for label, stats in _stats.items()}


def reset_stats():
    with _stats_lock:
        _stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
    'log_route_performance',
    'log_slow_route',
]
