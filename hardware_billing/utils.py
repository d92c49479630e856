# ==============================================================================
# UTILIDADES DE CONVERSIÓN Y FORMATO
# ==============================================================================
# Reglas de sustitución por defecto (contrato documentado):
# - Números vacíos, None o no numéricos → default (0)
# - El dinero se redondea a 2 decimales SOLO al presentar o persistir
# ==============================================================================

import math
from datetime import datetime
from typing import Any, Optional


def to_float(value: Any, default: float = 0.0) -> float:
    """
    Convierte un valor a float aplicando el default si no es numérico.

    Args:
        value: Valor crudo (str, int, float, None)
        default: Valor a usar si no se puede convertir

    Returns:
        Número finito
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_int(value: Any, default: int = 0) -> int:
    """Como to_float pero trunca a entero (parseInt)."""
    number = to_float(value, None)
    if number is None:
        return default
    return int(number)


def parse_number(value: Any) -> Optional[float]:
    """Retorna el número o None si el valor no es numérico."""
    return to_float(value, None)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def money(value: float) -> float:
    """Redondeo monetario para el límite de persistencia."""
    return round(value + 0.0, 2)


def format_money(value: Any) -> str:
    """Dos decimales exactos, para presentación."""
    return f"{to_float(value):.2f}"


def parse_timestamp(ts: Any) -> Optional[datetime]:
    """
    Parsea un timestamp ISO del backend ('2024-03-05T10:00:00.000Z').
    Retorna None si no puede parsear.
    """
    if not ts or not isinstance(ts, str):
        return None
    try:
        return datetime.fromisoformat(ts.replace('Z', '+00:00'))
    except ValueError:
        pass
    try:
        return datetime.strptime(ts[:10], '%Y-%m-%d')
    except ValueError:
        return None


def format_date_gb(ts: Any) -> str:
    """Fecha en formato dd/mm/YYYY (en-GB). Vacío si no se puede parsear."""
    dt = ts if isinstance(ts, datetime) else parse_timestamp(ts)
    if dt is None:
        return ''
    return dt.strftime('%d/%m/%Y')


MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


def format_date_short(ts: Any) -> str:
    """Fecha como '5 Mar 2024' (la que se ve en el historial). Vacío si no se puede parsear."""
    dt = ts if isinstance(ts, datetime) else parse_timestamp(ts)
    if dt is None:
        return ''
    return f"{dt.day} {MONTH_NAMES[dt.month - 1][:3]} {dt.year}"
