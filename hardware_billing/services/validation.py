# ==============================================================================
# VALIDACIÓN DE CLIENTES E ITEMS
# ==============================================================================
# Se ejecuta antes de cualquier alta o edición. Falla rápido con el primer
# problema encontrado y no se envía nada al backend.
# ==============================================================================

import re
from typing import Any, Dict

from hardware_billing.errors import ValidationError
from hardware_billing.utils import to_float, to_int

PHONE_RE = re.compile(r'^[0-9]{10}$')
ACCOUNT_RE = re.compile(r'^[A-Za-z0-9-]+$')
BARCODE_RE = re.compile(r'^[A-Za-z0-9]+$')


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return '' if value is None else str(value).strip()


def validate_customer(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida el formulario de cliente.

    Args:
        data: {name, phone, accountNumber, address?}

    Returns:
        Payload limpio para el backend (sin balance)

    Raises:
        ValidationError: Con el motivo legible
    """
    name = _text(data, 'name')
    phone = _text(data, 'phone')
    account = _text(data, 'accountNumber')

    if not name or not phone or not account:
        raise ValidationError('Name, phone, and account number are required')
    if not PHONE_RE.match(phone):
        raise ValidationError('Phone number must be 10 digits')
    if not ACCOUNT_RE.match(account):
        raise ValidationError('Account number must be alphanumeric with dashes')

    return {
        'name': name,
        'phone': phone,
        'address': _text(data, 'address'),
        'accountNumber': account,
    }


def coerce_item(data: Dict[str, Any]) -> Dict[str, Any]:
    """Números del formulario de item: blanco/no numérico → 0, stock entero."""
    return {
        'name': _text(data, 'name'),
        'type': _text(data, 'type'),
        'size': _text(data, 'size'),
        'barcode': _text(data, 'barcode'),
        'costPrice': to_float(data.get('costPrice')),
        'sellingPrice': to_float(data.get('sellingPrice')),
        'taxRate': to_float(data.get('taxRate')),
        'stock': to_int(data.get('stock')),
    }


def validate_item(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida el formulario de item.

    Returns:
        Payload con los números ya convertidos

    Raises:
        ValidationError: Con el motivo legible
    """
    item = coerce_item(data)
    if not item['name']:
        raise ValidationError('Name is required')
    if item['costPrice'] < 0:
        raise ValidationError('Cost price cannot be negative')
    if item['sellingPrice'] < 0:
        raise ValidationError('Selling price cannot be negative')
    if not 0 <= item['taxRate'] <= 100:
        raise ValidationError('Tax rate must be between 0 and 100')
    if item['stock'] < 0:
        raise ValidationError('Stock cannot be negative')
    if item['barcode'] and not BARCODE_RE.match(item['barcode']):
        raise ValidationError('Barcode must be alphanumeric')
    return item
