# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Todas las operaciones de servicio fallan lanzando una subclase de
# BillingError. Las rutas Flask las convierten en JSON {'ok': False, 'error'}
# con el código HTTP de la clase. Ningún error es fatal para la aplicación.
# ==============================================================================

from typing import Any, Dict, Optional


class BillingError(Exception):
    """
    Error base de la aplicación.

    Attributes:
        message: Mensaje legible para mostrar al usuario
        http_status: Código HTTP sugerido para la respuesta
    """

    http_status = 400
    default_message = 'Operation failed'

    def __init__(self, message: str = None, **details: Any):
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a la respuesta JSON estándar de la API."""
        payload = {'ok': False, 'error': self.message}
        payload.update(self.details)
        return payload


class ValidationError(BillingError):
    """Entrada de usuario inválida. No hay cambio de estado."""
    default_message = 'Invalid input'


class OutOfStockError(BillingError):
    """El item no tiene stock (stock < 1)."""
    http_status = 409
    default_message = 'Item out of stock!'


class StockExceededError(BillingError):
    """La cantidad pedida supera el stock disponible."""
    http_status = 409
    default_message = 'Quantity exceeds available stock!'


class EmptyCartError(BillingError):
    default_message = 'No items in bill!'


class NoCustomerError(BillingError):
    default_message = 'Please select a customer!'


class OverpaymentError(BillingError):
    default_message = 'Amount paid cannot exceed the grand total!'


class DuplicateRequestError(BillingError):
    """Ya hay una petición igual en curso (token pendiente)."""
    http_status = 409
    default_message = 'This operation is already in progress'


class TransportError(BillingError):
    """
    Falla de red o del backend.

    Attributes:
        status_code: Código HTTP devuelto por el backend (None si no hubo respuesta)
    """
    http_status = 502
    default_message = 'Request to the server failed'

    def __init__(self, message: str = None, status_code: Optional[int] = None, **details: Any):
        super().__init__(message, **details)
        self.status_code = status_code


class InvalidResponseError(TransportError):
    """El backend respondió OK pero el payload no tiene la forma esperada."""
    default_message = 'Invalid response from server'
