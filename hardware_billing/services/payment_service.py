# ==============================================================================
# SERVICIO DE PAGOS
# ==============================================================================
# Abonos manuales a la cuenta de un cliente (POST /payments).
# El backend registra la transacción y descuenta el saldo.
# ==============================================================================

from typing import Any, Dict

from hardware_billing.errors import ValidationError
from hardware_billing.models import Customer, PaymentMethod
from hardware_billing.performance_logger import profile_function
from hardware_billing.repositories.transaction_repository import TransactionRepository
from hardware_billing.services.activity_service import ActivityService
from hardware_billing.services.request_guard import InFlightRegistry
from hardware_billing.utils import money, parse_number


class PaymentService:
    """
    Servicio de pagos.

    Responsabilidades:
    - Validar monto y método
    - Enviar el pago una sola vez por cliente a la vez
    - Registrar el pago en la actividad (si entra dinero, queda registro)
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        activity_service: ActivityService = None,
        registry: InFlightRegistry = None
    ):
        self.transaction_repo = transaction_repo
        self.activity_service = activity_service
        self.registry = registry or InFlightRegistry()

    @profile_function(name="Registrar pago")
    def record_payment(
        self,
        customer: Customer,
        amount: Any,
        method: Any = PaymentMethod.CASH.value,
        description: str = ''
    ) -> Dict[str, Any]:
        """
        Registra un pago del cliente.

        Args:
            customer: Cliente que paga
            amount: Monto (> 0)
            method: cash o credit
            description: Texto libre (default "Payment for <nombre>")

        Returns:
            Respuesta del backend (o el payload enviado si no hubo cuerpo)

        Raises:
            ValidationError: Monto o método inválido
            DuplicateRequestError: Ya hay un pago en curso para el cliente
            TransportError: Falla del backend
        """
        number = parse_number(amount)
        if number is None or number <= 0:
            raise ValidationError('Payment amount must be greater than 0')
        try:
            payment_method = PaymentMethod(method)
        except ValueError:
            raise ValidationError('Invalid payment method')

        payload = {
            'customerId': customer.id,
            'amount': money(number),
            'paymentMethod': payment_method.value,
            'description': (description or '').strip() or f'Payment for {customer.name}',
        }

        with self.registry.guard(f'payment:{customer.id}'):
            response = self.transaction_repo.create_payment(payload)

        if self.activity_service:
            self.activity_service.log_payment(customer, payload['amount'], payment_method.value)

        return response if isinstance(response, dict) else payload
