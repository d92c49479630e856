# ==============================================================================
# CLIENTE HTTP DEL SERVICIO DE PERSISTENCIA
# ==============================================================================
# Único punto de contacto con el backend REST (fuente de verdad de items,
# clientes, facturas, transacciones y stock).
#
# Reglas:
# - Falla de red o respuesta >= 400 → TransportError con el mensaje del
#   backend ({"error": "..."}) o el mensaje por defecto de la operación
# - Respuesta 2xx con JSON ilegible → InvalidResponseError
# - Sin reintentos: un POST que llegó al servidor no se repite
# ==============================================================================

from typing import Any, Dict, Optional

import requests

from hardware_billing.errors import InvalidResponseError, TransportError


class PersistenceClient:
    """
    Cliente JSON sobre requests.Session.

    Uso:
        client = PersistenceClient('http://localhost:5000/api', token='...')
        items = client.get('/items', default_error='Failed to fetch items')
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            base_url: URL base del backend (ej: http://localhost:5000/api)
            token: Token Bearer opcional
            timeout: Segundos de espera por petición
            session: Sesión HTTP (inyectable para tests)
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    @staticmethod
    def _error_message(response: requests.Response, default_error: str) -> str:
        """Extrae {"error": "..."} del cuerpo si existe."""
        try:
            body = response.json()
        except ValueError:
            return default_error
        if isinstance(body, dict) and body.get('error'):
            return str(body['error'])
        return default_error

    def request(
        self,
        method: str,
        path: str,
        default_error: str,
        params: Dict[str, Any] = None,
        json: Any = None
    ) -> Any:
        """
        Ejecuta una petición y retorna el JSON decodificado.

        Args:
            method: GET, POST, PUT, DELETE
            path: Ruta relativa (/bills, /customers/123)
            default_error: Mensaje para el usuario si la petición falla
            params: Query string
            json: Cuerpo JSON

        Returns:
            JSON decodificado, o None si la respuesta no tiene cuerpo

        Raises:
            TransportError: Falla de red o código >= 400
            InvalidResponseError: Cuerpo 2xx que no es JSON
        """
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            print(f'[API] {method} {path} sin respuesta: {exc}')
            raise TransportError(default_error) from exc

        if response.status_code >= 400:
            print(f'[API] {method} {path} → {response.status_code}')
            raise TransportError(
                self._error_message(response, default_error),
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(default_error) from exc

    def get(self, path: str, default_error: str, params: Dict[str, Any] = None) -> Any:
        return self.request('GET', path, default_error, params=params)

    def post(self, path: str, payload: Any, default_error: str) -> Any:
        return self.request('POST', path, default_error, json=payload)

    def put(self, path: str, payload: Any, default_error: str) -> Any:
        return self.request('PUT', path, default_error, json=payload)

    def delete(self, path: str, default_error: str) -> Any:
        return self.request('DELETE', path, default_error)


class RemoteRepository:
    """
    Base de los repositorios respaldados por el backend.
    Valida la forma de las respuestas antes de entregarlas a los servicios.
    """

    def __init__(self, client: PersistenceClient):
        self.client = client

    @staticmethod
    def _expect_list(data: Any, default_error: str) -> list:
        if not isinstance(data, list):
            raise InvalidResponseError(default_error)
        return data

    @staticmethod
    def _expect_dict(data: Any, default_error: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise InvalidResponseError(default_error)
        return data
