# ==============================================================================
# GUARD DE PETICIONES EN CURSO
# ==============================================================================
# Un token explícito por operación (ej: "checkout:<draft_id>"). Mientras el
# token está tomado, un segundo intento de la misma operación se rechaza con
# DuplicateRequestError en lugar de enviarse otra vez al backend.
# ==============================================================================

import threading
from contextlib import contextmanager
from typing import Iterator, Set

from hardware_billing.errors import DuplicateRequestError


class InFlightRegistry:
    """
    Registro de operaciones en curso compartido entre hilos.

    Uso:
        with registry.guard(f'checkout:{state.draft_id}'):
            ...  # POST /bills
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tokens: Set[str] = set()

    def acquire(self, key: str) -> None:
        """
        Raises:
            DuplicateRequestError: Si la operación ya está en curso
        """
        with self._lock:
            if key in self._tokens:
                raise DuplicateRequestError()
            self._tokens.add(key)

    def release(self, key: str) -> None:
        with self._lock:
            self._tokens.discard(key)

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._tokens

    @contextmanager
    def guard(self, key: str) -> Iterator[str]:
        """Toma el token y lo libera al salir, haya o no error."""
        self.acquire(key)
        try:
            yield key
        finally:
            self.release(key)
