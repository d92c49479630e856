# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Mantiene el último snapshot de items leído del backend. El stock del
# snapshot es orientativo: dos cajas pueden validar contra el mismo snapshot
# y el backend es quien rechaza la factura si el stock ya no alcanza.
# ==============================================================================

import threading
from typing import Any, Dict, List, Optional

from hardware_billing.errors import TransportError
from hardware_billing.models import Item
from hardware_billing.performance_logger import profile_function
from hardware_billing.repositories.item_repository import ItemRepository
from hardware_billing.services.activity_service import ActivityService
from hardware_billing.services.request_guard import InFlightRegistry
from hardware_billing.services.validation import validate_item


class InventoryService:
    """
    Servicio de items.

    Responsabilidades:
    - Snapshot de items (recarga bajo demanda y tras cada factura)
    - Búsqueda por palabras clave
    - Alta, edición y baja con validación
    """

    def __init__(
        self,
        item_repo: ItemRepository,
        activity_service: ActivityService = None,
        registry: InFlightRegistry = None
    ):
        self.item_repo = item_repo
        self.activity_service = activity_service
        self.registry = registry or InFlightRegistry()
        self._lock = threading.Lock()
        self._items: Optional[List[Item]] = None

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    @profile_function(name="Cargar items")
    def reload(self) -> List[Item]:
        """GET /items y reemplaza el snapshot."""
        items = self.item_repo.list_items()
        with self._lock:
            self._items = items
        return items

    def get_items(self) -> List[Item]:
        """Snapshot actual (lo carga la primera vez)."""
        with self._lock:
            items = self._items
        if items is None:
            items = self.reload()
        return list(items)

    def get_item(self, item_id: str) -> Optional[Item]:
        for item in self.get_items():
            if item.id == item_id:
                return item
        return None

    def search(self, query: str = '', with_barcode: bool = False) -> List[Item]:
        """
        Cada palabra de la búsqueda debe aparecer en el nombre, el tipo
        o la medida (y en el código de barras si with_barcode, como en la
        página de items). Búsqueda vacía → todos los items.
        """
        items = self.get_items()
        keywords = (query or '').lower().split()
        if not keywords:
            return items

        def matches(item: Item) -> bool:
            fields = [item.name.lower(), item.item_type.lower(), item.size.lower()]
            if with_barcode:
                fields.append(item.barcode.lower())
            return all(any(k in f for f in fields) for k in keywords)

        return [item for item in items if matches(item)]

    def _refresh(self) -> None:
        """
        Recarga tras un cambio ya guardado en el backend. Si falla, el
        cambio sigue siendo válido: se avisa y el snapshot queda para
        recargarse en la próxima lectura.
        """
        try:
            self.reload()
        except TransportError as exc:
            print(f'[ADVERTENCIA] Cambio guardado pero no se pudo recargar items: {exc.message}')
            with self._lock:
                self._items = None
            if self.activity_service:
                self.activity_service.log_warning(f'Item reload failed: {exc.message}')

    # =========================================================================
    # ALTA / EDICIÓN / BAJA
    # =========================================================================

    def create_item(self, data: Dict[str, Any]) -> Any:
        """
        Raises:
            ValidationError: Formulario inválido (no se envía nada)
            DuplicateRequestError: Alta igual en curso
            TransportError: Falla del backend
        """
        payload = validate_item(data)
        with self.registry.guard(f"item:create:{payload['name'].lower()}"):
            created = self.item_repo.create_item(payload)
        self._refresh()
        if self.activity_service:
            created_id = created.get('_id', '') if isinstance(created, dict) else ''
            self.activity_service.log_item('created', payload['name'], str(created_id))
        return created

    def update_item(self, item_id: str, data: Dict[str, Any]) -> Any:
        payload = validate_item(data)
        with self.registry.guard(f"item:update:{item_id}"):
            updated = self.item_repo.update_item(item_id, payload)
        self._refresh()
        if self.activity_service:
            self.activity_service.log_item('updated', payload['name'], item_id)
        return updated

    def delete_item(self, item_id: str) -> None:
        item = self.get_item(item_id)
        with self.registry.guard(f"item:delete:{item_id}"):
            self.item_repo.delete_item(item_id)
        self._refresh()
        if self.activity_service:
            self.activity_service.log_item('deleted', item.name if item else item_id, item_id)
