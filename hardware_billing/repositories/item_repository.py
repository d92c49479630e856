# ==============================================================================
# REPOSITORIO DE ITEMS
# ==============================================================================
# Encapsula /items del servicio de persistencia.
# El stock que devuelve es un snapshot: el backend es la fuente de verdad.
# ==============================================================================

from typing import Any, Dict, List

from hardware_billing.models import Item
from hardware_billing.repositories.api_client import RemoteRepository


class ItemRepository(RemoteRepository):
    """Acceso al catálogo de items."""

    def list_items(self) -> List[Item]:
        """GET /items → lista de Item."""
        error = 'Failed to fetch items'
        data = self._expect_list(self.client.get('/items', error), error)
        return [Item.from_dict(d) for d in data if isinstance(d, dict)]

    def create_item(self, payload: Dict[str, Any]) -> Any:
        return self.client.post('/items', payload, 'Failed to add item')

    def update_item(self, item_id: str, payload: Dict[str, Any]) -> Any:
        return self.client.put(f'/items/{item_id}', payload, 'Failed to update item')

    def delete_item(self, item_id: str) -> None:
        self.client.delete(f'/items/{item_id}', 'Failed to delete item')
