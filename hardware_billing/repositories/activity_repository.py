# ==============================================================================
# REPOSITORIO DE ACTIVIDAD
# ==============================================================================
# <DATA_DIR>/activity.json, más reciente primero, con tope de registros.
#
#   [
#     {"type": "BILL",
#      "message": "Bill #a1b2c3 saved for Ali - Total: Rs. 313.50 - ...",
#      "timestamp": "2024-03-05 10:00:00",
#      "related_id": "65f0a1b2c3d4e5f6a7b8c9d0",
#      "details": {"grand_total": 313.5, ...}}
#   ]
# ==============================================================================

import os
from datetime import datetime
from typing import Any, Dict, List

from .base import JsonListStore, Record


class ActivityRepository:
    """Registro local de operaciones."""

    MAX_LOGS = 5000

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta de datos locales
        """
        self.store = JsonListStore(os.path.join(base_path, 'activity.json'))

    def get_all(self) -> List[Record]:
        """Registros en el orden del archivo (el más nuevo al inicio)."""
        return self.store.read()

    def load(self) -> List[Record]:
        return sorted(self.get_all(), key=lambda r: r.get('timestamp', ''), reverse=True)

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> Record:
        """Agrega un registro al inicio y recorta a MAX_LOGS."""
        entry = {
            'type': log_type,
            'message': message,
            'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'related_id': related_id,
            'details': details or {},
        }
        records = [entry] + self.get_all()
        self.store.write(records[:self.MAX_LOGS])
        return entry

    def get_logs_by_type(self, log_type: str) -> List[Record]:
        return [r for r in self.load() if r.get('type') == log_type]

    def get_recent_logs(self, limit: int = 100) -> List[Record]:
        return self.load()[:limit]
