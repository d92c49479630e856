# ==============================================================================
# ALMACÉN JSON LOCAL
# ==============================================================================
# Solo el registro de actividad vive en disco; todo lo demás es del servicio
# de persistencia (ver api_client.py).
#
# Formato: una lista JSON de registros. Escritura atómica (archivo .tmp +
# os.replace) para que un corte a mitad de escritura no deje el archivo roto.
# ==============================================================================

import json
import os
import threading
from typing import Any, Dict, List

Record = Dict[str, Any]


class JsonListStore:
    """
    Lista de registros persistida en un archivo JSON.

    Uso:
        store = JsonListStore('/var/lib/billing/activity.json')
        records = store.read()
        store.write(records + [{'type': 'BILL'}])
    """

    # Un solo lock para todos los archivos: el volumen de escritura es bajo
    _io_lock = threading.RLock()

    def __init__(self, path: str):
        """
        Args:
            path: Archivo JSON (la carpeta se crea si falta)
        """
        self.path = path
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        if not os.path.exists(path):
            self.write([])

    def read(self) -> List[Record]:
        """
        Registros guardados; lista vacía si el archivo falta, está corrupto
        o no contiene una lista.
        """
        with self._io_lock:
            try:
                with open(self.path, encoding='utf-8') as fh:
                    data = json.load(fh)
            except FileNotFoundError:
                return []
            except json.JSONDecodeError:
                print(f'[ADVERTENCIA] {self.path} ilegible, se ignora su contenido')
                return []
        return data if isinstance(data, list) else []

    def write(self, records: List[Record]) -> None:
        """
        Raises:
            OSError: Si no se puede escribir (el .tmp se elimina)
        """
        tmp = f'{self.path}.tmp'
        with self._io_lock:
            try:
                with open(tmp, 'w', encoding='utf-8') as fh:
                    json.dump(records, fh, indent=2, ensure_ascii=False)
                os.replace(tmp, self.path)
            except OSError:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise
