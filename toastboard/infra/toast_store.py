# toastboard/infra/toast_store.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from toastboard.errors import CorruptData, StorageUnavailable

logger = logging.getLogger(__name__)

# ====== env ======
# por defecto: toastboard/data/toasts.json (junto al API)
DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "toasts.json"
TOAST_DATA_FILE = os.getenv("TOAST_DATA_FILE", str(DEFAULT_DATA_FILE))


def empty_collection() -> dict:
    return {"timestamp": None, "toasts": []}


class ToastStore:
    """
    Guarda la colección de toasts en UN archivo JSON.
    - read(): si no existe el archivo -> colección vacía (no es error)
    - replace(): sobreescribe todo, atómico (tmp + os.replace)
    Último que escribe gana, no hay control de versiones.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> dict:
        if not self.path.exists():
            return empty_collection()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("No se pudo leer %s: %s", self.path, e)
            raise StorageUnavailable("Could not read data file") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("JSON inválido en %s: %s", self.path, e)
            raise CorruptData("Invalid data in file") from e

        # tiene que ser una colección: objeto con "toasts" como lista
        if not isinstance(data, dict) or not isinstance(data.get("toasts"), list):
            logger.error("Contenido inesperado en %s (no es una colección)", self.path)
            raise CorruptData("Invalid data in file")

        return data

    def replace(self, collection: dict) -> None:
        data_dir = self.path.parent
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("No se pudo crear %s: %s", data_dir, e)
            raise StorageUnavailable("Could not create data directory") from e

        json_data = json.dumps(collection, indent=4, ensure_ascii=False)

        # 1) escribir a un temporal en el MISMO directorio
        # 2) os.replace -> un lector nunca ve un archivo a medio escribir
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=data_dir, prefix=".toasts-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json_data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("No se pudo guardar %s: %s", self.path, e)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable("Could not save data to file") from e

        logger.info(
            "Colección guardada (%d toasts, timestamp=%s)",
            len(collection.get("toasts", [])),
            collection.get("timestamp"),
        )


def get_toast_store() -> ToastStore:
    """Dependencia para FastAPI (se puede sobreescribir en los tests)."""
    return ToastStore(TOAST_DATA_FILE)
