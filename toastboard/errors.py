# toastboard/errors.py
from typing import Optional


class ToastboardError(Exception):
    """
    Base de los errores del dominio.
    Cada error sabe con qué status HTTP se responde.
    """
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ToastboardError):
    """Entrada del cliente inválida (JSON roto, faltan campos, etc.)."""
    status_code = 400


class MethodNotAllowed(ToastboardError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class StorageUnavailable(ToastboardError):
    """No se pudo crear / leer / escribir el archivo de datos."""
    status_code = 500


class CorruptData(ToastboardError):
    """El archivo existe pero su contenido no es una colección válida."""
    status_code = 500


# ---- lado cliente ----

class NetworkFailure(ToastboardError):
    """
    La petición no llegó a completarse (conexión caída, timeout,
    respuesta que no es JSON). Distinto de un error devuelto por el server.
    """
    status_code = 0


class ApiError(ToastboardError):
    """El server respondió, pero con {success: false, error}."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
