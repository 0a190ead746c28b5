# toastboard/services/validation.py
"""
Reglas de validación de toasts.

Hay DOS juegos de reglas y no son iguales:
  - server (validate_payload): solo title y message no vacíos.
  - cliente (validate_toasts): title, message Y duration en [1000, 30000].
El server no revisa duration ni position (ver DESIGN.md).
"""
from dataclasses import dataclass
from typing import Any, List, Optional

from toastboard.errors import BadRequest
from toastboard.models.toast import MAX_DURATION_MS, MIN_DURATION_MS, Toast


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # números / bools cuentan como "algo" salvo 0 y False
    return not value


def validate_payload(data: Any) -> List[Any]:
    """
    Valida el body ya parseado de POST /save.
    Devuelve la lista de toasts o lanza BadRequest con el PRIMER error.
    """
    if not isinstance(data, dict) or not isinstance(data.get("toasts"), list):
        raise BadRequest("Invalid data structure: toasts array required")

    toasts = data["toasts"]
    for index, toast in enumerate(toasts, start=1):
        if not isinstance(toast, dict):
            toast = {}
        if _is_blank(toast.get("title")):
            raise BadRequest(f"Toast #{index} missing title")
        if _is_blank(toast.get("message")):
            raise BadRequest(f"Toast #{index} missing message")

    return toasts


@dataclass
class ValidationResult:
    valid: bool
    message: Optional[str] = None


def validate_toasts(toasts: List[Toast]) -> ValidationResult:
    """Reglas del editor: se corta en la primera violación."""
    for index, toast in enumerate(toasts, start=1):
        if not toast.title.strip():
            return ValidationResult(False, f"Toast #{index} is missing a title")
        if not toast.message.strip():
            return ValidationResult(False, f"Toast #{index} is missing a message")
        duration = toast.duration
        if duration is None or duration < MIN_DURATION_MS or duration > MAX_DURATION_MS:
            return ValidationResult(
                False,
                f"Toast #{index} duration must be between "
                f"{MIN_DURATION_MS}ms and {MAX_DURATION_MS}ms",
            )
    return ValidationResult(True)
