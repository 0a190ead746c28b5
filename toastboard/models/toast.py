# toastboard/models/toast.py
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_DURATION_MS = 5000
MIN_DURATION_MS = 1000
MAX_DURATION_MS = 30000


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEFAULT = "default"   # neutro: cualquier valor desconocido cae aquí

    @classmethod
    def _missing_(cls, value):
        return cls.DEFAULT


class ToastPosition(str, Enum):
    TOP_RIGHT = "top-right"
    TOP_LEFT = "top-left"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"
    UNKNOWN = "unknown"   # no tiene región -> el toast nunca se muestra

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class Toast(BaseModel):
    id: Optional[str] = None
    title: str = ""
    message: str = ""
    type: ToastType = ToastType.SUCCESS
    position: ToastPosition = ToastPosition.TOP_RIGHT
    duration: Optional[int] = DEFAULT_DURATION_MS
    autoHide: bool = True
    # el texto tal cual vino (para mostrarlo); no viaja ni se guarda
    type_label: str = Field(default=ToastType.SUCCESS.value, exclude=True)
    position_label: str = Field(default=ToastPosition.TOP_RIGHT.value, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _keep_labels(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for field, label, variants in (
            ("type", "type_label", ToastType),
            ("position", "position_label", ToastPosition),
        ):
            if field not in data:
                continue
            value = data[field]
            if value is None:
                data.setdefault(label, variants(None).value)
            else:
                data.setdefault(label, str(getattr(value, "value", value)))
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, value: Any) -> Optional[str]:
        # el server acepta cualquier id (número, etc.)
        if value is None:
            return None
        return str(value)

    @field_validator("autoHide", mode="before")
    @classmethod
    def _parse_auto_hide(cls, value: Any) -> bool:
        # como en JS: se oculta solo si el valor es "truthy"
        return bool(value)

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> ToastType:
        return ToastType(value)

    @field_validator("position", mode="before")
    @classmethod
    def _parse_position(cls, value: Any) -> ToastPosition:
        return ToastPosition(value)

    @field_validator("title", "message", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        # lo que guardó el server puede venir null o con otro tipo
        if value is None:
            return ""
        return str(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Optional[int]:
        # None se conserva: el editor lo usa para "no es un número"
        if value is None:
            return None
        if isinstance(value, bool):
            return DEFAULT_DURATION_MS
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_DURATION_MS

    def to_payload(self) -> dict:
        """Forma en la que viaja / se guarda (camelCase, enums como string)."""
        return self.model_dump(mode="json")


class ToastCollection(BaseModel):
    """
    Lo que se persiste: la lista completa + timestamp (ms epoch).
    timestamp None = nunca se guardó nada.
    """
    timestamp: Optional[int] = None
    toasts: List[Toast] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "ToastCollection":
        return cls(timestamp=None, toasts=[])


class SaveResult(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    timestamp: Optional[int] = None
    count: Optional[int] = None
