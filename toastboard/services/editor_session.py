# toastboard/services/editor_session.py
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from toastboard.errors import NetworkFailure, ToastboardError
from toastboard.infra.api_client import ToastApiClient
from toastboard.models.toast import (
    DEFAULT_DURATION_MS,
    Toast,
    ToastPosition,
    ToastType,
)
from toastboard.services.renderer import NotificationRenderer
from toastboard.services.scheduler import Scheduler, TimerHandle
from toastboard.services.validation import ValidationResult, validate_toasts

logger = logging.getLogger(__name__)

BOOTSTRAP_DELAY_MS = 500
PREVIEW_STAGGER_MS = 200
STATUS_HIDE_MS = 5000

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class ToastDraft:
    """Una fila del formulario. Los valores son los que tiene el form."""
    id: str
    number: int = 0
    title: str = ""
    message: str = ""
    type: str = ToastType.SUCCESS.value
    position: str = ToastPosition.TOP_RIGHT.value
    duration: Union[int, str] = DEFAULT_DURATION_MS
    auto_hide: bool = True


@dataclass
class StatusMessage:
    text: str
    kind: str          # success | error | info
    shown: bool = True


def parse_duration(value: Any) -> Optional[int]:
    """Como parseInt: toma los dígitos del principio, si no hay -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class EditorSession:
    """
    Estado del editor: lista de drafts + mensaje de estado + botón guardar.
    Siempre hay al menos un draft (no se puede borrar el último).
    """

    def __init__(self, client: ToastApiClient, renderer: NotificationRenderer, scheduler: Scheduler):
        self.client = client
        self.renderer = renderer
        self.scheduler = scheduler
        self.entries: List[ToastDraft] = []
        self.status: Optional[StatusMessage] = None
        self.save_enabled = True
        self._counter = 0
        self._status_timer: Optional[TimerHandle] = None

    # ---- arranque -----------------------------------------------------------
    async def start(self) -> None:
        # si después de cargar sigue vacío, se agrega un draft por defecto
        self.scheduler.call_later(BOOTSTRAP_DELAY_MS, self._ensure_one_entry)
        await self.load_existing()

    def _ensure_one_entry(self) -> None:
        if not self.entries:
            self.add_entry()

    async def load_existing(self) -> None:
        try:
            collection = await self.client.load()
        except ToastboardError as e:
            # no es fatal: se edita desde cero
            logger.info("No se pudieron cargar los toasts existentes: %s", e.message)
            return

        if not collection.toasts:
            return

        self.entries = []
        self._counter = 0
        for toast in collection.toasts:
            self.add_entry(toast)

        self.show_status(f"Loaded {len(collection.toasts)} toast(s) from server", "success")

    # ---- filas --------------------------------------------------------------
    def add_entry(self, template: Union[Toast, Mapping[str, Any], None] = None) -> ToastDraft:
        self._counter += 1
        draft = ToastDraft(id=f"toast-{self._counter}-{int(time.time() * 1000)}")

        if template is not None:
            if isinstance(template, Toast):
                # type/position tal cual venían, no el valor normalizado
                template = {
                    **template.to_payload(),
                    "type": template.type_label,
                    "position": template.position_label,
                }
            draft.title = str(template.get("title") or "")
            draft.message = str(template.get("message") or "")
            draft.type = template.get("type") or ToastType.SUCCESS.value
            draft.position = template.get("position") or ToastPosition.TOP_RIGHT.value
            draft.duration = template.get("duration") or DEFAULT_DURATION_MS
            draft.auto_hide = template.get("autoHide") is not False

        self.entries.append(draft)
        self._renumber()
        return draft

    def remove_entry(self, entry: ToastDraft) -> bool:
        if len(self.entries) <= 1:
            self.show_status("You need at least one toast item", "error")
            return False
        self.entries.remove(entry)
        self._renumber()
        return True

    def _renumber(self) -> None:
        for index, draft in enumerate(self.entries, start=1):
            draft.number = index

    # ---- form -> modelo -----------------------------------------------------
    def collect(self) -> List[Toast]:
        return [
            Toast(
                id=draft.id,
                title=draft.title.strip(),
                message=draft.message.strip(),
                type=draft.type,
                position=draft.position,
                duration=parse_duration(draft.duration),
                autoHide=draft.auto_hide,
            )
            for draft in self.entries
        ]

    def validate(self, toasts: List[Toast]) -> ValidationResult:
        return validate_toasts(toasts)

    # ---- acciones -----------------------------------------------------------
    async def save(self) -> bool:
        toasts = self.collect()
        validation = self.validate(toasts)
        if not validation.valid:
            self.show_status(validation.message, "error")
            return False

        if not self.save_enabled:
            # ya hay un guardado en curso
            return False

        self.show_status("Saving...", "info")
        self.save_enabled = False
        try:
            result = await self.client.save(toasts)
        except NetworkFailure as e:
            self.show_status(f"Network error: {e.message}", "error")
            return False
        finally:
            self.save_enabled = True

        if result.success:
            self.show_status("Toasts saved successfully!", "success")
            return True

        self.show_status(f"Error: {result.error or 'Unknown error'}", "error")
        return False

    def preview(self) -> bool:
        toasts = self.collect()
        validation = self.validate(toasts)
        if not validation.valid:
            self.show_status(validation.message, "error")
            return False

        self.renderer.clear_all()
        self.renderer.show_staggered(toasts, PREVIEW_STAGGER_MS)
        return True

    # ---- estado -------------------------------------------------------------
    def show_status(self, text: str, kind: str) -> None:
        if self._status_timer is not None:
            self._status_timer.cancel()
        self.status = StatusMessage(text, kind)
        self._status_timer = self.scheduler.call_later(STATUS_HIDE_MS, self._hide_status)

    def _hide_status(self) -> None:
        self._status_timer = None
        if self.status is not None:
            self.status.shown = False
