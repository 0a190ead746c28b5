# toastboard/services/display_session.py
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Callable, List, Optional

from toastboard.errors import ToastboardError
from toastboard.infra.api_client import ToastApiClient
from toastboard.models.toast import Toast, ToastType
from toastboard.services.renderer import NotificationRenderer, ToastView
from toastboard.services.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_MS = 5000
SHOW_ALL_STAGGER_MS = 300

NO_TOASTS_LOADED = "No toasts loaded yet. Create some on the Editor page!"
NO_TRIGGERS = "No toasts available"
NOTHING_TO_SHOW = "No toasts to show. Please create some on the Editor page."

TYPE_COLORS = {
    ToastType.SUCCESS: "#28a745",
    ToastType.ERROR: "#dc3545",
    ToastType.WARNING: "#ffc107",
    ToastType.INFO: "#17a2b8",
}
DEFAULT_COLOR = "#6c757d"

BUTTON_CLASSES = {
    ToastType.SUCCESS: "success",
    ToastType.ERROR: "primary",
    ToastType.WARNING: "secondary",
    ToastType.INFO: "primary",
}
DEFAULT_BUTTON_CLASS = "secondary"


class PollingState(Enum):
    ACTIVE = auto()
    STOPPED = auto()


@dataclass
class TriggerControl:
    """Botón "Show Toast #N": al hacer click se muestra ese toast ya."""
    label: str
    css_class: str
    toast: Toast
    renderer: NotificationRenderer

    def click(self) -> Optional[ToastView]:
        return self.renderer.show(self.toast)


@dataclass
class SummaryRow:
    number: int
    title: str
    type: str
    color: str
    position: str
    duration: str


@dataclass
class DisplayView:
    count: int = 0
    triggers: List[TriggerControl] = field(default_factory=list)
    triggers_placeholder: Optional[str] = None
    summary: List[SummaryRow] = field(default_factory=list)
    empty_message: Optional[str] = NO_TOASTS_LOADED
    last_updated: Optional[str] = None
    status: str = ""
    notice: Optional[str] = None
    render_count: int = 0


class DisplaySession:
    """
    Polling contra GET /load cada 5s, un solo timer activo.
      ACTIVE  -> timer corriendo
      STOPPED -> timer limpiado (pestaña oculta)
    Solo re-renderiza cuando cambia el timestamp.
    """

    def __init__(
        self,
        client: ToastApiClient,
        renderer: NotificationRenderer,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.renderer = renderer
        self.scheduler = scheduler
        self.clock = clock
        self.state = PollingState.STOPPED
        self.toasts: List[Toast] = []
        self.last_timestamp: Optional[int] = None
        self.view = DisplayView()
        self._timer: Optional[TimerHandle] = None
        self._inflight: Optional[asyncio.Task] = None

    # ---- ciclo de vida ------------------------------------------------------
    def start(self) -> Optional[asyncio.Task]:
        """Arranca el timer y hace un poll inmediato."""
        self._clear_timer()
        self.state = PollingState.ACTIVE
        self.view.status = "Active"
        self._arm_timer()
        return self._spawn_poll()

    def stop(self) -> None:
        # las peticiones en vuelo NO se cancelan, solo el timer
        self._clear_timer()
        self.state = PollingState.STOPPED
        self.view.status = "Stopped"

    def set_hidden(self, hidden: bool) -> Optional[asyncio.Task]:
        if hidden:
            self.stop()
            return None
        return self.start()

    @property
    def inflight(self) -> Optional[asyncio.Task]:
        return self._inflight

    def _arm_timer(self) -> None:
        self._timer = self.scheduler.call_later(REFRESH_INTERVAL_MS, self._tick)

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = None
        if self.state is not PollingState.ACTIVE:
            return
        self._arm_timer()
        self._spawn_poll()

    def _spawn_poll(self) -> Optional[asyncio.Task]:
        if self._inflight is not None and not self._inflight.done():
            # el poll anterior sigue esperando respuesta: se salta este tick
            logger.debug("Poll anterior todavía en curso, se omite el tick")
            return None
        self._inflight = asyncio.get_running_loop().create_task(self.poll())
        return self._inflight

    # ---- polling ------------------------------------------------------------
    async def poll(self) -> bool:
        """Devuelve True si hubo cambios (y por lo tanto re-render)."""
        try:
            collection = await self.client.load()
        except ToastboardError as e:
            # no es fatal: se queda con lo que tenía y reintenta en el próximo tick
            logger.warning("Error cargando toasts: %s", e.message)
            self.view.status = "Error"
            return False

        if self.state is PollingState.ACTIVE:
            self.view.status = "Active"

        if collection.timestamp == self.last_timestamp:
            return False

        self.last_timestamp = collection.timestamp
        self.toasts = list(collection.toasts)
        self._render()
        return True

    def _render(self) -> None:
        view = self.view
        view.count = len(self.toasts)

        view.triggers = [
            TriggerControl(
                label=f"Show Toast #{index} ({toast.title})",
                css_class=f"btn btn-{BUTTON_CLASSES.get(toast.type, DEFAULT_BUTTON_CLASS)}",
                toast=toast,
                renderer=self.renderer,
            )
            for index, toast in enumerate(self.toasts, start=1)
        ]
        view.triggers_placeholder = None if self.toasts else NO_TRIGGERS

        view.summary = [
            SummaryRow(
                number=index,
                title=toast.title,
                type=toast.type_label,
                color=TYPE_COLORS.get(toast.type, DEFAULT_COLOR),
                position=toast.position_label,
                duration=f"{toast.duration}ms",
            )
            for index, toast in enumerate(self.toasts, start=1)
        ]
        view.empty_message = None if self.toasts else NO_TOASTS_LOADED

        view.last_updated = self.clock().strftime("%H:%M:%S")
        view.render_count += 1

    # ---- acciones -----------------------------------------------------------
    def show_all(self) -> List[TimerHandle]:
        if not self.toasts:
            self.view.notice = NOTHING_TO_SHOW
            return []
        self.view.notice = None
        return self.renderer.show_staggered(self.toasts, SHOW_ALL_STAGGER_MS)
