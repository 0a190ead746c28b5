# toastboard/services/renderer.py
"""
Renderer de notificaciones.

Screen = 4 regiones (una por esquina). Cada toast mostrado es un ToastView
que pasa por: ENTERING -> VISIBLE -> HIDING -> REMOVED.
"""
import logging
from enum import Enum, auto
from typing import Dict, List, Optional

from toastboard.models.toast import Toast, ToastPosition, ToastType
from toastboard.services.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

HIDE_TRANSITION_MS = 300


class ViewState(Enum):
    ENTERING = auto()   # insertado, todavía sin la clase "show"
    VISIBLE = auto()
    HIDING = auto()     # animación de salida (300ms)
    REMOVED = auto()


class RenderRegion:
    """Una esquina de la pantalla donde se apilan los toasts."""

    def __init__(self, position: ToastPosition):
        self.position = position
        self.views: List["ToastView"] = []
        self.reflows = 0

    def append(self, view: "ToastView") -> None:
        self.views.append(view)
        view.region = self

    def detach(self, view: "ToastView") -> bool:
        # ya no está (doble dismiss, región limpiada) -> no pasa nada
        if view not in self.views:
            return False
        self.views.remove(view)
        return True

    def reflow(self) -> int:
        """
        Fuerza el layout entre insertar y marcar como visible;
        sin esto la transición de entrada no se anima.
        """
        self.reflows += 1
        return len(self.views)

    def clear(self) -> None:
        for view in list(self.views):
            view.cancel_pending()
            view.state = ViewState.REMOVED
        self.views.clear()


class Screen:
    def __init__(self):
        self.regions: Dict[ToastPosition, RenderRegion] = {
            position: RenderRegion(position)
            for position in ToastPosition
            if position is not ToastPosition.UNKNOWN
        }

    def region_for(self, position: ToastPosition) -> Optional[RenderRegion]:
        return self.regions.get(position)

    def visible_views(self) -> List["ToastView"]:
        return [view for region in self.regions.values() for view in region.views]


class ToastView:
    """El elemento visual: título + mensaje + botón de cerrar."""

    def __init__(self, toast: Toast, scheduler: Scheduler):
        self.title = toast.title
        self.message = toast.message
        self.type: ToastType = toast.type
        self.css_class = f"toast {toast.type.value}"
        self.state = ViewState.ENTERING
        self.region: Optional[RenderRegion] = None
        self._scheduler = scheduler
        self._pending: Optional[TimerHandle] = None

    def schedule(self, delay_ms: int, callback) -> None:
        self.cancel_pending()
        self._pending = self._scheduler.call_later(delay_ms, callback)

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def close(self) -> None:
        """Click en la X."""
        self.dismiss()

    def dismiss(self) -> None:
        if self.state in (ViewState.HIDING, ViewState.REMOVED):
            return
        self.state = ViewState.HIDING
        self.schedule(HIDE_TRANSITION_MS, self._detach)

    def _detach(self) -> None:
        self._pending = None
        if self.region is not None:
            self.region.detach(self)
        self.state = ViewState.REMOVED


class NotificationRenderer:
    def __init__(self, screen: Screen, scheduler: Scheduler):
        self.screen = screen
        self.scheduler = scheduler

    def show(self, toast: Toast) -> Optional[ToastView]:
        region = self.screen.region_for(toast.position)
        if region is None:
            # posición desconocida: el toast simplemente no se muestra
            logger.debug("Toast %r sin región (%s)", toast.title, toast.position.value)
            return None

        view = ToastView(toast, self.scheduler)
        region.append(view)
        region.reflow()
        view.state = ViewState.VISIBLE

        if toast.autoHide and toast.duration is not None:
            view.schedule(toast.duration, view.dismiss)

        return view

    def show_staggered(self, toasts: List[Toast], stagger_ms: int) -> List[TimerHandle]:
        """Muestra cada toast con un delay de stagger_ms * índice."""
        return [
            self.scheduler.call_later(index * stagger_ms, lambda t=toast: self.show(t))
            for index, toast in enumerate(toasts)
        ]

    def clear_all(self) -> None:
        for region in self.screen.regions.values():
            region.clear()
