# toastboard/api/toasts.py
import json
import logging
import time

from fastapi import APIRouter, Depends, Request, Response

from toastboard.errors import BadRequest
from toastboard.infra.toast_store import ToastStore, get_toast_store
from toastboard.services.validation import validate_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["toasts"])


def now_ms() -> int:
    """Timestamp compatible con JavaScript (milisegundos)."""
    return int(time.time() * 1000)


@router.options("/load")
@router.options("/save")
async def preflight():
    """Pre-flight: siempre 200, sin procesar nada."""
    return Response(status_code=200)


@router.get("/load")
async def load_toasts(store: ToastStore = Depends(get_toast_store)):
    """
    Devuelve la colección guardada tal cual.
    Si nunca se guardó nada -> {timestamp: null, toasts: []}.
    Si el archivo está corrupto -> 500 (lo arma el handler de errores).
    """
    return store.read()


@router.post("/save")
async def save_toasts(request: Request, store: ToastStore = Depends(get_toast_store)):
    """
    Reemplaza la colección completa.
    Body esperado: { "toasts": [ {title, message, ...}, ... ] }
    El timestamp que mande el cliente se ignora: lo pone el server.
    """
    # 1) body crudo -> JSON
    raw = await request.body()
    if not raw.strip():
        raise BadRequest("No data received")

    try:
        data = json.loads(raw)
    except UnicodeDecodeError:
        raise BadRequest("Invalid JSON: Malformed UTF-8 characters")
    except json.JSONDecodeError as e:
        raise BadRequest(f"Invalid JSON: {e.msg}")

    # 2) estructura + title/message por toast (primer error y se corta)
    toasts = validate_payload(data)

    # 3) timestamp nuevo y guardar (reemplazo total, sin merge)
    timestamp = now_ms()
    store.replace({"timestamp": timestamp, "toasts": toasts})

    logger.info("POST /save -> %d toast(s), timestamp=%d", len(toasts), timestamp)

    return {
        "success": True,
        "message": "Toasts saved successfully",
        "timestamp": timestamp,
        "count": len(toasts),
    }
