# toastboard/main.py
import os
from dotenv import load_dotenv

# 1) cargar variables de entorno del .env
load_dotenv()

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from toastboard.api.toasts import router as toasts_router
from toastboard.errors import MethodNotAllowed, ToastboardError

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("toastboard")

app = FastAPI(title="Toastboard")

# 2) CORS (puedes limitar orígenes en prod)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3) Rutas REST: /load y /save
app.include_router(toasts_router)


def error_envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
    )


# 4) todos los errores salen como {success: false, error}
@app.exception_handler(ToastboardError)
async def toastboard_error_handler(request: Request, exc: ToastboardError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return error_envelope(405, MethodNotAllowed().message)
    return error_envelope(exc.status_code, str(exc.detail))
