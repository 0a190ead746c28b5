# toastboard/infra/api_client.py
import logging
import os
import time
from typing import List, Optional

import httpx
from pydantic import ValidationError

from toastboard.errors import ApiError, NetworkFailure
from toastboard.models.toast import SaveResult, Toast, ToastCollection

logger = logging.getLogger(__name__)

# ====== env ======
TOASTBOARD_API_URL = os.getenv("TOASTBOARD_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 10.0


class ToastApiClient:
    """
    Cliente del API de persistencia (GET /load, POST /save).
      - Si la petición no se completa -> NetworkFailure
      - Si el server responde {success: false, error} en /load -> ApiError
    """

    def __init__(self, http: Optional[httpx.AsyncClient] = None, base_url: str = TOASTBOARD_API_URL):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(base_url=base_url, timeout=REQUEST_TIMEOUT)

    async def __aenter__(self) -> "ToastApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkFailure(str(e) or e.__class__.__name__) from e

    @staticmethod
    def _json(response: httpx.Response):
        try:
            return response.json()
        except ValueError as e:
            # la respuesta no es JSON: igual que si no hubiera llegado
            raise NetworkFailure(f"Invalid response from server ({response.status_code})") from e

    async def load(self) -> ToastCollection:
        response = await self._request("GET", "/load")
        data = self._json(response)

        if response.status_code != 200 or not isinstance(data, dict):
            error = data.get("error") if isinstance(data, dict) else None
            raise ApiError(error or "Unknown error", response.status_code)

        try:
            return ToastCollection.model_validate(
                {"timestamp": data.get("timestamp"), "toasts": data.get("toasts") or []}
            )
        except ValidationError as e:
            raise ApiError("Invalid toast collection", response.status_code) from e

    async def save(self, toasts: List[Toast]) -> SaveResult:
        payload = {
            "timestamp": int(time.time() * 1000),   # el server lo pisa
            "toasts": [toast.to_payload() for toast in toasts],
        }
        response = await self._request("POST", "/save", json=payload)
        data = self._json(response)

        if not isinstance(data, dict):
            raise NetworkFailure(f"Invalid response from server ({response.status_code})")

        try:
            result = SaveResult.model_validate(
                {**data, "success": data.get("success") is True}
            )
        except ValidationError as e:
            raise NetworkFailure(f"Invalid response from server ({response.status_code})") from e
        logger.debug("POST /save -> %d %s", response.status_code, result)
        return result
