import time
from typing import Optional

import httpx

from gpuwatch.shared.errors import OllamaRequestError
from gpuwatch.shared.logger import Logger

logger = Logger.get(__name__)


class OllamaClient:
    """Thin async client for the read-only parts of the Ollama HTTP API."""

    def __init__(self, base_url: str = "http://localhost:11434", timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        start_time = time.time()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                if method == "POST":
                    response = await client.post(url, json=json)
                else:
                    response = await client.get(url)
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as e:
                elapsed = time.time() - start_time
                raise OllamaRequestError(f"{method} {path} timed out after {elapsed:.2f}s") from e
            except httpx.HTTPStatusError as e:
                raise OllamaRequestError(f"{method} {path} returned {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise OllamaRequestError(f"{method} {path} failed: {e}") from e
            except ValueError as e:
                raise OllamaRequestError(f"{method} {path} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise OllamaRequestError(f"{method} {path} returned an unexpected body")
        return data

    @staticmethod
    def _model_entries(data: dict) -> list[dict]:
        models = data.get("models")
        if not isinstance(models, list):
            return []
        return [m for m in models if isinstance(m, dict)]

    async def get_version(self) -> str:
        data = await self._request("GET", "/api/version")
        return str(data.get("version") or "")

    async def list_models(self) -> list[dict]:
        """All models available locally (/api/tags)."""
        data = await self._request("GET", "/api/tags")
        return self._model_entries(data)

    async def list_running_models(self) -> list[dict]:
        """Models currently loaded into memory (/api/ps)."""
        data = await self._request("GET", "/api/ps")
        return self._model_entries(data)

    async def show_model(self, name: str) -> dict:
        """Verbose model details, including the architecture block in model_info."""
        logger.debug(f"Fetching architecture metadata for {name}")
        return await self._request("POST", "/api/show", json={"model": name, "verbose": True})
