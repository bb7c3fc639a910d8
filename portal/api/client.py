# portal/api/client.py
import logging
from typing import Any, Optional

import httpx

from portal.core.auth import TokenStore
from portal.core.config import Settings, normalize_api_url, settings as default_settings
from portal.core.middleware import register_middleware
from portal.errors import ApiError, NetworkError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Request failed"
    if isinstance(body, dict):
        return body.get("message") or "Request failed"
    return "Request failed"


class ApiClient:
    """JSON transport to the portal backend: bearer auth, error mapping, one 401 retry."""

    def __init__(
        self,
        settings: Settings = default_settings,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = normalize_api_url(settings.API_URL)
        self.tokens = token_store or TokenStore(settings.TOKEN_FILE)
        self._client = register_middleware(
            httpx.AsyncClient(transport=transport, timeout=settings.REQUEST_TIMEOUT_SECONDS)
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self, token: Optional[str]) -> dict:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(self, method: str, url: str, json: Any, token: Optional[str]) -> httpx.Response:
        try:
            return await self._client.request(method, url, json=json, headers=self._headers(token))
        except httpx.RequestError as e:
            logger.error(f"Network error requesting {url}: {e}")
            raise NetworkError(str(e) or "Network error") from e

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        skip_auth: bool = False,
        raw: bool = False,
    ) -> Any:
        token = None if skip_auth else self.tokens.get()
        url = f"{self.base_url}{endpoint}"

        response = await self._send(method, url, json, token)

        if response.status_code == 401 and token:
            # The stored token is stale; drop it and try once anonymously.
            logger.warning(f"Authorization failure for {url}: removing token and retrying without it.")
            self.tokens.remove()
            retry = await self._send(method, url, json, None)
            if retry.is_success:
                response = retry
            else:
                logger.error(f"Retry without token failed for {url}: {retry.status_code}")
                raise ApiError(_error_message(response), response.status_code)

        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)

        if raw:
            return response.content
        if not response.content:
            return None
        return response.json()

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", endpoint, json=json, **kwargs)

    async def put(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, json=json, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)
