"""Async HTTP plumbing for the FamilySearch API.

Injects auth/accept headers, retries connection errors with tenacity and
raises httpx.HTTPStatusError for non-2xx responses. Callers get a Response
exposing the decoded body and headers.
"""

from typing import Any, Dict, Optional
import httpx
from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed, retry_if_exception_type
from .config import Settings, get_settings
from .log import get_logger

logger = get_logger("transport")

GEDCOMX_JSON = "application/x-gedcomx-v1+json"
FS_JSON = "application/x-fs-v1+json"

class Response:
    def __init__(self, raw: httpx.Response):
        self.raw = raw

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def url(self) -> str:
        return str(self.raw.url)

    def get_data(self) -> Dict[str, Any]:
        """Decoded JSON body; an empty body (204, most DELETEs) reads as {}."""
        if not self.raw.content:
            return {}
        data = self.raw.json()
        return data if isinstance(data, dict) else {}

    def get_header(self, name: str) -> Optional[str]:
        return self.raw.headers.get(name)

class Transport:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        retry_wait: Optional[float] = None,
    ):
        settings = settings or get_settings()
        self.access_token = access_token or settings.FS_ACCESS_TOKEN
        self.max_retries = max_retries if max_retries is not None else settings.HTTP_MAX_RETRIES
        self.retry_wait = retry_wait if retry_wait is not None else settings.HTTP_RETRY_WAIT
        self.headers = {
            "Accept": GEDCOMX_JSON,
            "User-Agent": settings.USER_AGENT,
        }
        self.client = client or httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.HTTP_TIMEOUT,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self.client.aclose()

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(self.headers)
        if self.access_token:
            merged["Authorization"] = f"Bearer {self.access_token}"
        if headers:
            merged.update(headers)
        return merged

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Response:
        """
        Sends one request, retrying only on connection-level errors.
        HTTP error statuses are raised immediately as httpx.HTTPStatusError.
        """
        request_headers = self._headers(headers)
        if payload is not None:
            request_headers.setdefault("Content-Type", GEDCOMX_JSON)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception_type(httpx.RequestError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(f"Retrying {method} {url} (attempt {attempt.retry_state.attempt_number})")
                raw = await self.client.request(
                    method,
                    url,
                    params=params,
                    json=payload,
                    headers=request_headers,
                )
        logger.debug(f"{method} {url} -> {raw.status_code}")
        raw.raise_for_status()
        return Response(raw)

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def post(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Response:
        return await self.request("POST", url, payload=payload, headers=headers)

    async def delete(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        return await self.request("DELETE", url, headers=headers)
