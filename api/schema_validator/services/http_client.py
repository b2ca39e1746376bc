from typing import Any, Mapping, Optional

import httpx
from httpx import HTTPError
from ..core.config import CONFIG
from .commands import validate_response


class ApiRequestError(RuntimeError):
    """Raised when the API under test cannot be reached."""


class ApiResponseFetcher:
    """Calls a live endpoint and validates the response body against a schema."""

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout if timeout is not None else CONFIG.request_timeout
        self.transport = transport

    async def fetch(self, url: str, method: str = "GET", **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                return await client.request(method, url, **kwargs)
            except httpx.TimeoutException as exc:
                raise ApiRequestError(
                    f"Timed out waiting for a response from {method} {url}. "
                    "Consider increasing REQUEST_TIMEOUT."
                ) from exc
            except httpx.ConnectError as exc:
                raise ApiRequestError(
                    f"Unable to connect to {self.base_url}{url}. Ensure the API is running."
                ) from exc
            except HTTPError as exc:
                raise ApiRequestError(
                    f"Unexpected error while calling {method} {url}. {exc}"
                ) from exc

    async def fetch_and_validate(
        self,
        url: str,
        schema: Mapping[str, Any],
        path: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
        **kwargs: Any,
    ) -> httpx.Response:
        response = await self.fetch(url, method, **kwargs)
        if path is not None:
            # fill the gaps with what was actually sent and answered
            path = {
                **path,
                "method": path.get("method") or method,
                "status": path.get("status") if path.get("status") is not None else response.status_code,
            }
        return validate_response(response, schema, path)
