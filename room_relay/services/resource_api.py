# room_relay/services/resource_api.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from room_relay.core.config import get_settings
from room_relay.core.errors import UpstreamError
from room_relay.services.token_service import TokenService, get_token_service

logger = logging.getLogger(__name__)


class ResourceApiClient:
    """
    Thin client for the video provider's Resource API.

    Responsibilities
    ----------------
    - Attach a management token (from TokenService) to every call.
    - Provide GET/POST helpers returning decoded JSON.
    - Turn non-2xx answers and transport failures into UpstreamError so the
      rest of the codebase never handles httpx types.

    Notes
    -----
    - No retries. A failed call is terminal for that call.
    - Token refresh is owned by TokenService.
    """

    def __init__(
        self,
        token_service: TokenService,
        base_url: str = "https://api.100ms.live/v2",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._token_service = token_service
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def _build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Issue an authenticated request and return the decoded JSON body.

        Raises
        ------
        UpstreamError
            On transport failure (no status) or non-2xx status (status and
            decoded body attached).
        """
        token = self._token_service.get_management_token()
        url = self._build_url(path)
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.request(
                    method=method.upper(),
                    url=url,
                    headers=headers,
                    params=params,
                    json=json,
                )
        except httpx.HTTPError as exc:
            logger.warning("Resource API %s %s unreachable: %s", method.upper(), url, exc)
            raise UpstreamError(f"Resource API {method.upper()} {path} failed: {exc}") from exc

        if resp.status_code // 100 != 2:
            body = self._decode_body(resp)
            logger.warning(
                "Resource API %s %s returned status=%s", method.upper(), url, resp.status_code
            )
            raise UpstreamError(
                f"Resource API {method.upper()} {path} failed (status={resp.status_code})",
                status_code=resp.status_code,
                body=body,
            )

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning(
                "Resource API %s %s returned a non-JSON body (status=%s)",
                method.upper(),
                url,
                resp.status_code,
            )
            raise UpstreamError(
                f"Resource API {method.upper()} {path} returned a non-JSON body",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc

    @staticmethod
    def _decode_body(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return resp.text

    async def get_json(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        GET a Resource API endpoint and return the JSON payload.
        """
        return await self._request("GET", path, params=params)

    async def post_json(
        self,
        path: str,
        *,
        json: Any = None,
    ) -> Dict[str, Any]:
        """
        POST to a Resource API endpoint and return the JSON payload.
        """
        return await self._request("POST", path, json=json)


_resource_api_instance: Optional[ResourceApiClient] = None


def get_resource_api() -> ResourceApiClient:
    """
    Lazily construct the shared ResourceApiClient from application settings.

    Used as a FastAPI dependency so tests can swap it through
    `app.dependency_overrides`.
    """
    global _resource_api_instance
    if _resource_api_instance is None:
        settings = get_settings()
        _resource_api_instance = ResourceApiClient(
            token_service=get_token_service(),
            base_url=str(settings.HMS_API_BASE_URL),
            timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
        )
    return _resource_api_instance
