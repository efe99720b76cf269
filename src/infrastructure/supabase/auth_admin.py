"""GoTrue admin operations performed with the service-role key."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from infrastructure.observability.logging_config import get_logger
from infrastructure.supabase.rest_client import DEFAULT_TIMEOUT_SECONDS, send_request

logger = get_logger("recruit_backoffice.auth_admin")


class SupabaseAuthAdmin:
    """Thin wrapper around the ``/auth/v1`` admin endpoints."""

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def invite_user_by_email(self, email: str, data: dict[str, Any]) -> dict[str, Any]:
        """Send an invitation e-mail; ``data`` lands in the user's metadata."""
        response = await send_request(
            self._client,
            "POST",
            f"{self._base_url}/auth/v1/invite",
            timeout=self._timeout,
            json={"email": email, "data": data},
            headers={
                "apikey": self._service_role_key,
                "Authorization": f"Bearer {self._service_role_key}",
                "Content-Type": "application/json",
            },
        )
        logger.info("user_invited", email=email)
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
