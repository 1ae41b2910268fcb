"""
HTTP client for the favorites API
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.exceptions import RemoteFailure
from app.models.user import DashboardSummary, FavoriteProperty, FavoriteSummary, FavoriteToggleResult

logger = logging.getLogger(__name__)


class FavoritesApiClient:
    """Async client for /api/v1/favorites authenticated with a bearer token"""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.client.request(method, path, json=json)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} returned {e.response.status_code}")
            raise RemoteFailure(f"{method} {path} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RemoteFailure(f"{method} {path} failed: {e}") from e

    async def toggle(self, property_id: str) -> FavoriteToggleResult:
        data = await self._request("POST", "/api/v1/favorites/toggle", json={"property_id": property_id})
        return FavoriteToggleResult.model_validate(data)

    async def is_favorite(self, property_id: str) -> bool:
        data = await self._request("GET", f"/api/v1/favorites/{property_id}/status")
        return bool(data["is_favorite"])

    async def list_favorites(self) -> List[FavoriteProperty]:
        data = await self._request("GET", "/api/v1/favorites/")
        return [FavoriteProperty.model_validate(item) for item in data]

    async def summary(self) -> FavoriteSummary:
        data = await self._request("GET", "/api/v1/favorites/summary")
        return FavoriteSummary.model_validate(data)

    async def dashboard_summary(self) -> DashboardSummary:
        data = await self._request("GET", "/api/v1/dashboard/summary")
        return DashboardSummary.model_validate(data)
