"""
Optimistic favorite toggling over the client query cache
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Union

from app.client.cache import QueryCache, Snapshot
from app.core.exceptions import RemoteFailure
from app.models.user import DashboardSummary, FavoriteProperty, FavoriteSummary, FavoriteToggleResult

logger = logging.getLogger(__name__)

FAVORITES_LIST_KEY = "favorites:list"
FAVORITES_SUMMARY_KEY = "favorites:summary"
DASHBOARD_SUMMARY_KEY = "dashboard:summary"


def is_favorite_key(property_id: str) -> str:
    return f"favorites:is:{property_id}"


class FavoritesRemote(Protocol):
    async def toggle(self, property_id: str) -> FavoriteToggleResult: ...

    async def is_favorite(self, property_id: str) -> bool: ...

    async def list_favorites(self) -> List[FavoriteProperty]: ...

    async def summary(self) -> FavoriteSummary: ...

    async def dashboard_summary(self) -> DashboardSummary: ...


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    snapshot: Snapshot
    generation: int


@dataclass(frozen=True)
class Settled:
    generation: int
    is_favorite: Optional[bool] = None
    failed: bool = False


ToggleState = Union[Idle, Pending, Settled]


class FavoriteToggler:
    """
    Toggle a favorite with an optimistic cache update.

    The boolean entry flips immediately. Un-favoriting also drops the property
    from the cached list; favoriting waits for the server before the list
    changes. Success invalidates every dependent entry, failure restores the
    snapshot and raises RemoteFailure. Each property carries a generation
    counter so a failure from an older toggle never restores over a newer one.
    A rollback over a snapshot taken while another toggle was in flight is
    also marked stale, since that snapshot was never confirmed by the server.
    """

    def __init__(self, cache: QueryCache, remote: FavoritesRemote, timeout: Optional[float] = None):
        self.cache = cache
        self.remote = remote
        self.timeout = timeout
        self._generations: Dict[str, int] = {}
        self._states: Dict[str, ToggleState] = {}

    def state(self, property_id: str) -> ToggleState:
        return self._states.get(property_id, Idle())

    async def toggle(self, property_id: str) -> bool:
        generation = self._generations.get(property_id, 0) + 1
        self._generations[property_id] = generation

        flag_key = is_favorite_key(property_id)
        snapshot = self.cache.snapshot([FAVORITES_LIST_KEY, flag_key])
        # A snapshot taken over another in-flight toggle holds unconfirmed state
        overlapped = isinstance(self.state(property_id), Pending)
        was_favorite = bool(self.cache.get_data(flag_key))

        self.cache.apply(flag_key, lambda old: not old)
        if was_favorite:
            self.cache.apply(
                FAVORITES_LIST_KEY,
                lambda favorites: [f for f in favorites if f.property_id != property_id],
                create=False
            )
        self._states[property_id] = Pending(snapshot=snapshot, generation=generation)

        try:
            result = await self._call_remote(property_id)
        except BaseException as e:
            self._settle_failure(property_id, generation, snapshot, overlapped)
            if isinstance(e, Exception) and not isinstance(e, RemoteFailure):
                raise RemoteFailure(f"Favorite toggle for {property_id} failed: {e}") from e
            raise

        self.cache.invalidate(FAVORITES_LIST_KEY, flag_key, FAVORITES_SUMMARY_KEY, DASHBOARD_SUMMARY_KEY)
        if self._is_current(property_id, generation):
            self._states[property_id] = Settled(generation=generation, is_favorite=result.is_favorite)
        return result.is_favorite

    async def _call_remote(self, property_id: str) -> FavoriteToggleResult:
        if self.timeout is None:
            return await self.remote.toggle(property_id)
        try:
            return await asyncio.wait_for(self.remote.toggle(property_id), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise RemoteFailure(f"Favorite toggle for {property_id} timed out after {self.timeout}s") from e

    def _settle_failure(self, property_id: str, generation: int, snapshot: Snapshot, overlapped: bool) -> None:
        if self._is_current(property_id, generation):
            self.cache.rollback(snapshot)
            if overlapped:
                self.cache.invalidate(FAVORITES_LIST_KEY, is_favorite_key(property_id))
            self._states[property_id] = Settled(generation=generation, failed=True)
            logger.warning(f"Favorite toggle for {property_id} failed; cache rolled back")
        else:
            # A newer toggle already applied its own optimistic state; let a refetch decide
            self.cache.invalidate(FAVORITES_LIST_KEY, is_favorite_key(property_id))
            logger.warning(f"Superseded favorite toggle for {property_id} failed; cache invalidated")

    def _is_current(self, property_id: str, generation: int) -> bool:
        return self._generations.get(property_id) == generation


class FavoritesClient:
    """Cached reads plus optimistic toggling for one signed-in tenant"""

    def __init__(self, remote: FavoritesRemote, cache: Optional[QueryCache] = None, timeout: Optional[float] = None):
        self.remote = remote
        self.cache = cache or QueryCache()
        self.toggler = FavoriteToggler(self.cache, remote, timeout=timeout)

    async def is_favorite(self, property_id: str) -> bool:
        return bool(await self.cache.fetch(
            is_favorite_key(property_id), lambda: self.remote.is_favorite(property_id)
        ))

    async def list_favorites(self) -> List[FavoriteProperty]:
        return await self.cache.fetch(FAVORITES_LIST_KEY, self.remote.list_favorites)

    async def summary(self) -> FavoriteSummary:
        return await self.cache.fetch(FAVORITES_SUMMARY_KEY, self.remote.summary)

    async def dashboard_summary(self) -> DashboardSummary:
        return await self.cache.fetch(DASHBOARD_SUMMARY_KEY, self.remote.dashboard_summary)

    async def toggle(self, property_id: str) -> bool:
        return await self.toggler.toggle(property_id)
