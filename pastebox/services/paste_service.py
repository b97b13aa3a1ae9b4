# pastebox/services/paste_service.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from opentelemetry import trace

from pastebox.config import Settings
from pastebox.db.store import Clock, KeyValueStore, system_clock
from pastebox.errors import RateLimitError
from pastebox.models.paste import Paste, Visibility
from pastebox.observability.metrics import PASTES_CREATED, PASTES_DELETED
from pastebox.repositories.paste_index import PasteIndex
from pastebox.repositories.paste_repository import PasteRepository
from pastebox.schemas.paste import PasteCreate
from pastebox.services.access_resolver import AccessResolver, can_view
from pastebox.services.notifier import Notifier, PasteEvent, StoreEventNotifier
from pastebox.services.rate_limiter import FixedWindowRateLimiter, RateLimitStatus
from pastebox.utils.deadline import with_deadline
from pastebox.utils.logger import log_info

tracer = trace.get_tracer(__name__)


class ViewStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class DeleteOutcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class ViewOutcome:
    status: ViewStatus
    paste: Optional[Paste] = None


@dataclass(frozen=True)
class PasteCreated:
    paste: Paste
    rate_limit: RateLimitStatus


def normalize_shared_with(owner_id: str, visibility: Visibility, shared_with: List[str]) -> List[str]:
    """Recipients without duplicates or the owner; empty for public pastes."""
    if visibility is Visibility.PUBLIC:
        return []
    return [u for u in dict.fromkeys(shared_with) if u != owner_id]


class PasteService:
    """Inbound operations: create, get, delete and list pastes.

    Not-found and forbidden are ordinary results. StoreUnavailable is the
    only infrastructure failure that propagates; RateLimitError is raised
    when creation quota is exhausted.
    """

    def __init__(
        self,
        repository: PasteRepository,
        index: PasteIndex,
        resolver: AccessResolver,
        rate_limiter: FixedWindowRateLimiter,
        notifier: Notifier,
        default_limit: int = 50,
        max_limit: int = 100,
    ):
        self._repo = repository
        self._index = index
        self._resolver = resolver
        self._rate_limiter = rate_limiter
        self._notifier = notifier
        self._default_limit = default_limit
        self._max_limit = max_limit

    def _clamp(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = self._default_limit
        return max(0, min(limit, self._max_limit))

    @with_deadline("create_paste")
    async def create_paste(self, owner_id: str, payload: PasteCreate) -> PasteCreated:
        with tracer.start_as_current_span("paste.create"):
            status = await self._rate_limiter.check(owner_id)
            if not status.allowed:
                raise RateLimitError(
                    remaining=status.remaining,
                    reset_at=status.reset_at,
                    retry_after=status.retry_after,
                )

            paste = await self._repo.create(
                owner_id,
                payload.content,
                payload.visibility,
                normalize_shared_with(owner_id, payload.visibility, payload.shared_with),
            )
            await self._index.add(paste)
            await self._notifier.notify(PasteEvent.CREATED, paste.paste_id)

            PASTES_CREATED.labels(visibility=paste.visibility.value).inc()
            log_info(f"PasteService: created paste id={paste.paste_id} owner={owner_id} visibility={paste.visibility.value}")
            return PasteCreated(paste=paste, rate_limit=status)

    @with_deadline("get_paste")
    async def get_paste(self, paste_id: str) -> Optional[Paste]:
        return await self._repo.get(paste_id)

    @with_deadline("view_paste")
    async def view_paste(self, paste_id: str, viewer_id: str) -> ViewOutcome:
        paste = await self._repo.get(paste_id)
        if paste is None:
            return ViewOutcome(ViewStatus.NOT_FOUND)
        if not can_view(paste, viewer_id):
            return ViewOutcome(ViewStatus.FORBIDDEN)
        return ViewOutcome(ViewStatus.FOUND, paste)

    @with_deadline("delete_paste")
    async def delete_paste(self, paste_id: str, requester_id: str) -> DeleteOutcome:
        with tracer.start_as_current_span("paste.delete"):
            # Fetch, check and remove separately instead of PasteRepository.delete,
            # whose bool cannot tell NOT_FOUND from FORBIDDEN
            paste = await self._repo.get(paste_id)
            if paste is None:
                return DeleteOutcome.NOT_FOUND
            if paste.user_id != requester_id:
                log_info(f"PasteService: user {requester_id} attempted to delete paste {paste_id} owned by {paste.user_id}")
                return DeleteOutcome.FORBIDDEN

            await self._repo.remove(paste)
            # Index cleanup follows the stored record, not caller input
            await self._index.remove(paste)
            await self._notifier.notify(PasteEvent.DELETED, paste_id)

            PASTES_DELETED.inc()
            log_info(f"PasteService: deleted paste id={paste_id} owner={requester_id}")
            return DeleteOutcome.SUCCESS

    @with_deadline("list_owned")
    async def list_owned(self, user_id: str, limit: Optional[int] = None) -> List[Paste]:
        return await self._resolver.list_owner(user_id, self._clamp(limit))

    @with_deadline("list_accessible")
    async def list_accessible(self, user_id: str, limit: Optional[int] = None) -> List[Paste]:
        return await self._resolver.list_accessible(user_id, self._clamp(limit))

    @with_deadline("rate_limit_status")
    async def rate_limit_status(self, user_id: str) -> RateLimitStatus:
        return await self._rate_limiter.peek(user_id)


def build_paste_service(
    store: KeyValueStore,
    settings: Settings,
    clock: Clock = system_clock,
    notifier: Optional[Notifier] = None,
) -> PasteService:
    """Wire every component onto one explicitly initialized store handle."""
    repository = PasteRepository(store, settings.PASTE_TTL_SECONDS, clock=clock)
    index = PasteIndex(store, settings.PASTE_TTL_SECONDS)
    if notifier is None:
        notifier = StoreEventNotifier(store, settings.PASTE_EVENT_TTL_SECONDS, clock=clock)
    return PasteService(
        repository=repository,
        index=index,
        resolver=AccessResolver(repository, index),
        rate_limiter=FixedWindowRateLimiter(
            store,
            window_size=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            clock=clock,
        ),
        notifier=notifier,
        default_limit=settings.DEFAULT_LIST_LIMIT,
        max_limit=settings.MAX_LIST_LIMIT,
    )
