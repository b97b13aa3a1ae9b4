# pastebox/routers/pastes.py
# FastAPI router for pastes
# Identity is verified upstream; the authenticated user id arrives in X-User-Id

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response, status
from pydantic import ValidationError as PydanticValidationError

from pastebox.config import Settings
from pastebox.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from pastebox.schemas.paste import (
    DeleteResponse,
    PasteCreate,
    PasteCreateResponse,
    PasteListResponse,
    PasteResponse,
    RateLimitInfo,
    RateLimitResponse,
)
from pastebox.services.paste_service import DeleteOutcome, PasteService, ViewStatus


router = APIRouter(tags=["Pastes"])


def get_service(request: Request) -> PasteService:
    return request.app.state.paste_service


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    if x_user_id is None or not x_user_id.strip():
        raise UnauthorizedError()
    return x_user_id.strip()


@router.post("/pastes", response_model=PasteCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_paste(
    body: Dict[str, Any],
    response: Response,
    user_id: str = Depends(get_current_user),
    service: PasteService = Depends(get_service),
    settings: Settings = Depends(get_settings_from_app),
) -> PasteCreateResponse:
    """Create a paste that expires after the configured TTL."""
    try:
        payload = PasteCreate.model_validate(
            body, context={"max_content_bytes": settings.MAX_CONTENT_BYTES}
        )
    except PydanticValidationError as e:
        raise ValidationError(
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
        ) from e

    created = await service.create_paste(user_id, payload)
    response.headers["X-RateLimit-Remaining"] = str(created.rate_limit.remaining)
    response.headers["X-RateLimit-Limit"] = str(created.rate_limit.limit)
    return PasteCreateResponse(
        paste=created.paste,
        rate_limit=RateLimitInfo(
            remaining=created.rate_limit.remaining,
            reset_at=created.rate_limit.reset_at,
        ),
    )


@router.get("/pastes/rate-limit", response_model=RateLimitResponse)
async def get_rate_limit(
    response: Response,
    user_id: str = Depends(get_current_user),
    service: PasteService = Depends(get_service),
) -> RateLimitResponse:
    """Remaining creation quota; reading it does not consume a slot."""
    current = await service.rate_limit_status(user_id)
    response.headers["X-RateLimit-Remaining"] = str(current.remaining)
    response.headers["X-RateLimit-Limit"] = str(current.limit)
    return RateLimitResponse(
        remaining=current.remaining,
        limit=current.limit,
        reset_at=current.reset_at,
    )


@router.get("/pastes", response_model=PasteListResponse)
async def list_pastes(
    list_type: str = Query(default="all", alias="type", pattern="^(mine|all)$"),
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: str = Depends(get_current_user),
    service: PasteService = Depends(get_service),
) -> PasteListResponse:
    """List own pastes (type=mine) or everything the user can see (type=all)."""
    if list_type == "mine":
        pastes = await service.list_owned(user_id, limit)
    else:
        pastes = await service.list_accessible(user_id, limit)
    return PasteListResponse(pastes=pastes)


@router.get("/pastes/{paste_id}", response_model=PasteResponse)
async def get_paste(
    paste_id: str,
    user_id: str = Depends(get_current_user),
    service: PasteService = Depends(get_service),
) -> PasteResponse:
    outcome = await service.view_paste(paste_id, user_id)
    if outcome.status is ViewStatus.NOT_FOUND:
        raise NotFoundError()
    if outcome.status is ViewStatus.FORBIDDEN:
        raise ForbiddenError()
    return PasteResponse(paste=outcome.paste)


@router.delete("/pastes/{paste_id}", response_model=DeleteResponse)
async def delete_paste(
    paste_id: str,
    user_id: str = Depends(get_current_user),
    service: PasteService = Depends(get_service),
) -> DeleteResponse:
    outcome = await service.delete_paste(paste_id, user_id)
    if outcome is DeleteOutcome.NOT_FOUND:
        raise NotFoundError()
    if outcome is DeleteOutcome.FORBIDDEN:
        raise ForbiddenError("You can only delete your own pastes")
    return DeleteResponse(success=True)
