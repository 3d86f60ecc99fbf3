from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.session import get_db_session
from lettrly.features.auth import require_user_id
from lettrly.features.shared.errors import not_found

from .errors import ProfileNotFoundError, ProfileValidationError, UsernameTakenError
from .repo import get_profile, get_profile_by_username, get_profile_stats
from .service import check_username_availability, update_profile
from .types import ProfileStats, PublicProfile, UpdateProfileInput, UsernameAvailability

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, ProfileNotFoundError):
        raise not_found(str(exc)) from exc
    if isinstance(exc, UsernameTakenError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, ProfileValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    raise exc


@router.get("/me", response_model=PublicProfile)
async def get_my_profile(
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> PublicProfile:
    try:
        profile = await get_profile(session, user_id)
    except Exception as exc:
        _raise_http_error(exc)
    return PublicProfile.model_validate(profile)


@router.patch("/me", response_model=PublicProfile)
async def patch_my_profile(
    payload: UpdateProfileInput,
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> PublicProfile:
    changes = payload.model_dump(include=payload.model_fields_set)
    try:
        profile = await update_profile(session, profile_id=user_id, changes=changes)
    except Exception as exc:
        _raise_http_error(exc)
    return PublicProfile.model_validate(profile)


@router.get("/me/stats", response_model=ProfileStats)
async def get_my_profile_stats(
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileStats:
    return await get_profile_stats(session, user_id)


@router.get("/availability", response_model=UsernameAvailability)
async def get_username_availability(
    username: str = Query(..., max_length=255),
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> UsernameAvailability:
    return await check_username_availability(session, username=username, profile_id=user_id)


@router.get("/{username}", response_model=PublicProfile)
async def get_public_profile(
    username: str,
    session: AsyncSession = Depends(get_db_session),
) -> PublicProfile:
    try:
        profile = await get_profile_by_username(session, username)
    except Exception as exc:
        _raise_http_error(exc)
    return PublicProfile.model_validate(profile)
