"""Privileged back-office functions: user invitation and event reminders."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from application.services.reminder_service import ReminderService
from application.services.user_service import UserService
from domain.models.user import AuthSession, UserRole
from infrastructure.auth.rbac import get_current_session, require_role
from infrastructure.container import get_reminder_service, get_user_service

from .schemas import ErrorResponse, InviteUserRequest, InviteUserResponse, ReminderRunResponse

router = APIRouter(prefix="/functions/v1", tags=["Functions"])


@router.post(
    "/invite-user",
    response_model=InviteUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Invite a new back-office user",
    responses={
        200: {"description": "Invitation e-mail sent."},
        400: {"description": "Missing fields, unknown role or provider error.", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token.", "model": ErrorResponse},
        403: {"description": "Caller is not an Admin.", "model": ErrorResponse},
    },
)
async def invite_user(
    body: InviteUserRequest,
    session: AuthSession = Depends(get_current_session),
    service: UserService = Depends(get_user_service),
) -> InviteUserResponse:
    user = await service.invite_user(
        email=str(body.email) if body.email else None,
        full_name=body.full_name,
        role=body.role,
        actor=session,
    )
    return InviteUserResponse(data=user)


@router.post(
    "/event-reminder",
    response_model=ReminderRunResponse,
    summary="Run the calendar reminder job now",
    responses={
        401: {"description": "Missing or invalid bearer token.", "model": ErrorResponse},
        403: {"description": "Caller is not an Admin.", "model": ErrorResponse},
    },
)
async def run_event_reminders(
    _: AuthSession = Depends(require_role(UserRole.ADMIN)),
    service: ReminderService = Depends(get_reminder_service),
) -> ReminderRunResponse:
    created = await service.send_due_reminders()
    return ReminderRunResponse(notifications_created=created)
