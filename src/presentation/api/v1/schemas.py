"""
Pydantic v2 request/response schemas for the back-office functions API.

Error bodies follow the ``{"error": message}`` envelope shared by every
function endpoint.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ErrorResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={"examples": [{"error": "Missing email, full_name or role."}]}
    )

    error: str = Field(..., description="Human-readable failure message.")


class InviteUserRequest(BaseModel):
    """Body of ``POST /functions/v1/invite-user``.

    Fields are optional at the schema level so a missing field yields the
    same 400 envelope as any other invalid invitation.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"email": "new.hire@agency.example", "full_name": "Mai Tran", "role": "Headhunter"}
            ]
        }
    )

    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = Field(None, description="One of Admin, Manager, HR, Headhunter, BD.")


class InviteUserResponse(BaseModel):
    data: dict[str, Any]


class ReminderRunResponse(BaseModel):
    notifications_created: int = Field(..., ge=0)
