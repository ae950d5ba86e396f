"""Pydantic models for user API responses."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared_kernel.auth import Claim, ClaimSet
from users.application.claims import (
    get_display_name,
    get_email,
    get_groups,
    get_roles,
)
from users.domain.aggregates import User


class UserResponse(BaseModel):
    """Response model for a local user record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    external_user_id: uuid.UUID = Field(
        ..., description="Subject id issued by the identity provider"
    )
    created_at: datetime = Field(..., description="When the user was first seen")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse
        """
        return cls(external_user_id=user.id.value, created_at=user.created_at)


class ClaimResponse(BaseModel):
    """A single claim as asserted in the token."""

    type: str
    value: str

    @classmethod
    def from_claim(cls, claim: Claim) -> ClaimResponse:
        return cls(type=claim.type, value=claim.value)


class ClaimsSummaryResponse(BaseModel):
    """Identity details read from the caller's token."""

    sub: str | None = Field(None, description="Subject identifier")
    email: str | None = Field(None, description="Email address")
    name: str | None = Field(None, description="Display name")
    groups: list[str] = Field(default_factory=list, description="Group memberships")
    roles: list[str] = Field(default_factory=list, description="Distinct roles")
    all: list[ClaimResponse] = Field(
        default_factory=list, description="Every claim in assertion order"
    )

    @classmethod
    def from_claims(
        cls, claims: ClaimSet, subject_id: uuid.UUID
    ) -> ClaimsSummaryResponse:
        """Summarize a claim set using the canonical accessors.

        Args:
            claims: The caller's verified claims
            subject_id: The parsed subject id of the caller

        Returns:
            ClaimsSummaryResponse
        """
        return cls(
            sub=str(subject_id),
            email=get_email(claims),
            name=get_display_name(claims),
            groups=get_groups(claims),
            roles=get_roles(claims),
            all=[ClaimResponse.from_claim(claim) for claim in claims],
        )


class CurrentUserResponse(BaseModel):
    """Response model for ``GET /api/user/me``."""

    claims: ClaimsSummaryResponse
    user: UserResponse | None = Field(
        None, description="Local user record, or null if none exists"
    )


class WipeDeniedResponse(BaseModel):
    """Body returned when a wipe is refused for the environment."""

    message: str


class ErrorResponse(BaseModel):
    """Structured error body returned by the exception handlers."""

    title: str
    status: int
    detail: str
    errors: dict[str, list[str]] | None = None
