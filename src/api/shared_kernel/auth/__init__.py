"""Authentication shared kernel module."""

from shared_kernel.auth.claims import Claim, ClaimSet
from shared_kernel.auth.jwt_validator import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import (
    DefaultJWTValidatorProbe,
    JWTValidatorProbe,
)

__all__ = [
    "Claim",
    "ClaimSet",
    "InvalidTokenError",
    "JWTValidator",
    "JWTValidatorProbe",
    "DefaultJWTValidatorProbe",
]
