"""Session lifecycle: login, reissue, logout and per-request verification."""

from __future__ import annotations

from .dto import Identity, LoginIn, SessionTokenConfig, TokenPairOut
from .service import SessionService
from .verifier import (
    PresentedTokens,
    SessionVerifier,
    VerificationOutcome,
    VerifierState,
    build_verifier,
)

__all__ = [
    "Identity",
    "LoginIn",
    "PresentedTokens",
    "SessionService",
    "SessionTokenConfig",
    "SessionVerifier",
    "TokenPairOut",
    "VerificationOutcome",
    "VerifierState",
    "build_verifier",
]
