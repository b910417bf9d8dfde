"""
Per-request session verification.

The verifier is an explicit, ordered list of ``(predicate, handler)``
stages. Each stage runs only when its predicate holds; a handler either
ends the check with an outcome, raises a :class:`ServiceError` (which ends
it as ``REJECTED``), or returns ``None`` to hand over to the next stage.

Stages, in order:

1. ``OPTIONS`` preflight: pass through.
2. Public paths (login, signup): pass through.
3. Both tokens present, else :class:`NotLoggedIn`.
4. Strip the ``Bearer`` marker, else :class:`MalformedToken`.
5. Reissue path: validate the refresh token, mint a new access token and
   use it for the rest of the check.
6. Other paths: validate the refresh token, then the access token.
7. Resolve the access token subject to the principal.

Nothing here touches the web framework; the Flask gate feeds in a
:class:`PresentedTokens` and acts on the returned
:class:`VerificationOutcome`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from forum.services._shared.errors import NotLoggedIn, ServiceError
from forum.services._shared.ports import TokenClaims, strip_scheme
from forum.services.session.dto import Identity
from forum.services.session.service import SessionService


class VerifierState(str, Enum):
    AUTHENTICATED = "AUTHENTICATED"
    REJECTED = "REJECTED"
    PASS_THROUGH = "PASS_THROUGH"


@dataclass(frozen=True, slots=True)
class PresentedTokens:
    """
    What the transport carried for one request.

    :param path: Request path.
    :param method: HTTP method.
    :param access: Transport-form access token (``"Bearer ..."``) or ``None``.
    :param refresh: Transport-form refresh token or ``None``.
    """

    path: str
    method: str = "GET"
    access: str | None = None
    refresh: str | None = None


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """
    Terminal result of a verification.

    :param state: Terminal state.
    :param identity: Set when ``AUTHENTICATED``.
    :param error: Categorized error when ``REJECTED``.
    :param reissued_access: Raw access token minted on the reissue path.
    """

    state: VerifierState
    identity: Identity | None = None
    error: ServiceError | None = None
    reissued_access: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.state is VerifierState.AUTHENTICATED


@dataclass(slots=True)
class _Check:
    """Mutable scratch state carried through the stages of one request."""

    request: PresentedTokens
    access: str | None = None
    refresh: str | None = None
    access_claims: TokenClaims | None = None
    reissued_access: str | None = None


Predicate = Callable[[_Check], bool]
Handler = Callable[[_Check], VerificationOutcome | None]


@dataclass(frozen=True, slots=True)
class Stage:
    name: str
    applies: Predicate
    handle: Handler


def _always(_: _Check) -> bool:
    return True


@dataclass(slots=True)
class SessionVerifier:
    """
    Ordered stage pipeline that turns presented tokens into an outcome.

    :param sessions: Session service used for parsing, reissue and lookup.
    :param public_paths: Paths reachable without tokens.
    :param reissue_path: Path of the reissue endpoint.
    """

    sessions: SessionService
    public_paths: frozenset[str]
    reissue_path: str
    stages: list[Stage] = field(init=False)

    def __post_init__(self) -> None:
        self.public_paths = frozenset(self.public_paths)
        self.stages = [
            Stage("preflight", self._is_preflight, self._pass_through),
            Stage("public", self._is_public, self._pass_through),
            Stage("presence", _always, self._require_both),
            Stage("scheme", _always, self._strip_schemes),
            Stage("reissue", self._is_reissue, self._reissue),
            Stage("validate", self._is_not_reissued, self._validate_both),
            Stage("identify", _always, self._identify),
        ]

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def verify(self, presented: PresentedTokens) -> VerificationOutcome:
        """Run every applicable stage until one produces an outcome."""
        check = _Check(request=presented)
        try:
            for stage in self.stages:
                if not stage.applies(check):
                    continue
                outcome = stage.handle(check)
                if outcome is not None:
                    return outcome
        except ServiceError as exc:
            return VerificationOutcome(state=VerifierState.REJECTED, error=exc)
        # only reachable if the stage list no longer ends with identify
        return VerificationOutcome(state=VerifierState.REJECTED, error=NotLoggedIn())

    def stage_names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    # ------------------------------------------------------------------ #
    # Predicates
    # ------------------------------------------------------------------ #

    @staticmethod
    def _is_preflight(check: _Check) -> bool:
        return check.request.method.upper() == "OPTIONS"

    def _is_public(self, check: _Check) -> bool:
        return _normalize(check.request.path) in self.public_paths

    def _is_reissue(self, check: _Check) -> bool:
        return _normalize(check.request.path) == self.reissue_path

    @staticmethod
    def _is_not_reissued(check: _Check) -> bool:
        return check.reissued_access is None

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _pass_through(_: _Check) -> VerificationOutcome:
        return VerificationOutcome(state=VerifierState.PASS_THROUGH)

    @staticmethod
    def _require_both(check: _Check) -> None:
        if not check.request.access or not check.request.refresh:
            raise NotLoggedIn()

    @staticmethod
    def _strip_schemes(check: _Check) -> None:
        check.access = strip_scheme(check.request.access)
        check.refresh = strip_scheme(check.request.refresh)

    def _reissue(self, check: _Check) -> None:
        assert check.refresh is not None
        fresh = self.sessions.reissue(check.refresh)
        if fresh is None:
            raise NotLoggedIn()
        check.access = fresh
        check.reissued_access = fresh
        check.access_claims = self.sessions.parse_access(fresh)

    def _validate_both(self, check: _Check) -> None:
        assert check.access is not None and check.refresh is not None
        self.sessions.parse_refresh(check.refresh)
        check.access_claims = self.sessions.parse_access(check.access)

    def _identify(self, check: _Check) -> VerificationOutcome:
        assert check.access_claims is not None
        identity = self.sessions.identify(check.access_claims.subject)
        return VerificationOutcome(
            state=VerifierState.AUTHENTICATED,
            identity=identity,
            reissued_access=check.reissued_access,
        )


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


def build_verifier(
    sessions: SessionService, *, public_paths: Iterable[str], reissue_path: str
) -> SessionVerifier:
    """Create a verifier with normalized path configuration."""
    return SessionVerifier(
        sessions=sessions,
        public_paths=frozenset(_normalize(p) for p in public_paths),
        reissue_path=_normalize(reissue_path),
    )
