"""Session state and the multi-step HT authorization sequence."""

from __future__ import annotations

import asyncio
import enum
import logging
import time

from pydantic import BaseModel, ConfigDict, Field

from pyhthome._api.household import authorize_household, fetch_household
from pyhthome._api.login import login as _login
from pyhthome._crypto import CredentialCodec
from pyhthome._transport import Sender
from pyhthome.config import HtConfig
from pyhthome.exceptions import HtError, HtRefreshError
from pyhthome.models import HouseholdContext

_logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    """Progress through the authorization sequence."""

    UNAUTHENTICATED = "unauthenticated"
    AWAITING_HOUSEHOLD = "awaiting_household"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """An authorized session.

    Parameters
    ----------
    token : str
        Session cookie (``name=value``) sent with every request.
    household : HouseholdContext
        Residence the token was authorized for.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) of installation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str = Field(repr=False)
    household: HouseholdContext
    created_at: float = Field(default_factory=time.monotonic)

    @property
    def age(self) -> float:
        """Seconds since the session was installed."""
        return time.monotonic() - self.created_at


class SessionManager:
    """Owns the current :class:`Session` and reproduces the vendor login flow.

    A refresh runs three calls in order: ``login`` (token from the
    session cookie), ``resolve_household`` (first approved danji) and
    ``authorize`` (household-scoped upgrade of that token). The new token
    is only installed once all three succeed, so callers never see a
    token that is logged in but not yet authorized.
    """

    def __init__(self, config: HtConfig, http: Sender, *, codec: CredentialCodec | None = None) -> None:
        self._config = config
        self._http = http
        self._codec = codec or CredentialCodec()
        self._session: Session | None = None
        self._state = SessionState.UNAUTHENTICATED
        self._refresh_lock = asyncio.Lock()
        self._generation = 0
        self._last_error: HtRefreshError | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def token(self) -> str | None:
        """Current session token, or ``None`` when unauthenticated."""
        return self._session.token if self._session is not None else None

    @property
    def state(self) -> SessionState:
        """Progress of the most recent refresh."""
        return self._state

    @property
    def generation(self) -> int:
        """Number of finished refresh attempts, successful or not."""
        return self._generation

    # ------------------------------------------------------------------
    # Authorization steps
    # ------------------------------------------------------------------

    async def login(self) -> str:
        """Log in and return the candidate token without installing it."""
        return await _login(self._config, self._http, self._codec)

    async def resolve_household(self, *, token: str | None = None) -> HouseholdContext:
        """Find the account's approved residence using *token* (default: current)."""
        return await fetch_household(self._http, token if token is not None else self.token or "")

    async def authorize(self, household: HouseholdContext, *, token: str | None = None) -> None:
        """Upgrade *token* (default: current) for *household*."""
        await authorize_household(self._http, token if token is not None else self.token or "", household)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self) -> Session:
        """Run the full authorization sequence and install the new session.

        Raises
        ------
        HtRefreshError
            If any step fails. The failing step's exception is chained as
            ``__cause__`` and the manager is left unauthenticated.
        """
        async with self._refresh_lock:
            return await self._refresh_locked()

    async def refresh_if_stale(self, observed_generation: int) -> Session:
        """Refresh unless an attempt finished after *observed_generation*.

        Used by the transport after a 401. Requests rejected in the same
        generation share one login attempt: if it succeeded they get its
        session, if it failed they get its error without logging in again.
        """
        async with self._refresh_lock:
            if self._generation != observed_generation:
                if self._session is not None:
                    _logger.debug("Session already refreshed by another request")
                    return self._session
                if self._last_error is not None:
                    raise HtRefreshError(str(self._last_error)) from self._last_error.__cause__
            return await self._refresh_locked()

    def invalidate(self) -> None:
        """Drop the current session (next 401 will re-authenticate)."""
        self._session = None
        self._state = SessionState.UNAUTHENTICATED

    async def _refresh_locked(self) -> Session:
        try:
            self._last_error = None
            self._state = SessionState.UNAUTHENTICATED
            token = await self.login()
            self._state = SessionState.AWAITING_HOUSEHOLD
            household = await self.resolve_household(token=token)
            self._state = SessionState.AWAITING_AUTHORIZATION
            await self.authorize(household, token=token)
        except HtError as exc:
            self.invalidate()
            error = HtRefreshError(f"Failed to refresh access token: {exc}")
            self._last_error = error
            raise error from exc
        finally:
            self._generation += 1

        session = Session(token=token, household=household)
        self._session = session
        self._state = SessionState.AUTHENTICATED
        return session
