"""Discord OAuth2 login state machine

ANONYMOUS -> STATE_ISSUED (initiate_login) -> AUTHENTICATED (handle_callback)

Any rejected callback leaves the session unauthenticated, with its state
consumed.
"""

import logging
from typing import Optional

import httpx

from config import DashboardConfig
from discord_api import DiscordClient, RemoteAPIError
from sessions import SessionCommitError, SessionDestroyError, SessionHandle
from settings import DASHBOARD_PATH
from utils import mask_secret
from .authorization import AuthorizationURLBuilder
from .models import DiscordUser, LoginRedirect
from .state import create_state, states_match
from .token_exchange import TokenExchangeError, exchange_code

logger = logging.getLogger(__name__)

# User-facing rejection reasons, in validation order
REASON_NO_STATE = "no state received"
REASON_SESSION_EXPIRED = "session expired - try logging in again"
REASON_INVALID_STATE = "invalid state"
REASON_MISSING_CODE = "missing code"
REASON_TOKEN_ERROR = "token error"
REASON_USER_FETCH_ERROR = "user fetch error"
REASON_CALLBACK_ERROR = "callback error"


class CallbackRejected(Exception):
    """The callback failed validation or the provider refused the login"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    @property
    def user_message(self) -> str:
        return f"Login failed. Please try again. ({self.reason})"


class LoginFlow:
    """Orchestrates login, callback and logout against one session

    This class owns the authorization-code sequence:
    - state issuance and authorization URL
    - callback validation (CSRF state, code presence)
    - code exchange and identity fetch
    - atomic commit of token and identity
    """

    def __init__(
        self,
        config: DashboardConfig,
        client: DiscordClient,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Dashboard configuration
            client: Discord REST client used for the identity fetch
            transport: Optional httpx transport for the token endpoint (tests)
        """
        self.config = config
        self.client = client
        self.transport = transport
        self.auth_builder = AuthorizationURLBuilder(config)

    async def initiate_login(self, session: SessionHandle) -> LoginRedirect:
        """Issue a state and return the provider redirect

        Returns:
            LoginRedirect to Discord, or to the dashboard when already signed in

        Raises:
            SessionCommitError: If the state could not be persisted, no redirect may be sent
        """
        if session.is_authenticated:
            logger.info("[OAuth] User already authenticated, skipping login")
            return LoginRedirect(location=DASHBOARD_PATH, state_issued=False)

        state = create_state()
        session.set("oauth_state", state)
        # The state must be durable before the browser can reach /callback
        await session.commit()

        logger.info(f"[OAuth] State generated and saved: {mask_secret(state)}")
        logger.info("[OAuth] Redirecting to Discord login")
        return LoginRedirect(location=self.auth_builder.get_authorize_url(state), state_issued=True)

    async def handle_callback(
        self,
        session: SessionHandle,
        code: Optional[str],
        state: Optional[str],
    ) -> DiscordUser:
        """Validate the callback, exchange the code and commit the identity

        Args:
            session: Session of the browser completing the login
            code: Authorization code query parameter
            state: State query parameter

        Returns:
            The authenticated user

        Raises:
            CallbackRejected: On any validation or provider failure
            SessionCommitError: If the consumed state or the authenticated session could not be persisted
        """
        # Cleared in the store before any validation, so the state is single use
        # even when two callbacks for the same session run concurrently
        stored_state = await session.take("oauth_state")
        logger.info(
            f"[OAuth] Callback received: state={mask_secret(state)} stored={mask_secret(stored_state)}"
        )

        user = await self._complete(session, code, state, stored_state)

        try:
            await session.commit()
        except SessionCommitError:
            logger.error("[OAuth] Failed to persist authenticated session, discarding it")
            try:
                await session.destroy()
            except SessionDestroyError as e:
                logger.error(f"[OAuth] Error destroying session: {e}")
            raise

        logger.info(f"[OAuth] Authentication successful for user: {user.username}")
        return user

    async def _complete(
        self,
        session: SessionHandle,
        code: Optional[str],
        state: Optional[str],
        stored_state: Optional[str],
    ) -> DiscordUser:
        if not state:
            logger.error("[OAuth] No state received from Discord")
            raise CallbackRejected(REASON_NO_STATE)

        if not stored_state:
            logger.error("[OAuth] No state found in session")
            raise CallbackRejected(REASON_SESSION_EXPIRED)

        if not states_match(state, stored_state):
            logger.error("[OAuth] State mismatch")
            raise CallbackRejected(REASON_INVALID_STATE)

        if not code:
            logger.error("[OAuth] No code received")
            raise CallbackRejected(REASON_MISSING_CODE)

        try:
            token = await exchange_code(code, self.config, transport=self.transport)
        except TokenExchangeError as e:
            logger.error(f"[OAuth] Token exchange failed: {e}")
            raise CallbackRejected(REASON_TOKEN_ERROR) from e

        session.set("access_token", token.access_token)

        try:
            profile = await self.client.get_user_info(token.access_token)
            user = DiscordUser.from_api(profile)
        except (RemoteAPIError, KeyError, TypeError) as e:
            # Token and identity are committed together or not at all
            session.clear("access_token")
            logger.error(f"[OAuth] Failed to fetch user profile: {e}")
            raise CallbackRejected(REASON_USER_FETCH_ERROR) from e

        session.set("user", user.to_session())
        return user

    async def logout(self, session: SessionHandle) -> None:
        """Destroy the session, best effort

        Destroy errors are logged and not raised; the caller always redirects.
        """
        try:
            await session.destroy()
        except SessionDestroyError as e:
            logger.error(f"[OAuth] Error destroying session: {e}")
        logger.info("[OAuth] User logged out")
