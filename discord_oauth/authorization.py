"""OAuth authorization URL construction"""

from urllib.parse import quote, urlencode

from config import DashboardConfig
from settings import DISCORD_AUTHORIZE_URL, OAUTH_SCOPES


class AuthorizationURLBuilder:
    """Builds Discord authorization URLs for the authorization-code flow"""

    def __init__(self, config: DashboardConfig, authorize_url: str = DISCORD_AUTHORIZE_URL):
        self.client_id = config.client_id
        self.redirect_uri = config.redirect_uri
        self.authorize_url = authorize_url

    def get_authorize_url(self, state: str) -> str:
        """Construct the authorize URL for a previously stored state

        Args:
            state: Anti-CSRF state already committed to the session

        Returns:
            Full authorization URL
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": OAUTH_SCOPES,
            "state": state,
        }
        # quote (not quote_plus) so the scope separator is sent as %20
        return f"{self.authorize_url}?{urlencode(params, quote_via=quote)}"
