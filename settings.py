"""Hardcoded constants for the ChatPulse dashboard backend

User-configurable values live in config.app_config.DashboardConfig and are
loaded once at startup. Everything here is fixed by the Discord protocol or by
the dashboard frontend.
"""

# Discord OAuth2 endpoints (hardcoded - not user configurable)
DISCORD_AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_API_BASE = "https://discord.com/api/v10"

# identify: /users/@me, guilds: /users/@me/guilds
OAUTH_SCOPES = "identify guilds"

# Permission bit for "Manage Server"
MANAGE_GUILD_PERMISSION = 0x20

# Channel type for guild text channels
GUILD_TEXT_CHANNEL_TYPE = 0

# Discord caps message history requests at 100
DEFAULT_MESSAGE_LIMIT = 10
MAX_MESSAGE_LIMIT = 100

# Browser-facing paths served by the frontend
DASHBOARD_PATH = "/dashboard.html"
LANDING_PATH = "/"

# Session cookie
SESSION_COOKIE_NAME = "chatpulse_sid"

# Development fallbacks, flagged at startup when used
DEFAULT_SESSION_SECRET = "chatpulse-secret-change-in-production"
DEFAULT_REDIRECT_URI = "http://localhost:3000/callback"

# Upper bound between two sweeps of expired session records
SESSION_SWEEP_INTERVAL_SECONDS = 60
