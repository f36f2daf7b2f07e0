"""Configuration status display for CLI"""

from rich.table import Table

from config import DashboardConfig
from utils import mask_secret


def show_config_status(config: DashboardConfig, console):
    """
    Display the effective configuration with secrets masked

    Args:
        config: Loaded dashboard configuration
        console: Rich console for output
    """
    table = Table(title="ChatPulse Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Client ID", config.client_id)
    table.add_row("Client Secret", mask_secret(config.client_secret))
    table.add_row("Bot Token", mask_secret(config.bot_token))
    table.add_row("Session Secret", mask_secret(config.session_secret))
    table.add_row("Redirect URI", config.redirect_uri)
    table.add_row("Listen", f"{config.bind_address}:{config.port}")
    table.add_row("Log Level", config.log_level)
    table.add_row("Timeouts", f"connect {config.connect_timeout}s, request {config.request_timeout}s")
    table.add_row("Session Backend", config.session_backend)
    if config.session_backend == "file":
        table.add_row("Session Directory", config.session_dir)
    table.add_row("Session TTL", f"{config.session_ttl_seconds}s")
    table.add_row("Secure Cookie", "Yes" if config.cookie_secure else "No")
    table.add_row("Probe Concurrency", str(config.probe_concurrency))
    table.add_row("Static Directory", config.static_dir)

    console.print(table)

    for name in config.insecure_defaults:
        console.print(f"[yellow]WARNING:[/yellow] {name} is using an insecure development default")
