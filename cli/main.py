"""CLI entry point and argument parsing"""

import sys
import logging
import argparse
from rich.console import Console

from config import ConfigError, load_config
from dashboard import DashboardServer
from cli.status_display import show_config_status


console = Console()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def main():
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="ChatPulse Discord dashboard server")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate the configuration, print it with secrets masked and exit"
    )
    parser.add_argument("--env-file", default=None, help="Path to the .env file (default: ./.env)")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        config = load_config(args.env_file)
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        if e.missing:
            console.print("\n[yellow]Set these variables in the environment or in .env:[/yellow]")
            for name in e.missing:
                console.print(f"  {name}")
        sys.exit(1)

    if args.check_config:
        show_config_status(config, console)
        sys.exit(0)

    logging.getLogger().setLevel(config.log_level.upper())

    try:
        server = DashboardServer(
            config,
            debug=args.debug,
            bind_address=args.bind,
            port=args.port,
        )
        server.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
