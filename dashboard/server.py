"""
DashboardServer class for CLI control of the FastAPI application.
"""
import logging
import os
from typing import Optional

import uvicorn

from config import DashboardConfig
from .app import create_app

logger = logging.getLogger(__name__)

DEBUG_LOG_FILE = "dashboard_debug.log"


class DashboardServer:
    """Dashboard server wrapper for CLI control"""

    def __init__(
        self,
        config: DashboardConfig,
        debug: bool = False,
        bind_address: Optional[str] = None,
        port: Optional[int] = None,
    ):
        self.config = config
        self.server = None
        self.debug = debug
        self.bind_address = bind_address or config.bind_address
        self.port = port or config.port

        if debug:
            self._setup_debug_logging()

    def _setup_debug_logging(self):
        """Send DEBUG output to the console and append it to the debug log"""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        # Clear existing handlers to avoid duplicates
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        log_file = os.path.abspath(DEBUG_LOG_FILE)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        logger.info(f"Debug logging enabled - appending to {log_file}")

    def run(self):
        """Run the dashboard server (blocking)"""
        app = create_app(self.config)
        logger.info(f"ChatPulse server is running at http://{self.bind_address}:{self.port}")
        logger.info(f"Discord redirect URI is: {self.config.redirect_uri}")
        uvicorn_config = uvicorn.Config(
            app,
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else self.config.log_level.lower(),
            access_log=False
        )
        self.server = uvicorn.Server(uvicorn_config)
        self.server.run()

    def stop(self):
        """Stop the dashboard server"""
        if self.server:
            self.server.should_exit = True
