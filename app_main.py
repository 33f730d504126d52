"""Application entry point for the GreenPath API server."""

from __future__ import annotations

import socket

from greenpath_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from greenpath_app.core.green_path_manager import GreenPathManager
from greenpath_app.server.api_server import run_api_server
from greenpath_app.utils.logging_config import configure_logging


def _determine_public_url(port: int) -> str:
    """Best-effort determination of the local IP for the API base URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, load the catalogs and serve the API."""
    logger = configure_logging()
    logger.info("Starting GreenPath...")

    manager = GreenPathManager()
    logger.info("API available at %s", _determine_public_url(DEFAULT_PORT))
    try:
        run_api_server(manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    finally:
        manager.shutdown()


if __name__ == "__main__":
    main()
