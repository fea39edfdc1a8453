"""Run the API with uvicorn; fall back to a free port when the configured one is taken."""

import errno
import logging
import socket

import uvicorn

from app.config import settings

logger = logging.getLogger(__name__)


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise
    return False


def find_listen_port(host: str, port: int, fallback: bool = True) -> int:
    """
    Return the port to listen on: the configured one if free, else 0 (OS-assigned)
    when fallback is enabled. Raises OSError when the port is taken and fallback is off.
    """
    if port == 0 or not port_in_use(host, port):
        return port
    if not fallback:
        raise OSError(errno.EADDRINUSE, f"Port {port} is already in use")
    logger.warning("Port %s is already in use, listening on an OS-assigned port instead", port)
    return 0


def main() -> None:
    port = find_listen_port(settings.host, settings.port, fallback=settings.port_fallback)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
