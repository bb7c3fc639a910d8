import json
import logging
import time
from typing import Optional

import httpx
from colorlog import ColoredFormatter

from portal.core.config import settings


# Formatter for console
console_formatter = ColoredFormatter(
    "%(log_color)s%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    log_colors={
        'DEBUG': 'cyan',
        'INFO': 'green',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'bold_red',
    },
)

# Formatter for file (no color)
file_formatter = logging.Formatter(
    "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
)

logger = logging.getLogger("portal.http")


def configure_logging(level: str = settings.LOG_LEVEL, log_file: Optional[str] = settings.LOG_FILE) -> logging.Logger:
    """Attach the colored console handler (and optional file handler) to the portal logger tree."""
    root = logging.getLogger("portal")
    root.setLevel(level)
    if getattr(root, "_portal_configured", False):
        return root

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(file_formatter)
        root.addHandler(file_handler)

    root._portal_configured = True
    return root


def get_status_color(status_code: int) -> str:
    if 200 <= status_code < 300:
        return "\033[92m"  # Green
    elif 400 <= status_code < 500:
        return "\033[93m"  # Yellow
    elif 500 <= status_code < 600:
        return "\033[91m"  # Red
    else:
        return "\033[0m"   # Default


async def _stamp_request(request: httpx.Request):
    request.extensions["portal_started_at"] = time.time()


async def log_response(response: httpx.Response):
    request = response.request
    started = request.extensions.get("portal_started_at", time.time())
    process_time = time.time() - started

    status_color = get_status_color(response.status_code)
    reset_color = "\033[0m"

    log_msg = (
        f"{request.method} {request.url.path} - "
        f"Status: {status_color}{response.status_code}{reset_color} - Time: {process_time:.2f}s"
    )

    if response.status_code >= 400:
        body = await response.aread()
        try:
            error_content = json.loads(body.decode())
            reason = error_content.get("message") or error_content.get("detail", error_content)
            log_msg += f" - Reason: {reason}"
        except (ValueError, AttributeError):
            log_msg += f" - Reason: {body.decode(errors='ignore')}"
        logger.warning(log_msg)
        return

    logger.info(log_msg)


def register_middleware(client: httpx.AsyncClient) -> httpx.AsyncClient:
    """Install request/response logging hooks on an httpx client."""
    client.event_hooks["request"].append(_stamp_request)
    client.event_hooks["response"].append(log_response)
    return client
