"""
orderdesk.api.__main__

`python -m orderdesk.api` (or the `orderdesk-api` script): serve the mini-app backend.

Responsibilities:
- Load settings; a production config without a token secret stops here.
- Serve with uvicorn, leaving per-request logging to `RequestContextMiddleware`.
"""

from __future__ import annotations

import uvicorn

from orderdesk.api.app import create_app
from orderdesk.observability.logging import get_logger
from orderdesk.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    log.info("api.serving", host=settings.api_host, port=settings.api_port, env=settings.env)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog owns the root logger
        access_log=False,  # `request.completed` already covers each request
        proxy_headers=True,  # mini-apps must be served over HTTPS, so a proxy sits in front
    )


if __name__ == "__main__":
    main()
