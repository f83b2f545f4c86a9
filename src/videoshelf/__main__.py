"""Run the API server: ``python -m videoshelf``."""

from __future__ import annotations

import uvicorn

from videoshelf.config import get_settings
from videoshelf.log import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "videoshelf.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
