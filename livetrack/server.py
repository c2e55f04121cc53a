from __future__ import annotations

import logging

import uvicorn

from livetrack.adapters.settings import ServerSettings


def main() -> None:
    settings = ServerSettings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "livetrack.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
