"""Run the HTTP service: `chessbench` (console script) or `python -m chessbench.main`."""

import uvicorn

from chessbench.core.config import configure_logging, get_settings


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "chessbench.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
