"""Entry point for running TravelXO via ``python -m travelxo``."""

from __future__ import annotations

import logging
import os

import uvicorn

logger = logging.getLogger("travelxo")

DEFAULT_LOG_LEVEL = "INFO"
# Names understood by both logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def resolve_log_level(value: str) -> str:
    """Normalize a level name, falling back to ``INFO`` for unknown names."""

    name = value.strip().upper()
    if name in LOG_LEVELS:
        return name
    return DEFAULT_LOG_LEVEL


def main() -> None:
    """Start the FastAPI-powered TravelXO web server."""

    host = os.environ.get("TRAVELXO_HOST", "0.0.0.0")
    port = int(os.environ.get("TRAVELXO_PORT", "8000"))
    requested_level = os.environ.get("TRAVELXO_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = resolve_log_level(requested_level)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if log_level != requested_level.strip().upper():
        logger.warning(
            "Unknown TRAVELXO_LOG_LEVEL %r, using %s", requested_level, log_level
        )
    uvicorn.run(
        "travelxo.ui:app", host=host, port=port, reload=False, log_level=log_level.lower()
    )


if __name__ == "__main__":
    main()
