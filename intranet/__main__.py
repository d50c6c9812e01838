"""Intranet entrypoint.

Run with:
  python -m intranet
"""

import uvicorn

from intranet.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "intranet.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
