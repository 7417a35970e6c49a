"""Run the API server: python -m meetsync"""

import uvicorn

from meetsync.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "meetsync.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
