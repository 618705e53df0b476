"""
Run the webhook under uvicorn on HOST:PORT from the environment.

    python main.py
"""

import uvicorn

from config import AppSettings


def main() -> None:
    settings = AppSettings()
    uvicorn.run(
        "asgi:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_config=None,
    )


if __name__ == "__main__":
    main()
