# main.py

from uvicorn import run

from portal_cache.configs import settings


def main() -> None:
    run(
        "portal_cache.main:app",
        host="127.0.0.1",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
