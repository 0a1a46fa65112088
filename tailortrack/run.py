"""Development server: ``tailortrack`` or ``python -m tailortrack.run``."""
import uvicorn

from .deps import settings


def main():
    uvicorn.run(
        "tailortrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
