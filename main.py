import logging

from holiday_card import create_app
from holiday_card.core.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()

if __name__ == "__main__":
    import uvicorn

    print(f"🎅 Holiday Card Generator server running on http://localhost:{settings.port}")
    print(f"📚 API docs: http://localhost:{settings.port}/docs")

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
