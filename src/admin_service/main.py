# src/admin_service/main.py
import uvicorn

from admin_service.api.app import create_app
from admin_service.config.settings import get_settings

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "admin_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "local",
    )


if __name__ == "__main__":
    run()
