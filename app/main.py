import uvicorn
from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.v1.router import router as v1_router
from app.core.config import settings
from app.core.telemetry import setup_telemetry

app = FastAPI(title="Marketplace API", version="0.1.0")

setup_telemetry(app)
register_exception_handlers(app)
app.include_router(v1_router)


def run() -> None:
    # sessions live in process memory, so a single worker serves the admin gate
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, workers=1)


if __name__ == "__main__":
    run()
