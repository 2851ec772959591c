# workforce/main.py
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from workforce.api.v1.api import api_router
from workforce.core.config import Settings, settings as default_settings
from workforce.core.errors import register_exception_handlers
from workforce.db.session import Database

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    database = database or Database(settings.DATABASE_URL)
    if settings.AUTO_CREATE_TABLES:
        database.create_all()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title="Workforce Admin API", lifespan=lifespan)
    app.state.database = database
    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    # Every procedure is served as POST /api/v1/<namespace>.<name>
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Workforce Admin API"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run("workforce.main:app", host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
