import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from charging_app.core.config import settings
from charging_app.core.logging_setup import configure_logging
from charging_app.db.base import Base
from charging_app.db.session import engine
from charging_app.middleware.cors import add_cors
from charging_app.api import stations

configure_logging()
logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # loc = ("body", "stationName") / ("path", "id")
        field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "request"
        parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request."


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Crear tablas al inicio si no existen
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized (%s)", settings.APP_ENV)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title="Charging Station Management API",
        description="API for managing electric vehicle charging stations",
        version="1.0.0",
    )

    # CORS (el cliente corre en otro origen)
    add_cors(app)

    # Body o path mal formados cuentan como error de validación: 400, no 422
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _validation_message(exc)},
        )

    app.include_router(stations.router)

    @app.get("/health", tags=["health"])
    def health():
        return {"ok": True, "env": settings.APP_ENV}

    return app


app = create_app()
