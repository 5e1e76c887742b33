import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from cookiecard.api.dependencies import LoginRequired
from cookiecard.api.routes import auth, catalog, dashboard, embed, health
from cookiecard.errors import CookieCardError
from cookiecard.shared.infrastructure.database import Base, engine
from cookiecard.shared.infrastructure.logging_config import configure_logging
from cookiecard.shared.infrastructure.settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()
    Base.metadata.create_all(bind=engine)

    docs_enabled = settings.environment != "production"
    app = FastAPI(
        title="Cookie Card",
        description="Embeddable Notion database widgets",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    @app.exception_handler(LoginRequired)
    async def handle_login_required(_request: Request, _exc: LoginRequired) -> RedirectResponse:
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(CookieCardError)
    async def handle_cookiecard_error(_request: Request, exc: CookieCardError) -> JSONResponse:
        logger.warning(
            "cookiecard.handled_error | %s",
            {
                "error_id": exc.error_id,
                "code": exc.code,
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"code": exc.code, "message": exc.message, "error_id": exc.error_id}},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        error_id = str(uuid.uuid4())
        logger.exception("cookiecard.unhandled_error | %s", {"error_id": error_id})
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "internal_error",
                    "message": "Unexpected internal error",
                    "error_id": error_id,
                }
            },
        )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(dashboard.router)
    app.include_router(embed.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.api_host, port=settings.api_port)
