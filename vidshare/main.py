from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn
from loguru import logger

from vidshare.core.config import AppSettings
from vidshare.core.exceptions import VidshareError
from vidshare.core.logging import setup_logging
from vidshare.api import api_router


def get_app_settings() -> AppSettings:
    try:
        return AppSettings()
    except Exception as e:
        logger.error(f"Error loading settings: {e}")
        logger.error(f"Using default settings")
        return AppSettings.model_construct()


async def vidshare_error_handler(request: Request, exc: VidshareError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def create_app():
    settings = get_app_settings()
    app = FastAPI(
        title=settings.app_name,
        description="API for the vidshare video platform",
        version="1.0.0",
    )
    setup_logging(settings)

    app.add_exception_handler(VidshareError, vidshare_error_handler)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to vidshare"}

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    settings = get_app_settings()
    uvicorn.run(
        "vidshare.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
        reload_dirs=["."],
    )
