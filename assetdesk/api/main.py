from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from assetdesk.api.routes_company import router as company_router
from assetdesk.api.routes_health import router as health_router
from assetdesk.api.routes_inventory import router as inventory_router
from assetdesk.core.config import settings
from assetdesk.core.errors import register_error_handlers
from assetdesk.core.logger import init_logging


def create_app() -> FastAPI:
    init_logging()

    # Interactive docs are disabled in production
    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(company_router, prefix="/api", tags=["company"])
    app.include_router(inventory_router, prefix="/api", tags=["inventory"])
    app.include_router(health_router)
    return app


app = create_app()
