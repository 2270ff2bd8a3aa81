"""
Marketplace API

HTTP surface of the catalog, pricing, logistics and checkout engines.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from basecore.logging import setup_logging
from basecore.settings import get_settings
from catalog_engines.exceptions import InvalidActionError, NotFoundError
from marketplace_api.routers.checkout import checkout_router
from marketplace_api.routers.jobs import jobs_router
from marketplace_api.routers.logistics import logistics_router
from marketplace_api.routers.normalize import normalize_router
from marketplace_api.routers.notifications import notifications_router
from marketplace_api.routers.pricing import pricing_router
from marketplace_api.routers.tracking import tracking_router
from notifications_whatsapp.providers.base import ProviderError
from notifications_whatsapp.service import NotificationValidationError

setup_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(
    title="Marketplace API",
    description="B2B/B2C marketplace catalog, pricing and logistics",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidActionError)
async def invalid_action_handler(request: Request, exc: InvalidActionError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})


@app.exception_handler(NotificationValidationError)
async def notification_validation_handler(request: Request, exc: NotificationValidationError):
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    logger.error("Notification provider error", extra={"code": exc.code, "path": request.url.path})
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error", extra={"path": request.url.path}, exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


app.include_router(normalize_router, prefix="/api/v1")
app.include_router(pricing_router, prefix="/api/v1")
app.include_router(logistics_router, prefix="/api/v1")
app.include_router(checkout_router, prefix="/api/v1")
app.include_router(tracking_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(jobs_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "Marketplace API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {"status": "ok"}
