"""
Catalog click tracking.

GET serves a 1x1 GIF so the URL can be embedded as an image in PDFs and
WhatsApp statuses; POST is for JavaScript clients.
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from basecore.db import get_db
from basecore.settings import Settings
from catalog_engines.contracts.types import ClickSourceType
from catalog_engines.engines.tracking import (
    TRANSPARENT_GIF,
    client_ip,
    detect_device_type,
    hash_ip,
    truncate_user_agent,
)
from catalog_engines.persistence.repo import TrackingRepository
from marketplace_api.deps import get_app_settings

logger = logging.getLogger(__name__)

tracking_router = APIRouter(prefix="/tracking", tags=["tracking"])

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


class ClickPayloadError(ValueError):
    pass


def _optional_uuid(value: Any, field: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        raise ClickPayloadError(f"Invalid {field}")


def _record_click(request: Request, payload: dict[str, Any], db: Session, settings: Settings):
    if not payload.get("seller_id"):
        raise ClickPayloadError("seller_id is required")

    seller_id = _optional_uuid(payload["seller_id"], "seller_id")
    product_id = _optional_uuid(payload.get("product_id"), "product_id")
    variant_id = _optional_uuid(payload.get("variant_id"), "variant_id")

    source_type = payload.get("source_type") or ClickSourceType.DIRECT_LINK.value
    if source_type not in {s.value for s in ClickSourceType}:
        raise ClickPayloadError("Invalid source_type")

    user_agent = request.headers.get("user-agent", "")
    device_type = detect_device_type(user_agent)
    ip = client_ip(request.headers.get("x-forwarded-for"), request.headers.get("x-real-ip"))

    logger.info(
        "Tracking click",
        extra={
            "seller_id": str(seller_id),
            "product_id": str(product_id) if product_id else None,
            "source_type": source_type,
            "device_type": device_type,
        },
    )

    click = TrackingRepository(db).record_click(
        seller_id=seller_id,
        product_id=product_id,
        variant_id=variant_id,
        source_type=source_type,
        source_campaign=payload.get("source_campaign") or None,
        device_type=device_type,
        user_agent=truncate_user_agent(user_agent),
        ip_hash=hash_ip(ip, settings.CLICK_TRACKING_SALT),
    )
    db.commit()
    return click


@tracking_router.get("/click")
def track_click_pixel(
    request: Request,
    sid: str | None = None,
    pid: str | None = None,
    vid: str | None = None,
    src: str | None = None,
    camp: str | None = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    payload = {
        "seller_id": sid,
        "product_id": pid,
        "variant_id": vid,
        "source_type": src,
        "source_campaign": camp,
    }
    try:
        _record_click(request, payload, db, settings)
    except ClickPayloadError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    return Response(content=TRANSPARENT_GIF, media_type="image/gif", headers=NO_CACHE_HEADERS)


@tracking_router.post("/click")
async def track_click(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

    try:
        click = _record_click(request, payload, db, settings)
    except ClickPayloadError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    return {"success": True, "tracking_id": str(click.id)}
