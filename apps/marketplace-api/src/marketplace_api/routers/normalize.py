"""Product normalization job endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from basecore.db import get_db
from catalog_engines.contracts.types import NormalizeAction
from catalog_engines.engines.normalizer import ProductNormalizationEngine
from marketplace_api.schemas import NormalizeRequest

logger = logging.getLogger(__name__)

normalize_router = APIRouter(tags=["catalog"])


@normalize_router.post("/normalize-products")
def normalize_products(body: NormalizeRequest, db: Session = Depends(get_db)):
    """
    Preview or run the SKU normalization.

    An unknown action is answered with 400 by the InvalidActionError handler.
    """
    result = ProductNormalizationEngine(db).run(body.action, dry_run=body.dry_run)

    if body.action == NormalizeAction.MIGRATE.value and not body.dry_run:
        db.commit()

    return result
