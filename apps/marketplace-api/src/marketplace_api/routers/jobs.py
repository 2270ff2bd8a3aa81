"""Job trigger endpoints, for schedulers that call HTTP instead of running the worker."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from basecore.db import get_db
from catalog_engines.jobs.expire_orders import expire_pending_orders

jobs_router = APIRouter(prefix="/jobs", tags=["jobs"])


@jobs_router.post("/expire-pending-orders")
def expire_orders(db: Session = Depends(get_db)):
    result = expire_pending_orders(db)
    db.commit()
    return result
