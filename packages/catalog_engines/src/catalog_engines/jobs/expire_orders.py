"""
Pending order expiry.

B2B orders reserve stock while waiting for payment. When the reservation
window passes without payment the order is expired, the reservation is
released and the buyer (or the seller, for orders without a buyer) is
notified.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from catalog_engines.engines.money import round_money
from catalog_engines.persistence.models import utcnow
from catalog_engines.persistence.repo import OrdersRepository

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE_ORDER_EXPIRED = "order_expired"
NOTIFICATION_TITLE_ORDER_EXPIRED = "Pedido Expirado"


def expire_pending_orders(db: Session, now: datetime | None = None) -> dict[str, Any]:
    """
    Expire pending orders whose reservation ran out and notify their owners.

    Does not commit; the caller commits so the expiry and its notifications
    land together.
    """
    now = now or utcnow()
    repo = OrdersRepository(db)

    orders = repo.get_expired_pending_orders(now)
    for order in orders:
        repo.expire_order(order)
        repo.create_notification(
            user_id=order.buyer_id or order.seller_id,
            notification_type=NOTIFICATION_TYPE_ORDER_EXPIRED,
            title=NOTIFICATION_TITLE_ORDER_EXPIRED,
            message=(
                f"Tu pedido por ${round_money(order.total_amount)} ha expirado. "
                "El stock ha sido liberado."
            ),
            data={"order_id": str(order.id)},
        )

    expired_count = len(orders)
    if expired_count:
        logger.info("Expired pending orders", extra={"expired_count": expired_count})
    else:
        logger.debug("No pending orders to expire")

    return {
        "success": True,
        "expired_count": expired_count,
        "message": f"Expired {expired_count} pending orders",
    }
