"""
Order Expiry Worker

Periodically expires pending B2B orders whose stock reservation ran out and
notifies their owners.

This worker uses ONLY:
- basecore (DB, settings, logging)
- catalog_engines (expiry job)

Features:
- Fixed interval (ORDER_EXPIRY_INTERVAL_SEC)
- One transaction per run
- Graceful shutdown on SIGTERM/SIGINT
"""

import logging
import signal
import time

from basecore.db import get_db
from basecore.logging import setup_logging
from basecore.settings import get_settings
from catalog_engines.jobs.expire_orders import expire_pending_orders

logger = logging.getLogger(__name__)

# Graceful shutdown
shutdown_requested = False


def signal_handler(signum, frame):
    global shutdown_requested
    logger.info(f"Received signal {signum}, requesting shutdown...")
    shutdown_requested = True


def run_once() -> int:
    """Run the expiry job in its own session. Returns the number of expired orders."""
    db = next(get_db())
    try:
        result = expire_pending_orders(db)
        db.commit()
        return result["expired_count"]
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    """Main worker loop."""
    setup_logging()
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    interval = get_settings().ORDER_EXPIRY_INTERVAL_SEC
    logger.info(f"Starting order expiry worker (interval={interval}s)")

    while not shutdown_requested:
        try:
            expired = run_once()
            if expired > 0:
                logger.info(f"Expired {expired} pending orders")
        except Exception as e:
            logger.error(f"Error in expiry loop: {e}", exc_info=True)
            time.sleep(1)  # Brief pause on error

        # Sleep in one-second steps so shutdown isn't delayed by the interval
        for _ in range(interval):
            if shutdown_requested:
                break
            time.sleep(1)

    logger.info("Order expiry worker shutting down gracefully")


if __name__ == "__main__":
    main()
