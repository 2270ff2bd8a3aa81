"""Scheduled jobs run by the order expiry worker, the API and the CLI."""

from catalog_engines.jobs.expire_orders import expire_pending_orders

__all__ = ["expire_pending_orders"]
