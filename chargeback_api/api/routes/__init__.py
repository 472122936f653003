"""API routes package."""

from chargeback_api.api.routes.chargebacks import router as chargebacks_router
from chargeback_api.api.routes.health import router as health_router

__all__ = [
    "chargebacks_router",
    "health_router",
]
