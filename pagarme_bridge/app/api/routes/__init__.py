# pagarme_bridge/app/api/routes/__init__.py

from .payments import router as payments_router
from .webhooks import router as webhooks_router


__all__ = [
    "payments_router",
    "webhooks_router",
]
