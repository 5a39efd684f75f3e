# pagarme_bridge/app/dependencies.py

from functools import lru_cache
from typing import Any, Dict

from fastapi import HTTPException, Request

from .core.config import settings
from .database.memory import InMemoryCartService, InMemoryOrderRepository
from .interfaces import CartServiceInterface, MailerInterface, OrderRepositoryInterface
from .services.notifications import LogMailer
from .services.pagarme_gateway import PagarmeGateway

# ========== PROVIDERS ==========
# A loja integrada substitui estes providers via app.dependency_overrides.


@lru_cache()
def get_order_repository() -> OrderRepositoryInterface:
    return InMemoryOrderRepository()


@lru_cache()
def get_cart_service() -> CartServiceInterface:
    return InMemoryCartService()


@lru_cache()
def get_mailer() -> MailerInterface:
    return LogMailer()


@lru_cache()
def get_pagarme_gateway() -> PagarmeGateway:
    return PagarmeGateway(
        settings,
        order_repo=get_order_repository(),
        cart=get_cart_service(),
        mailer=get_mailer(),
    )


# ========== CORPO DA REQUISIÇÃO ==========

async def get_posted_fields(request: Request) -> Dict[str, Any]:
    """
    Campos postados no checkout ou no postback: JSON ou formulário (urlencoded/multipart).
    """
    if "application/json" in request.headers.get("content-type", ""):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="JSON inválido")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Payload inválido")
        return payload

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
