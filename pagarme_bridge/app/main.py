# pagarme_bridge/app/main.py

from dotenv import load_dotenv; load_dotenv()

from fastapi import Depends, FastAPI, Response
from pagarme_bridge.app.api.routes import payments_router, webhooks_router
from pagarme_bridge.app.core.config import settings
from pagarme_bridge.app.dependencies import get_pagarme_gateway
from pagarme_bridge.app.error_handlers import add_error_handlers
from pagarme_bridge.app.services.pagarme_gateway import PagarmeGateway
from pagarme_bridge.app.utilities.logging_config import logger

VERSION = "1.0.0"


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pagar.me Bridge",
        version=VERSION,
        description="Pagamentos por Cartão de Crédito ou Boleto Bancário via Pagar.me para pedidos da loja",
        debug=settings.DEBUG,
    )

    # ========== ROTAS ==========
    app.include_router(payments_router, prefix="/payments", tags=["Pagamentos"])
    app.include_router(webhooks_router, prefix="/webhooks", tags=["Webhooks"])

    # ========== HANDLERS DE ERRO ==========
    add_error_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        gateway = get_pagarme_gateway()
        logger.info(f"🚀 API `{app.title}` versão `{app.version}` inicializada!")
        logger.info(f"📍 Pagar.me: {settings.api_url} ({'sandbox' if settings.USE_SANDBOX else 'produção'})")
        logger.info(f"🔧 Debug Log Pagar.me: {'Ativado' if settings.PAGARME_DEBUG else 'Desativado'}")
        for notice in gateway.admin_notices():
            logger.warning(f"⚠️ {notice}")

    @app.get("/", tags=["Health Check"])
    @app.head("/", tags=["Health Check"])
    async def health_check(response: Response, gateway: PagarmeGateway = Depends(get_pagarme_gateway)):
        response.headers["Cache-Control"] = "no-cache"
        return {
            "status": "OK",
            "version": VERSION,
            "gateway": {
                "id": gateway.id,
                "title": gateway.title,
                "description": gateway.description,
                "available": gateway.is_available(),
                "sandbox": settings.USE_SANDBOX,
            },
            "admin_notices": gateway.admin_notices(),
        }

    return app


app = create_app()
