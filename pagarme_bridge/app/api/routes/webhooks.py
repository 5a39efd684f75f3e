# pagarme_bridge/app/api/routes/webhooks.py

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...core.exceptions import ConfigurationError
from ...dependencies import get_pagarme_gateway, get_posted_fields
from ...services.pagarme_gateway import PagarmeGateway
from ...models.schemas import PostbackPayload
from ...utilities.helpers import is_valid_postback_signature
from ...utilities.logging_config import logger

router = APIRouter()


async def verify_postback_signature(
    request: Request,
    gateway: PagarmeGateway = Depends(get_pagarme_gateway),
) -> None:
    """
    Todo postback do Pagar.me vem assinado no header X-Hub-Signature com a API Key.
    """
    if not gateway.api_key:
        raise ConfigurationError("Pagar.me sem API Key: não é possível validar o postback.")

    signature = request.headers.get("X-Hub-Signature")
    if not signature or not is_valid_postback_signature(gateway.api_key, await request.body(), signature):
        logger.warning("⚠️ Postback Pagar.me sem assinatura ou com assinatura inválida")
        raise HTTPException(status_code=403, detail="Assinatura inválida")


@router.post("/pagarme", dependencies=[Depends(verify_postback_signature)])
async def pagarme_postback(
    data: dict = Depends(get_posted_fields),
    gateway: PagarmeGateway = Depends(get_pagarme_gateway),
):
    """
    Postback do Pagar.me: notificação assíncrona de mudança de status da transação.
    """
    logger.info(f"📩 Postback Pagar.me recebido: transação {data.get('id')} -> {data.get('current_status') or data.get('status')}")

    try:
        payload = PostbackPayload.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Payload inválido: {e.errors()}")

    if not payload.effective_status:
        raise HTTPException(status_code=400, detail="Status da transação ausente")

    outcome = await gateway.process_postback(payload)

    return {
        "status": "success",
        "message": "Postback processado com sucesso",
        "order_id": outcome.order_id,
        "transition_applied": outcome.transition_applied,
        "new_status": outcome.new_status,
    }
