# pagarme_bridge/app/api/routes/payments.py

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...dependencies import get_pagarme_gateway, get_posted_fields
from ...models.schemas import CheckoutResult
from ...services.pagarme_gateway import PagarmeGateway
from ...utilities.logging_config import logger

router = APIRouter()


@router.post("/{order_id}/checkout", response_model=CheckoutResult)
async def checkout(
    order_id: int,
    posted: Dict[str, Any] = Depends(get_posted_fields),
    gateway: PagarmeGateway = Depends(get_pagarme_gateway),
):
    """
    Processa o pagamento do pedido com os campos `pagarme_*` postados no checkout.
    Sempre responde 200 com result=success|fail.
    """
    result = await gateway.process_payment(order_id, posted)
    logger.info(f"💳 Checkout do pedido {order_id}: {result.result}")
    return result


@router.get("/{order_id}/transaction")
async def transaction_details(
    order_id: int,
    gateway: PagarmeGateway = Depends(get_pagarme_gateway),
):
    """Dados da transação para a página de pedido recebido (link do boleto, parcelas...)."""
    return await gateway.thankyou_data(order_id)
