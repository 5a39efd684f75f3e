# pagarme_bridge/app/services/pagarme_gateway.py

import httpx
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, OrderNotFoundError, ProcessorError, TransportError
from ..interfaces import CartServiceInterface, MailerInterface, OrderRepositoryInterface
from ..models.schemas import CheckoutResult, OrderOutcome, PostbackPayload
from ..utilities.constants import GATEWAY_ID, GENERIC_CHECKOUT_ERROR, SUPPORTED_CURRENCY, TRANSACTION_DATA_META_KEY
from ..utilities.logging_config import logger
from .gateways.pagarme_client import PagarmeClient
from .gateways.payment_payload_mapper import TransactionBuilder, TransactionTransform
from .notifications import AdminNotifier
from .order_status import OrderStatusProcessor


class PagarmeGateway:
    """
    Forma de pagamento Pagar.me: Cartão de Crédito ou Boleto Bancário.

    Todas as falhas são tratadas aqui; o checkout sempre recebe um CheckoutResult.
    """

    id = GATEWAY_ID

    def __init__(
        self,
        settings: Settings,
        order_repo: OrderRepositoryInterface,
        cart: CartServiceInterface,
        mailer: MailerInterface,
        transforms: Iterable[TransactionTransform] = (),
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log=logger,
    ):
        self.settings = settings
        self.order_repo = order_repo
        self.cart = cart
        self.log = log

        self.title = settings.PAGARME_TITLE
        self.description = settings.PAGARME_DESCRIPTION
        self.api_key = settings.PAGARME_API_KEY
        self.debug = settings.PAGARME_DEBUG

        self.builder = TransactionBuilder(self.api_key, settings.PAGARME_POSTBACK_URL, transforms)
        self.client = PagarmeClient(settings.api_url, debug=self.debug, transport=transport, log=log)
        self.processor = OrderStatusProcessor(
            order_repo,
            AdminNotifier(mailer, settings.ADMIN_EMAIL),
            settings.PAGARME_DASHBOARD_URL,
            debug=self.debug,
            log=log,
        )

    # ========== CONFIGURAÇÃO ==========

    def using_supported_currency(self) -> bool:
        return self.settings.STORE_CURRENCY == SUPPORTED_CURRENCY

    def configuration_errors(self) -> List[ConfigurationError]:
        errors = []
        if not self.api_key:
            errors.append(ConfigurationError("Pagar.me desativado: informe a sua API Key."))
        if not self.using_supported_currency():
            errors.append(ConfigurationError(
                f"Pagar.me desativado: a moeda {self.settings.STORE_CURRENCY} não é suportada. "
                f"Funciona apenas com Real Brasileiro."
            ))
        return errors

    def admin_notices(self) -> List[str]:
        """Avisos exibidos apenas para administradores."""
        return [str(error) for error in self.configuration_errors()]

    def is_available(self) -> bool:
        return self.settings.PAGARME_ENABLED and not self.configuration_errors()

    # ========== CHECKOUT ==========

    async def process_payment(self, order_id: int, posted: Mapping[str, Any]) -> CheckoutResult:
        if not self.is_available():
            for notice in self.admin_notices():
                self.log.warning(f"⚠️ {notice}")
            return CheckoutResult(result="fail", messages=[GENERIC_CHECKOUT_ERROR])

        order = await self.order_repo.get_order(order_id)
        if order is None:
            self.log.warning(f"⚠️ Pedido {order_id} não encontrado para pagamento")
            return CheckoutResult(result="fail", messages=[str(OrderNotFoundError(f"Pedido {order_id} não encontrado."))])

        try:
            request = self.builder.build(order, posted)
        except (TypeError, ValueError) as e:
            self.log.warning(f"⚠️ Não foi possível montar a transação do pedido {order.order_number}: {e}")
            return CheckoutResult(result="fail", messages=[GENERIC_CHECKOUT_ERROR])

        try:
            transaction = await self.client.submit(request, order_number=order.order_number)
        except ProcessorError as e:
            return CheckoutResult(result="fail", messages=e.messages or [GENERIC_CHECKOUT_ERROR])
        except TransportError as e:
            self.log.warning(f"⚠️ Nenhuma transação criada para o pedido {order.order_number}: {e}")
            return CheckoutResult(result="fail", messages=[GENERIC_CHECKOUT_ERROR])

        await self.processor.apply(order, transaction)
        await self.cart.empty_cart(order.id)

        return CheckoutResult(result="success", redirect=await self.order_repo.get_return_url(order))

    # ========== POSTBACK ==========

    async def process_postback(self, payload: PostbackPayload) -> OrderOutcome:
        order = await self.order_repo.get_order_by_transaction_id(payload.id)
        if order is None:
            raise OrderNotFoundError(f"Nenhum pedido para a transação {payload.id}")

        return await self.processor.process_order_status(order, payload.effective_status)

    # ========== PÁGINA DE OBRIGADO ==========

    async def thankyou_data(self, order_id: int) -> Dict[str, Any]:
        order = await self.order_repo.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(f"Pedido {order_id} não encontrado.")
        return await self.order_repo.get_meta(order_id, TRANSACTION_DATA_META_KEY) or {}
