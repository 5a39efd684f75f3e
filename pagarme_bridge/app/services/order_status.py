# pagarme_bridge/app/services/order_status.py

from dataclasses import dataclass
from typing import Dict, Optional

from ..interfaces import OrderRepositoryInterface
from ..models.schemas import Order, OrderOutcome, TransactionResponse, TransactionStatus
from ..utilities.constants import (
    ORDER_STATUS_FAILED,
    ORDER_STATUS_ON_HOLD,
    ORDER_STATUS_PROCESSING,
    ORDER_STATUS_REFUNDED,
    TRANSACTION_DATA_FIELDS,
    TRANSACTION_DATA_META_KEY,
    TRANSACTION_ID_META_KEY,
    TRANSACTION_LINK_META_KEY,
)
from ..utilities.helpers import sanitize_text_field, transaction_dashboard_url
from ..utilities.logging_config import logger
from .notifications import AdminNotifier


@dataclass(frozen=True)
class StatusTransition:
    """
    Ação aplicada ao pedido para um status de transação.
    `order_status=None` significa o fluxo de pagamento concluído da loja.
    """
    order_status: Optional[str]
    note: str
    notify: Optional[str] = None  # "refused" | "refunded"


TRANSITIONS: Dict[TransactionStatus, StatusTransition] = {
    TransactionStatus.processing: StatusTransition(
        ORDER_STATUS_ON_HOLD, "Pagar.me: A transação está sendo processada."
    ),
    TransactionStatus.paid: StatusTransition(
        None, "Pagar.me: Transação paga."
    ),
    TransactionStatus.waiting_payment: StatusTransition(
        ORDER_STATUS_ON_HOLD, "Pagar.me: O boleto foi emitido mas ainda não foi pago."
    ),
    TransactionStatus.refused: StatusTransition(
        ORDER_STATUS_FAILED,
        "Pagar.me: A transação foi recusada pela operadora do cartão ou por suspeita de fraude.",
        notify="refused",
    ),
    TransactionStatus.refunded: StatusTransition(
        ORDER_STATUS_REFUNDED, "Pagar.me: A transação foi estornada/cancelada.", notify="refunded"
    ),
}


class OrderStatusProcessor:
    """
    Grava os dados da transação no pedido e aplica a transição de status.
    """

    def __init__(
        self,
        order_repo: OrderRepositoryInterface,
        notifier: AdminNotifier,
        dashboard_url: str,
        debug: bool = False,
        log=logger,
    ):
        self.order_repo = order_repo
        self.notifier = notifier
        self.dashboard_url = dashboard_url
        self.debug = debug
        self.log = log.bind(gateway="pagarme")

    async def apply(self, order: Order, response: TransactionResponse) -> OrderOutcome:
        await self.save_transaction_data(order, response)
        return await self.process_order_status(order, response.status)

    async def save_transaction_data(self, order: Order, response: TransactionResponse) -> None:
        """
        Anota no pedido o id da transação, o resumo sanitizado e o link para o dashboard.
        """
        transaction_id = int(response.id)
        payment_data = {
            field: sanitize_text_field(getattr(response, field)) for field in TRANSACTION_DATA_FIELDS
        }

        await self.order_repo.update_meta(order.id, TRANSACTION_ID_META_KEY, transaction_id)
        await self.order_repo.update_meta(order.id, TRANSACTION_DATA_META_KEY, payment_data)
        await self.order_repo.update_meta(
            order.id, TRANSACTION_LINK_META_KEY, transaction_dashboard_url(self.dashboard_url, transaction_id)
        )

    async def process_order_status(self, order: Order, status: Optional[str]) -> OrderOutcome:
        if self.debug:
            self.log.info(f"Payment status for order {order.order_number} is now: {status}")

        outcome = OrderOutcome(
            order_id=order.id,
            status=str(status),
            previous_status=order.status,
            new_status=order.status,
        )

        transaction_status = TransactionStatus.parse(status)
        if transaction_status is None:
            self.log.warning(
                f"⚠️ Status de transação desconhecido '{status}' para o pedido {order.order_number}; "
                f"nenhuma transição aplicada"
            )
            return outcome

        transition = TRANSITIONS[transaction_status]

        if transition.order_status is None:
            await self.order_repo.add_order_note(order.id, transition.note)
            await self.order_repo.payment_complete(order.id)
            # A loja decide entre processing e completed (ex.: produtos virtuais)
            refreshed = await self.order_repo.get_order(order.id)
            outcome.new_status = refreshed.status if refreshed else ORDER_STATUS_PROCESSING
        else:
            await self.order_repo.update_status(order.id, transition.order_status, transition.note)
            outcome.new_status = transition.order_status
        outcome.transition_applied = True

        if transition.notify:
            transaction_id = await self.order_repo.get_meta(order.id, TRANSACTION_ID_META_KEY)
            url = transaction_dashboard_url(self.dashboard_url, transaction_id or 0)
            if transition.notify == "refused":
                await self.notifier.transaction_refused(order.order_number, url)
            else:
                await self.notifier.transaction_refunded(order.order_number, url)
            outcome.notification_sent = True

        return outcome
