# pagarme_bridge/app/database/memory.py

from collections import defaultdict
from typing import Any, Dict, List, Optional

from ..models.schemas import Order
from ..utilities.constants import ORDER_STATUS_PROCESSING, TRANSACTION_ID_META_KEY
from ..utilities.logging_config import logger

PAID_STATUSES = ("processing", "completed")


class InMemoryOrderRepository:
    """
    Implementação em memória do sistema de pedidos.
    Usada pela API quando nenhuma loja foi integrada e nos testes.
    """

    def __init__(self, return_url_base: str = "http://localhost:8000/checkout/order-received"):
        self.orders: Dict[int, Order] = {}
        self.notes: Dict[int, List[str]] = defaultdict(list)
        self.stock_reductions: Dict[int, int] = defaultdict(int)
        self.return_url_base = return_url_base.rstrip("/")

    def add(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    async def get_order(self, order_id: int) -> Optional[Order]:
        return self.orders.get(order_id)

    async def get_order_by_transaction_id(self, transaction_id: int) -> Optional[Order]:
        for order in self.orders.values():
            if order.meta.get(TRANSACTION_ID_META_KEY) == int(transaction_id):
                return order
        return None

    async def update_status(self, order_id: int, status: str, note: str = "") -> None:
        order = self.orders[order_id]
        logger.info(f"📦 Pedido {order.order_number}: {order.status} -> {status}")
        order.status = status
        if note:
            self.notes[order_id].append(note)

    async def add_order_note(self, order_id: int, note: str) -> None:
        self.notes[order_id].append(note)

    async def payment_complete(self, order_id: int) -> None:
        """Baixa o estoque uma única vez, mesmo se o pagamento for confirmado de novo."""
        order = self.orders[order_id]
        if order.status in PAID_STATUSES:
            return
        self.stock_reductions[order_id] += 1
        await self.update_status(order_id, ORDER_STATUS_PROCESSING)

    async def update_meta(self, order_id: int, key: str, value: Any) -> None:
        self.orders[order_id].meta[key] = value

    async def get_meta(self, order_id: int, key: str) -> Optional[Any]:
        order = self.orders.get(order_id)
        return order.meta.get(key) if order else None

    async def get_return_url(self, order: Order) -> str:
        return f"{self.return_url_base}/{order.id}/"


class InMemoryCartService:
    def __init__(self):
        self.emptied: List[int] = []

    async def empty_cart(self, order_id: int) -> None:
        self.emptied.append(order_id)
