# pagarme_bridge/app/interfaces/__init__.py

from typing import Protocol, Any, Optional

from ..models.schemas import Order


# ========== INTERFACES DO SISTEMA DA LOJA ==========

class OrderRepositoryInterface(Protocol):
    """Interface para o sistema de pedidos da loja (externo ao gateway)"""

    async def get_order(self, order_id: int) -> Optional[Order]: ...

    async def get_order_by_transaction_id(self, transaction_id: int) -> Optional[Order]: ...

    async def update_status(self, order_id: int, status: str, note: str = "") -> None: ...

    async def add_order_note(self, order_id: int, note: str) -> None: ...

    async def payment_complete(self, order_id: int) -> None:
        """Fluxo de pagamento concluído da loja: muda o status e baixa o estoque (idempotente)."""
        ...

    async def update_meta(self, order_id: int, key: str, value: Any) -> None: ...

    async def get_meta(self, order_id: int, key: str) -> Optional[Any]: ...

    async def get_return_url(self, order: Order) -> str:
        """URL da página de pedido recebido."""
        ...


class CartServiceInterface(Protocol):
    """Interface para o carrinho ativo do cliente"""

    async def empty_cart(self, order_id: int) -> None: ...


# ========== INTERFACES DE NOTIFICAÇÃO ==========

class MailerInterface(Protocol):
    """Interface para envio de e-mails (entrega fora do escopo do gateway)"""

    def wrap_message(self, title: str, message: str) -> str: ...

    async def send(self, to: str, subject: str, body: str) -> None: ...


__all__ = [
    "OrderRepositoryInterface",
    "CartServiceInterface",
    "MailerInterface",
]
