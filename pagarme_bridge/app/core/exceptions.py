"""Hierarquia de exceções do gateway Pagar.me."""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..models.schemas import ProcessorErrorItem


class PagarmeBridgeError(Exception):
    """Base para todos os erros do gateway."""


class ConfigurationError(PagarmeBridgeError):
    """API Key ausente ou moeda da loja não suportada."""


class TransportError(PagarmeBridgeError):
    """
    Nenhuma transação aconteceu: falha de rede, DNS, timeout ou resposta HTTP malformada.
    O pedido não deve ser alterado e a tentativa pode ser repetida pelo chamador.
    """


class ProcessorError(PagarmeBridgeError):
    """O Pagar.me recusou a requisição e devolveu um array `errors`."""

    def __init__(self, errors: List["ProcessorErrorItem"], raw: Optional[dict] = None):
        self.errors = errors
        self.raw = raw or {}
        super().__init__("; ".join(error.message for error in errors) or "Erro no Pagar.me")

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


class OrderNotFoundError(PagarmeBridgeError):
    """Pedido inexistente no sistema da loja."""

