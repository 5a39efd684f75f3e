# pagarme_bridge/app/services/__init__.py

from .gateways.payment_payload_mapper import (
    TransactionBuilder,
    map_customer,
    map_to_pagarme_payload,
)
from .gateways.pagarme_client import PagarmeClient
from .notifications import AdminNotifier, LogMailer
from .order_status import TRANSITIONS, OrderStatusProcessor, StatusTransition
from .pagarme_gateway import PagarmeGateway

__all__ = [
    # Montagem da transação
    "TransactionBuilder",
    "map_customer",
    "map_to_pagarme_payload",

    # Envio
    "PagarmeClient",

    # Status do pedido e notificações
    "TRANSITIONS",
    "OrderStatusProcessor",
    "StatusTransition",
    "AdminNotifier",
    "LogMailer",

    # Checkout
    "PagarmeGateway",
]
