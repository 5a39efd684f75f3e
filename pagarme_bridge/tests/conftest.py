from decimal import Decimal

import httpx
import pytest
from loguru import logger

from pagarme_bridge.app.core.config import Settings
from pagarme_bridge.app.database.memory import InMemoryCartService, InMemoryOrderRepository
from pagarme_bridge.app.models.schemas import BillingInfo, Order
from pagarme_bridge.app.services.pagarme_gateway import PagarmeGateway

API_KEY = "ak_test_123"
POSTBACK_URL = "https://loja.example.com/webhooks/pagarme"
ADMIN_EMAIL = "admin@loja.example.com"


class RecordingMailer:
    """Guarda os e-mails enviados para as asserções."""

    def __init__(self):
        self.sent = []

    def wrap_message(self, title, message):
        return f"<h2>{title}</h2><p>{message}</p>"

    async def send(self, to, subject, body):
        self.sent.append({"to": to, "subject": subject, "body": body})


def make_settings(**overrides) -> Settings:
    values = {
        "PAGARME_ENABLED": True,
        "PAGARME_API_KEY": API_KEY,
        "PAGARME_POSTBACK_URL": POSTBACK_URL,
        "PAGARME_API_URL": "https://api.pagar.me/1",
        "PAGARME_DASHBOARD_URL": "https://dashboard.pagar.me",
        "USE_SANDBOX": False,
        "STORE_CURRENCY": "BRL",
        "ADMIN_EMAIL": ADMIN_EMAIL,
        "PAGARME_DEBUG": False,
    }
    values.update(overrides)
    return Settings(**values)


def make_order(**overrides) -> Order:
    billing = {
        "first_name": "Maria",
        "last_name": "Silva",
        "email": "maria@example.com",
        "phone": "(11) 98765-4321",
        "address_1": "Av. Paulista",
        "number": "1000",
        "address_2": "Apto 12",
        "neighborhood": "Bela Vista",
        "postcode": "01310-100",
        "persontype": 1,
        "cpf": "123.456.789-00",
        "sex": "feminino",
        "birthdate": "25/12/1985",
    }
    billing.update(overrides.pop("billing", {}))
    values = {"id": 42, "total": Decimal("199.90"), "billing": BillingInfo(**billing)}
    values.update(overrides)
    return Order(**values)


CREDIT_CARD_POST = {
    "pagarme_payment_method": "credit-card",
    "pagarme_card_number": "4111 1111 1111 1111",
    "pagarme_card_holder_name": "MARIA SILVA",
    "pagarme_card_expiry": "12 / 30",
    "pagarme_card_cvc": "123",
}

BOLETO_POST = {"pagarme_payment_method": "boleto"}


def transaction_body(**overrides):
    body = {
        "object": "transaction",
        "id": 1234567,
        "status": "paid",
        "payment_method": "credit_card",
        "installments": 1,
        "card_brand": "visa",
        "antifraud_score": "<b>12.5</b>",
        "boleto_url": None,
        "subscription_id": None,
    }
    body.update(overrides)
    return body


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def order():
    return make_order()


@pytest.fixture
def order_repo(order):
    repo = InMemoryOrderRepository(return_url_base="https://loja.example.com/checkout/order-received")
    repo.add(order)
    return repo


@pytest.fixture
def cart():
    return InMemoryCartService()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def pagarme_api():
    """
    Fake da API do Pagar.me. Configure `response` (ou `exception`) e leia `requests`.
    """
    class FakeApi:
        def __init__(self):
            self.requests = []
            self.response = httpx.Response(200, json=transaction_body())
            self.exception = None

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if self.exception is not None:
                raise self.exception
            return httpx.Response(
                self.response.status_code,
                headers=self.response.headers,
                content=self.response.content,
            )

        @property
        def transport(self):
            return httpx.MockTransport(self.handler)

    return FakeApi()


@pytest.fixture
def make_gateway(settings, order_repo, cart, mailer, pagarme_api):
    def _make(**kwargs):
        return PagarmeGateway(
            kwargs.pop("settings", settings),
            order_repo=order_repo,
            cart=cart,
            mailer=mailer,
            transport=pagarme_api.transport,
            **kwargs,
        )
    return _make


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
