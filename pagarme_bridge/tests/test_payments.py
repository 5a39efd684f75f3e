from urllib.parse import parse_qsl

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from pagarme_bridge.app.dependencies import get_pagarme_gateway
from pagarme_bridge.app.main import create_app
from pagarme_bridge.app.utilities.constants import (
    GENERIC_CHECKOUT_ERROR,
    TRANSACTION_DATA_META_KEY,
    TRANSACTION_ID_META_KEY,
    TRANSACTION_LINK_META_KEY,
)

from conftest import BOLETO_POST, CREDIT_CARD_POST, make_settings, transaction_body

RETURN_URL = "https://loja.example.com/checkout/order-received/42/"


@pytest.mark.asyncio
async def test_checkout_round_trip(make_gateway, order_repo, cart, pagarme_api):
    """
    Pedido + formulário conhecidos -> resposta paga conhecida -> status e anotações esperados.
    """
    gateway = make_gateway()

    result = await gateway.process_payment(42, CREDIT_CARD_POST)

    assert result.result == "success"
    assert result.redirect == RETURN_URL
    assert result.messages == []

    order = order_repo.orders[42]
    assert order.status == "processing"
    assert order.meta == {
        TRANSACTION_ID_META_KEY: 1234567,
        TRANSACTION_DATA_META_KEY: {
            "payment_method": "credit_card",
            "installments": "1",
            "card_brand": "visa",
            "antifraud_score": "12.5",
            "boleto_url": "",
            "subscription_id": "",
        },
        TRANSACTION_LINK_META_KEY: "https://dashboard.pagar.me/#/transactions/1234567",
    }
    assert order_repo.stock_reductions[42] == 1
    assert cart.emptied == [42]
    assert len(pagarme_api.requests) == 1


@pytest.mark.asyncio
async def test_boleto_checkout_puts_order_on_hold(make_gateway, order_repo, pagarme_api):
    pagarme_api.response = httpx.Response(200, json=transaction_body(
        status="waiting_payment",
        payment_method="boleto",
        card_brand=None,
        installments=None,
        boleto_url="https://pagar.me/boleto/1234567",
    ))

    result = await make_gateway().process_payment(42, BOLETO_POST)

    assert result.result == "success"
    assert order_repo.orders[42].status == "on-hold"
    assert order_repo.orders[42].meta[TRANSACTION_DATA_META_KEY]["boleto_url"] == "https://pagar.me/boleto/1234567"


@pytest.mark.asyncio
async def test_processor_errors_are_shown_verbatim(make_gateway, order_repo, cart, pagarme_api):
    pagarme_api.response = httpx.Response(400, json={"errors": [
        {"message": "Número do cartão inválido."},
        {"message": "Data de expiração inválida."},
    ]})

    result = await make_gateway().process_payment(42, CREDIT_CARD_POST)

    assert result.result == "fail"
    assert result.redirect is None
    assert result.messages == ["Número do cartão inválido.", "Data de expiração inválida."]
    assert order_repo.orders[42].meta == {}
    assert order_repo.orders[42].status == "pending"
    assert cart.emptied == []


@pytest.mark.asyncio
async def test_transport_failure_never_touches_order(make_gateway, order_repo, cart, pagarme_api):
    pagarme_api.exception = httpx.ConnectTimeout("timed out")

    result = await make_gateway().process_payment(42, CREDIT_CARD_POST)

    assert result.result == "fail"
    assert result.messages == [GENERIC_CHECKOUT_ERROR]
    assert order_repo.orders[42].meta == {}
    assert order_repo.orders[42].status == "pending"
    assert cart.emptied == []


@pytest.mark.asyncio
async def test_unknown_order_fails_without_request(make_gateway, pagarme_api):
    result = await make_gateway().process_payment(999, CREDIT_CARD_POST)

    assert result.result == "fail"
    assert pagarme_api.requests == []


@pytest.mark.asyncio
async def test_unavailable_gateway_does_not_submit(make_gateway, pagarme_api):
    gateway = make_gateway(settings=make_settings(PAGARME_API_KEY=None))

    result = await gateway.process_payment(42, CREDIT_CARD_POST)

    assert result.result == "fail"
    assert pagarme_api.requests == []


@pytest.mark.asyncio
async def test_transforms_are_applied_before_submission(make_gateway, pagarme_api):
    gateway = make_gateway(transforms=[
        lambda request: request.model_copy(update={"postback_url": "https://outra.example.com/postback"}),
    ])

    await gateway.process_payment(42, BOLETO_POST)

    body = dict(parse_qsl(pagarme_api.requests[0].content.decode()))
    assert body["postback_url"] == "https://outra.example.com/postback"


@pytest.mark.asyncio
async def test_processor_error_without_messages_uses_generic_message(make_gateway, order_repo, pagarme_api):
    pagarme_api.response = httpx.Response(400, json={"errors": []})

    result = await make_gateway().process_payment(42, CREDIT_CARD_POST)

    assert result.result == "fail"
    assert result.messages == [GENERIC_CHECKOUT_ERROR]
    assert order_repo.orders[42].status == "pending"


@pytest.mark.asyncio
async def test_numeric_card_fields_are_accepted(make_gateway, pagarme_api):
    posted = dict(CREDIT_CARD_POST, pagarme_card_cvc=123)

    result = await make_gateway().process_payment(42, posted)

    assert result.result == "success"
    body = dict(parse_qsl(pagarme_api.requests[0].content.decode()))
    assert body["card_cvv"] == "123"


@pytest.mark.asyncio
async def test_broken_transform_fails_checkout_without_request(make_gateway, order_repo, pagarme_api):
    gateway = make_gateway(transforms=[lambda request: None])

    result = await gateway.process_payment(42, BOLETO_POST)

    assert result.result == "fail"
    assert result.messages == [GENERIC_CHECKOUT_ERROR]
    assert pagarme_api.requests == []
    assert order_repo.orders[42].status == "pending"


@pytest.mark.parametrize("overrides, available, notices", [
    ({}, True, 0),
    ({"PAGARME_API_KEY": ""}, False, 1),
    ({"STORE_CURRENCY": "USD"}, False, 1),
    ({"PAGARME_API_KEY": None, "STORE_CURRENCY": "EUR"}, False, 2),
    ({"PAGARME_ENABLED": False}, False, 0),
])
def test_availability_and_admin_notices(make_gateway, overrides, available, notices):
    gateway = make_gateway(settings=make_settings(**overrides))

    assert gateway.is_available() is available
    assert len(gateway.admin_notices()) == notices


def test_currency_notice_names_the_currency(make_gateway):
    gateway = make_gateway(settings=make_settings(STORE_CURRENCY="USD"))
    assert "USD" in gateway.admin_notices()[0]


def test_sandbox_switches_base_url():
    settings = make_settings(USE_SANDBOX=True, PAGARME_SANDBOX_API_URL="https://sandbox.pagar.me/1/")
    assert settings.api_url == "https://sandbox.pagar.me/1"


# ========== ROTAS ==========

@pytest.fixture
def client(make_gateway):
    app = create_app()
    gateway = make_gateway()
    app.dependency_overrides[get_pagarme_gateway] = lambda: gateway
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_checkout_route_with_form_fields(client, order_repo):
    async with client:
        response = await client.post("/payments/42/checkout", data=CREDIT_CARD_POST)

    assert response.status_code == 200
    assert response.json() == {"result": "success", "redirect": RETURN_URL, "messages": []}
    assert order_repo.orders[42].status == "processing"


@pytest.mark.asyncio
async def test_checkout_route_reports_failure_in_body(client, pagarme_api):
    pagarme_api.response = httpx.Response(400, json={"errors": [{"message": "CVV inválido."}]})

    async with client:
        response = await client.post("/payments/42/checkout", json=CREDIT_CARD_POST)

    assert response.status_code == 200
    assert response.json()["result"] == "fail"
    assert response.json()["messages"] == ["CVV inválido."]


@pytest.mark.asyncio
async def test_checkout_route_accepts_non_utf8_form_body(client):
    async with client:
        response = await client.post(
            "/payments/42/checkout",
            content=b"pagarme_payment_method=\xff\xfe",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    assert response.status_code == 200
    assert response.json()["result"] == "success"


@pytest.mark.asyncio
async def test_checkout_route_numeric_json_fields(client, pagarme_api):
    async with client:
        response = await client.post("/payments/42/checkout", json=dict(CREDIT_CARD_POST, pagarme_card_cvc=123))

    assert response.status_code == 200
    assert response.json()["result"] == "success"
    body = dict(parse_qsl(pagarme_api.requests[0].content.decode()))
    assert body["card_cvv"] == "123"


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"{not json", b"[1, 2, 3]"])
async def test_checkout_route_rejects_invalid_json(client, pagarme_api, content):
    async with client:
        response = await client.post(
            "/payments/42/checkout", content=content, headers={"Content-Type": "application/json"}
        )

    assert response.status_code == 400
    assert pagarme_api.requests == []


@pytest.mark.asyncio
async def test_transaction_details_route(client):
    async with client:
        await client.post("/payments/42/checkout", data=BOLETO_POST)
        response = await client.get("/payments/42/transaction")

    assert response.status_code == 200
    assert response.json()["card_brand"] == "visa"


@pytest.mark.asyncio
async def test_transaction_details_unknown_order(client):
    async with client:
        response = await client.get("/payments/999/transaction")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_health_check_reports_gateway(client):
    async with client:
        response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["gateway"]["available"] is True
    assert response.json()["admin_notices"] == []
