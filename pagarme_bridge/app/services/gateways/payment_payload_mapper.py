# pagarme_bridge/app/services/gateways/payment_payload_mapper.py

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ...models.schemas import (
    AddressPayload,
    CheckoutForm,
    CustomerPayload,
    Order,
    PersonType,
    PhonePayload,
    TransactionRequest,
)
from ...utilities.constants import PAYMENT_METHOD_BOLETO, PAYMENT_METHOD_CREDIT_CARD
from ...utilities.helpers import format_amount, format_birthdate, only_numbers, split_phone
from ...utilities.logging_config import logger

TransactionTransform = Callable[[TransactionRequest], TransactionRequest]


def map_customer(order: Order) -> CustomerPayload:
    """
    Monta o objeto `customer` a partir dos campos de cobrança do pedido.
    - Pessoa física: document_number = CPF.
    - Pessoa jurídica: name = razão social e document_number = CNPJ.
    - Sem tipo de pessoa: document_number não é enviado.
    """
    billing = order.billing
    ddd, number = split_phone(billing.phone)

    customer: Dict[str, Any] = {
        "name":  billing.full_name,
        "email": billing.email,
        "address": AddressPayload(
            street=billing.address_1,
            street_number=billing.number,
            complementary=billing.address_2,
            neighborhood=billing.neighborhood,
            zipcode=only_numbers(billing.postcode),
        ),
        "phone": PhonePayload(ddd=ddd, number=number),
    }

    if billing.persontype == PersonType.individual:
        customer["document_number"] = only_numbers(billing.cpf)
    elif billing.persontype == PersonType.company:
        customer["name"] = billing.company or ""
        customer["document_number"] = only_numbers(billing.cnpj)

    if billing.sex and billing.sex.strip():
        customer["sex"] = billing.sex.strip()[0].upper()

    if billing.birthdate and billing.birthdate.strip():
        born_at = format_birthdate(billing.birthdate)
        if born_at:
            customer["born_at"] = born_at
        else:
            logger.warning(
                f"⚠️ Data de nascimento ignorada no pedido {order.order_number}: "
                f"'{billing.birthdate}' não está no formato DD/MM/AAAA"
            )

    return CustomerPayload(**customer)


def map_to_pagarme_payload(
    order: Order,
    form: CheckoutForm,
    api_key: Optional[str],
    postback_url: Optional[str],
) -> TransactionRequest:
    """
    Mapeia pedido + formulário do checkout para o formato de transação do Pagar.me.
    - Cartão de crédito: envia número, nome, validade e CVV.
    - Qualquer outra escolha: boleto, sem campos de cartão.
    """
    payload: Dict[str, Any] = {
        "api_key":        api_key,
        "amount":         format_amount(order.total),
        "payment_method": PAYMENT_METHOD_BOLETO,
        "postback_url":   postback_url,
        "customer":       map_customer(order),
    }

    if form.is_credit_card:
        payload.update({
            "payment_method":       PAYMENT_METHOD_CREDIT_CARD,
            "card_number":          only_numbers(form.card_number),
            "card_holder_name":     form.card_holder_name or "",
            "card_expiration_date": only_numbers(form.card_expiry),
            "card_cvv":             form.card_cvc or "",
        })

    return TransactionRequest(**payload)


class TransactionBuilder:
    """
    Gera a transação e aplica, em ordem de registro, os transforms de terceiros.
    """

    def __init__(
        self,
        api_key: Optional[str],
        postback_url: Optional[str],
        transforms: Iterable[TransactionTransform] = (),
    ):
        self.api_key = api_key
        self.postback_url = postback_url
        self.transforms: List[TransactionTransform] = list(transforms)

    def register_transform(self, transform: TransactionTransform) -> None:
        self.transforms.append(transform)

    def build(self, order: Order, posted: Union[CheckoutForm, Mapping[str, Any]]) -> TransactionRequest:
        form = posted if isinstance(posted, CheckoutForm) else CheckoutForm.from_posted(posted)
        request = map_to_pagarme_payload(order, form, self.api_key, self.postback_url)

        for transform in self.transforms:
            request = transform(request)
            if not isinstance(request, TransactionRequest):
                raise TypeError(
                    f"Transform {getattr(transform, '__name__', transform)!r} deve retornar TransactionRequest"
                )

        return request
