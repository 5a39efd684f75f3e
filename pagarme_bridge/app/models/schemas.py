from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Mapping, Optional
from decimal import Decimal
from enum import Enum, IntEnum

from ..utilities.constants import GATEWAY_ID, POSTED_CREDIT_CARD


class PersonType(IntEnum):
    """Tipo de pessoa do campo de cobrança `billing_persontype`."""
    individual = 1  # Pessoa Física (CPF)
    company = 2     # Pessoa Jurídica (CNPJ)


class TransactionStatus(str, Enum):
    """Status de transação reconhecidos. Qualquer outro valor é tratado como desconhecido."""
    processing = "processing"
    paid = "paid"
    waiting_payment = "waiting_payment"
    refused = "refused"
    refunded = "refunded"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["TransactionStatus"]:
        try:
            return cls(value)
        except ValueError:
            return None


# ========== PEDIDO (SISTEMA DA LOJA) ==========

class BillingInfo(BaseModel):
    """
    Campos de cobrança do pedido, incluindo os campos brasileiros (CPF, CNPJ, bairro...).
    """
    first_name:   Optional[str] = None
    last_name:    Optional[str] = None
    company:      Optional[str] = None
    email:        Optional[str] = None
    phone:        Optional[str] = None
    address_1:    Optional[str] = None
    number:       Optional[str] = None
    address_2:    Optional[str] = None
    neighborhood: Optional[str] = None
    postcode:     Optional[str] = None
    persontype:   Optional[PersonType] = None
    cpf:          Optional[str] = None
    cnpj:         Optional[str] = None
    sex:          Optional[str] = None
    birthdate:    Optional[str] = None

    @field_validator("persontype", mode="before")
    @classmethod
    def normalize_persontype(cls, v):
        """Aceita 1/2, "1"/"2" ou o nome do tipo. Vazio vira None."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, str):
            v = v.strip().lower()
            if v.isdigit():
                return int(v)
            if v in PersonType.__members__:
                return PersonType[v]
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"


class Order(BaseModel):
    id:       int
    number:   Optional[str] = None
    total:    Decimal = Field(..., ge=0)
    status:   str = "pending"
    currency: str = "BRL"
    billing:  BillingInfo = Field(default_factory=BillingInfo)
    meta:     Dict[str, Any] = Field(default_factory=dict)

    @property
    def order_number(self) -> str:
        return self.number or str(self.id)


class CheckoutForm(BaseModel):
    """
    Campos do formulário de pagamento postados no checkout.
    """
    payment_method:   Optional[str] = None
    card_number:      Optional[str] = None
    card_holder_name: Optional[str] = None
    card_expiry:      Optional[str] = None
    card_cvc:         Optional[str] = None

    @classmethod
    def from_posted(cls, posted: Mapping[str, Any], prefix: str = GATEWAY_ID) -> "CheckoutForm":
        """Lê os campos `pagarme_*` do POST do checkout."""
        values = {
            name: posted.get(f"{prefix}_{name}")
            for name in ("payment_method", "card_number", "card_holder_name", "card_expiry", "card_cvc")
        }
        # JSON pode trazer números (ex.: cvc 123)
        return cls(**{name: None if value is None else str(value) for name, value in values.items()})

    @property
    def is_credit_card(self) -> bool:
        return self.payment_method == POSTED_CREDIT_CARD


# ========== REQUISIÇÃO DE TRANSAÇÃO ==========

class AddressPayload(BaseModel):
    street:        Optional[str] = None
    street_number: Optional[str] = None
    complementary: Optional[str] = None
    neighborhood:  Optional[str] = None
    zipcode:       Optional[str] = None


class PhonePayload(BaseModel):
    ddd:    str
    number: str


class CustomerPayload(BaseModel):
    name:            str
    email:           Optional[str] = None
    address:         AddressPayload
    phone:           PhonePayload
    document_number: Optional[str] = None
    sex:             Optional[str] = None
    born_at:         Optional[str] = None


class TransactionRequest(BaseModel):
    """
    Corpo do POST /transactions. `amount` é a string em centavos.
    """
    api_key:              Optional[str] = None
    amount:               str
    payment_method:       Literal["credit_card", "boleto"]
    postback_url:         Optional[str] = None
    customer:             CustomerPayload
    card_number:          Optional[str] = None
    card_holder_name:     Optional[str] = None
    card_expiration_date: Optional[str] = None
    card_cvv:             Optional[str] = None

    def to_form(self) -> Dict[str, str]:
        """
        Achata o payload em chaves de formulário com colchetes, como o Pagar.me espera:
        customer[address][zipcode]=01310100
        """
        form: Dict[str, str] = {}

        def _flatten(prefix: str, value: Any) -> None:
            if isinstance(value, dict):
                for key, item in value.items():
                    _flatten(f"{prefix}[{key}]" if prefix else key, item)
            elif value is not None:
                form[prefix] = str(value)

        _flatten("", self.model_dump(exclude_none=True))
        return form


# ========== RESPOSTA DO PAGAR.ME ==========

class ProcessorErrorItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    message:        str
    parameter_name: Optional[str] = None
    type:           Optional[str] = None


class TransactionResponse(BaseModel):
    """Transação devolvida pelo Pagar.me quando não há `errors`."""
    model_config = ConfigDict(extra="allow")

    id:              int
    status:          str
    payment_method:  Optional[Any] = None
    installments:    Optional[Any] = None
    card_brand:      Optional[Any] = None
    antifraud_score: Optional[Any] = None
    boleto_url:      Optional[Any] = None
    subscription_id: Optional[Any] = None

    @property
    def transaction_status(self) -> Optional[TransactionStatus]:
        return TransactionStatus.parse(self.status)


class PostbackPayload(BaseModel):
    """
    Notificação assíncrona enviada para a postback_url.
    O Pagar.me envia `current_status`; aceitamos também `status` (mesmo formato da transação).
    """
    model_config = ConfigDict(extra="allow")

    id:             int
    current_status: Optional[str] = None
    old_status:     Optional[str] = None
    status:         Optional[str] = None
    object:         Optional[str] = "transaction"

    @property
    def effective_status(self) -> Optional[str]:
        return self.current_status or self.status


# ========== RESULTADOS ==========

class CheckoutResult(BaseModel):
    result:   Literal["success", "fail"]
    redirect: Optional[str] = None
    messages: List[str] = Field(default_factory=list)


class OrderOutcome(BaseModel):
    order_id:           int
    status:             str
    previous_status:    str
    new_status:         str
    transition_applied: bool = False
    notification_sent:  bool = False
