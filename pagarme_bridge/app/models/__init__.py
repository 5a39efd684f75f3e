from .schemas import (
    PersonType,
    TransactionStatus,
    BillingInfo,
    Order,
    CheckoutForm,
    AddressPayload,
    PhonePayload,
    CustomerPayload,
    TransactionRequest,
    ProcessorErrorItem,
    TransactionResponse,
    PostbackPayload,
    CheckoutResult,
    OrderOutcome,
)

__all__ = [
    "PersonType",
    "TransactionStatus",
    "BillingInfo",
    "Order",
    "CheckoutForm",
    "AddressPayload",
    "PhonePayload",
    "CustomerPayload",
    "TransactionRequest",
    "ProcessorErrorItem",
    "TransactionResponse",
    "PostbackPayload",
    "CheckoutResult",
    "OrderOutcome",
]
