from .logging_config import logger
from .helpers import (
    only_numbers,
    format_amount,
    split_phone,
    format_birthdate,
    sanitize_text_field,
    transaction_dashboard_url,
    postback_signature,
    is_valid_postback_signature,
)
from .constants import GATEWAY_ID, SUPPORTED_CURRENCY, GATEWAY_TIMEOUT

__all__ = [
    "logger",
    "only_numbers",
    "format_amount",
    "split_phone",
    "format_birthdate",
    "sanitize_text_field",
    "transaction_dashboard_url",
    "postback_signature",
    "is_valid_postback_signature",
    "GATEWAY_ID",
    "SUPPORTED_CURRENCY",
    "GATEWAY_TIMEOUT",
]
