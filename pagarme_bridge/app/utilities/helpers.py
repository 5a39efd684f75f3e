import hashlib
import hmac
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Tuple, Union

_NON_DIGITS = re.compile(r"[^0-9]")
_TAGS = re.compile(r"<[^>]*?>", re.DOTALL)
_SCRIPTS = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.DOTALL | re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_OCTETS = re.compile(r"%[a-fA-F0-9]{2}")
_SPACES = re.compile(r"[ \t\r\n]+")


def only_numbers(value: Any) -> str:
    """
    Remove qualquer caractere fora de 0-9.
    """
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def format_amount(total: Union[Decimal, float, int, str]) -> str:
    """
    Converte o total do pedido em centavos, sem separadores: 19.90 -> "1990", 0.05 -> "5".
    Independe do locale pois usa Decimal e não formatação de string.
    """
    amount = Decimal(str(total)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if amount < 0:
        raise ValueError(f"Valor inválido para amount: {total}")
    return str(int(amount * 100))


def split_phone(phone: Any) -> Tuple[str, str]:
    """Divide o telefone em DDD (2 primeiros dígitos) e número."""
    digits = only_numbers(phone)
    return digits[:2], digits[2:]


def format_birthdate(value: Optional[str]) -> Optional[str]:
    """
    Converte DD/MM/YYYY em YYYY-MM-DD.
    Retorna None para qualquer outro formato ou data impossível.
    """
    if not value:
        return None
    parts = value.strip().split("/")
    if len(parts) != 3 or not all(part.isdigit() for part in parts) or len(parts[2]) != 4:
        return None
    try:
        return datetime.strptime("/".join(parts), "%d/%m/%Y").strftime("%Y-%m-%d")
    except ValueError:
        return None


def sanitize_text_field(value: Any) -> str:
    """
    Limpa um valor vindo da API antes de gravá-lo no pedido:
    remove tags, caracteres de controle, octetos codificados e espaços extras.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    text = str(value)
    text = _SCRIPTS.sub("", text)
    text = _TAGS.sub("", text)
    text = text.replace("<", "&lt;")
    text = _SPACES.sub(" ", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _OCTETS.sub("", text)
    return text.strip()


def transaction_dashboard_url(dashboard_base: str, transaction_id: Any) -> str:
    """Link da transação no dashboard do Pagar.me."""
    return f"{dashboard_base.rstrip('/')}/#/transactions/{int(transaction_id)}"


def postback_signature(api_key: str, body: bytes) -> str:
    """
    Assinatura enviada pelo Pagar.me no header X-Hub-Signature: sha1=HMAC(api_key, corpo).
    """
    digest = hmac.new(api_key.encode("utf-8"), body, hashlib.sha1).hexdigest()
    return f"sha1={digest}"


def is_valid_postback_signature(api_key: str, body: bytes, signature: str) -> bool:
    return hmac.compare_digest(postback_signature(api_key, body), signature.strip())
