# pagarme_bridge/app/services/gateways/pagarme_client.py

import httpx
from typing import Any, Dict, Optional

from ...core.exceptions import ProcessorError, TransportError
from ...models.schemas import ProcessorErrorItem, TransactionRequest, TransactionResponse
from ...utilities.constants import GATEWAY_TIMEOUT
from ...utilities.logging_config import logger

USER_AGENT = "pagarme-bridge/1.0"


class PagarmeClient:
    """
    Cliente HTTP do endpoint POST /transactions.

    Falhas de transporte levantam TransportError (nenhuma transação foi criada);
    respostas com `errors` levantam ProcessorError (o Pagar.me recusou).
    O certificado TLS é sempre verificado.
    """

    def __init__(
        self,
        base_url: str,
        debug: bool = False,
        timeout: float = GATEWAY_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log=logger,
    ):
        self.base_url = base_url.rstrip("/")
        self.debug = debug
        self.timeout = timeout
        self.transport = transport
        self.log = log.bind(gateway="pagarme")

    @property
    def transactions_url(self) -> str:
        return f"{self.base_url}/transactions"

    async def submit(self, request: TransactionRequest, order_number: Optional[str] = None) -> TransactionResponse:
        if self.debug:
            self.log.info(f"Doing a transaction for order {order_number}...")

        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.transactions_url, data=request.to_form(), headers=headers)
        except httpx.RequestError as e:
            if self.debug:
                self.log.error(f"Transport error in doing the transaction for order {order_number}: {e!r}")
            raise TransportError(f"Erro de conexão com o Pagar.me: {e}") from e

        body = self._parse_body(response, order_number)

        if "errors" in body:
            errors = [self._error_item(error) for error in body.get("errors") or []]
            if self.debug:
                self.log.error(
                    f"Failed to make the transaction for order {order_number}: "
                    f"HTTP {response.status_code} - {response.text}"
                )
            raise ProcessorError(errors, raw=body)

        if response.status_code >= 500:
            if self.debug:
                self.log.error(f"Pagar.me unavailable for order {order_number}: HTTP {response.status_code} - {response.text}")
            raise TransportError(f"Pagar.me respondeu HTTP {response.status_code}")

        try:
            transaction = TransactionResponse.model_validate(body)
        except ValueError as e:
            if self.debug:
                self.log.error(f"Malformed transaction response for order {order_number}: {response.text}")
            raise TransportError("Resposta do Pagar.me sem id/status da transação") from e

        if self.debug:
            self.log.info(f"Transaction completed successfully for order {order_number}! The transaction response is: {body}")

        return transaction

    def _parse_body(self, response: httpx.Response, order_number: Optional[str]) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            if self.debug:
                self.log.error(f"Invalid JSON from Pagar.me for order {order_number}: HTTP {response.status_code} - {response.text}")
            raise TransportError(f"Resposta inválida do Pagar.me (HTTP {response.status_code})") from e

        if not isinstance(body, dict):
            raise TransportError(f"Resposta inesperada do Pagar.me (HTTP {response.status_code})")

        return body

    @staticmethod
    def _error_item(error: Any) -> ProcessorErrorItem:
        if isinstance(error, dict):
            return ProcessorErrorItem(**{**error, "message": str(error.get("message", ""))})
        return ProcessorErrorItem(message=str(error))
