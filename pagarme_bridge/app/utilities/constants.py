# 🔹 Identificador do gateway (prefixo dos campos postados no checkout)
GATEWAY_ID = "pagarme"

# 🔹 Moeda aceita pelo Pagar.me
SUPPORTED_CURRENCY = "BRL"

# 🔹 Timeout da requisição de transação (em segundos)
GATEWAY_TIMEOUT = 60

# 🔹 Formas de pagamento
PAYMENT_METHOD_CREDIT_CARD = "credit_card"
PAYMENT_METHOD_BOLETO = "boleto"
POSTED_CREDIT_CARD = "credit-card"

# 🔹 Anotações gravadas no pedido
TRANSACTION_ID_META_KEY = "_pagarme_transaction_id"
TRANSACTION_DATA_META_KEY = "_pagarme_transaction_data"
TRANSACTION_LINK_META_KEY = "Pagar.me Transaction details"

# 🔹 Campos da resposta copiados (sanitizados) para o pedido
TRANSACTION_DATA_FIELDS = (
    "payment_method",
    "installments",
    "card_brand",
    "antifraud_score",
    "boleto_url",
    "subscription_id",
)

# 🔹 Status de pedido da loja
ORDER_STATUS_ON_HOLD = "on-hold"
ORDER_STATUS_FAILED = "failed"
ORDER_STATUS_REFUNDED = "refunded"
ORDER_STATUS_PROCESSING = "processing"
ORDER_STATUS_PENDING = "pending"

# 🔹 Mensagem genérica quando não houve transação
GENERIC_CHECKOUT_ERROR = "Ocorreu um erro ao processar o seu pagamento, tente novamente ou entre em contato conosco."
