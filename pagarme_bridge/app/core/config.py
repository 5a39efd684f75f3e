from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings
from typing import Optional
from loguru import logger


class Settings(BaseSettings):
    """Configurações do gateway Pagar.me carregadas de variáveis de ambiente."""

    # 🔹 Gateway
    PAGARME_ENABLED: bool = Field(True, env="PAGARME_ENABLED")
    PAGARME_TITLE: str = Field("Pagar.me", env="PAGARME_TITLE")
    PAGARME_DESCRIPTION: str = Field(
        "Pague com Cartão de Crédito ou Boleto Bancário via Pagar.me",
        env="PAGARME_DESCRIPTION",
    )
    PAGARME_API_KEY: Optional[str] = Field(None, env="PAGARME_API_KEY")

    # 🔹 URLs da API e do Dashboard
    PAGARME_API_URL: str = Field("https://api.pagar.me/1", env="PAGARME_API_URL")
    PAGARME_SANDBOX_API_URL: str = Field("https://api.pagar.me/1", env="PAGARME_SANDBOX_API_URL")
    PAGARME_DASHBOARD_URL: str = Field("https://dashboard.pagar.me", env="PAGARME_DASHBOARD_URL")

    # 🔹 URL de postback informada ao Pagar.me (rota /webhooks/pagarme desta API)
    PAGARME_POSTBACK_URL: str = Field(
        "http://localhost:8000/webhooks/pagarme", env="PAGARME_POSTBACK_URL"
    )

    # 🔹 Controle de Ambiente
    USE_SANDBOX: bool = Field(False, env="USE_SANDBOX")

    # 🔹 Loja
    STORE_CURRENCY: str = Field("BRL", env="STORE_CURRENCY")
    ADMIN_EMAIL: str = Field("admin@example.com", env="ADMIN_EMAIL")

    # 🔹 Depuração
    PAGARME_DEBUG: bool = Field(False, env="PAGARME_DEBUG")  # Log das transações
    DEBUG: bool = Field(False, env="DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def api_url(self) -> str:
        """URL base da API conforme o modo sandbox."""
        base = self.PAGARME_SANDBOX_API_URL if self.USE_SANDBOX else self.PAGARME_API_URL
        return base.rstrip("/")

    def check_sandbox_key(self) -> None:
        """Avisa quando o sandbox está ativo com uma chave que não é de teste."""
        if self.USE_SANDBOX and self.PAGARME_API_KEY and not self.PAGARME_API_KEY.startswith("ak_test_"):
            logger.warning("⚠️ Sandbox ativado, mas a API Key do Pagar.me não é uma chave de teste (ak_test_).")


# ✅ Instância de configurações
try:
    settings = Settings()
    settings.check_sandbox_key()
except ValidationError as e:
    logger.error(f"❌ Erro na configuração: {e}")
    raise
