from loguru import logger
import sys
import os

from ..core.config import settings

# Remove a configuração padrão
logger.remove()

# Console: DEBUG quando a aplicação roda em modo debug
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="DEBUG" if settings.DEBUG else "INFO",
)

# Log das transações Pagar.me em arquivo rotativo (equivalente ao "Debug Log" do gateway)
LOG_DIR = os.getenv("PAGARME_LOG_DIR", "logs")
if settings.PAGARME_DEBUG:
    os.makedirs(LOG_DIR, exist_ok=True)
    logger.add(
        os.path.join(LOG_DIR, "pagarme.log"),
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        level="DEBUG",
        filter=lambda record: record["extra"].get("gateway") == "pagarme",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[gateway]} - {message}",
    )
