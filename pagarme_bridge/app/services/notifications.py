from html import escape

from ..interfaces import MailerInterface
from ..utilities.logging_config import logger


class LogMailer:
    """
    Mailer padrão: registra o e-mail no log.
    A loja deve injetar o seu próprio mailer para entrega real.
    """

    def wrap_message(self, title: str, message: str) -> str:
        return f"<h2>{escape(title)}</h2>\n<p>{message}</p>"

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info(f"📧 E-mail para {to} | {subject}\n{body}")


class AdminNotifier:
    """Envia ao administrador da loja os avisos de transação recusada ou estornada."""

    def __init__(self, mailer: MailerInterface, admin_email: str):
        self.mailer = mailer
        self.admin_email = admin_email

    async def send_email(self, subject: str, title: str, message: str) -> None:
        await self.mailer.send(self.admin_email, subject, self.mailer.wrap_message(title, message))

    @staticmethod
    def transaction_link(url: str) -> str:
        return f'<a href="{url}">{url}</a>'

    async def transaction_refused(self, order_number: str, url: str) -> None:
        await self.send_email(
            f"A transação do pedido {order_number} foi recusada pela operadora do cartão ou por suspeita de fraude",
            "Transação recusada",
            f"O pedido {order_number} foi marcado como falho porque a transação foi recusada pela operadora "
            f"do cartão ou por suspeita de fraude. Para mais detalhes, veja {self.transaction_link(url)}.",
        )

    async def transaction_refunded(self, order_number: str, url: str) -> None:
        await self.send_email(
            f"A transação do pedido {order_number} foi estornada",
            "Transação estornada",
            f"O pedido {order_number} foi marcado como estornado pelo Pagar.me. "
            f"Para mais detalhes, veja {self.transaction_link(url)}.",
        )
