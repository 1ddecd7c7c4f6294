from typing import Optional

from .constants import REMEDIATION_MESSAGE


class SlackMessageError(Exception):
    """Base de todos os erros do pacote."""


class ConfigurationError(SlackMessageError):
    """Pré-condição inválida (ex.: SLACK_URL sem https://). Sempre fatal."""


class DeliveryError(SlackMessageError):
    """
    Falha ao entregar a mensagem no webhook quando fail_on_error está ativo.

    A mensagem é sempre o texto fixo de remediação; a exceção original do
    transporte/HTTP fica em `cause`.
    """

    fatal = True

    def __init__(self, cause: Optional[BaseException] = None, message: str = REMEDIATION_MESSAGE):
        super().__init__(message)
        self.cause = cause
        self.message = message
