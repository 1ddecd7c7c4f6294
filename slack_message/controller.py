from typing import Any, Mapping, Optional

from .enrichment import BuildFacts
from .formatters import generate_attachment
from .request import NotificationRequest
from .services import DeliveryResult, SlackWebhookClient
from .utils import format_channel


def run(options: Optional[Mapping[str, Any]] = None, client: Optional[SlackWebhookClient] = None,
        facts: Optional[BuildFacts] = None, environ: Optional[Mapping[str, str]] = None) -> DeliveryResult:
    """
    Envia uma notificação: opções -> NotificationRequest -> attachment -> POST.

    Levanta ConfigurationError antes de qualquer chamada de rede se as opções
    forem inválidas, e DeliveryError se o envio falhar com fail_on_error.
    """
    request = NotificationRequest.from_options(options, environ=environ)
    return send(request, client=client, facts=facts)


def send(request: NotificationRequest, client: Optional[SlackWebhookClient] = None,
         facts: Optional[BuildFacts] = None) -> DeliveryResult:
    request.validate()
    attachment = generate_attachment(request, facts or BuildFacts())

    owns_client = client is None
    client = client or SlackWebhookClient()
    try:
        return client.deliver(
            webhook_url=request.slack_url,
            channel=format_channel(request.channel),
            thread_timestamp=request.thread_timestamp,
            username=request.effective_username,
            attachments=[attachment],
            link_names=request.link_names,
            icon_url=request.effective_icon_url,
            fail_on_error=request.fail_on_error,
        )
    finally:
        if owns_client:
            client.close()
