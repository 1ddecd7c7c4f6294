import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import requests

from .constants import REMEDIATION_MESSAGE, SLACK_TIMEOUT_SECONDS
from .errors import DeliveryError
from .request import validate_webhook_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    fatal: bool = False


def redact_webhook_url(text: str, webhook_url: str) -> str:
    # o path do Incoming Webhook é o próprio token; erros de conexão citam só o path
    text = text.replace(webhook_url, '<SLACK_URL>')
    path = urlsplit(webhook_url).path
    if path and path != '/':
        text = text.replace(path, '/<redacted>')
    return text


def build_webhook_body(channel, thread_timestamp, username, attachments, link_names, icon_url) -> Dict[str, Any]:
    return {
        'channel': channel,
        'username': username,
        'thread_ts': thread_timestamp,
        'icon_url': icon_url,
        'attachments': attachments,
        'link_names': link_names,
    }


class SlackWebhookClient:
    """
    Cliente do Incoming Webhook do Slack.

    Dono da própria `requests.Session`; pode ser reaproveitado entre chamadas
    ou criado por chamada. Não faz retry.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = SLACK_TIMEOUT_SECONDS):
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self):
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def deliver(self, webhook_url: str, channel: Optional[str], thread_timestamp: Optional[str],
                username: Optional[str], attachments: List[Dict[str, Any]], link_names: bool,
                icon_url: Optional[str], fail_on_error: bool) -> DeliveryResult:
        # URL inválida é erro de configuração, nunca chega à rede
        validate_webhook_url(webhook_url)

        body = build_webhook_body(channel, thread_timestamp, username, attachments, link_names, icon_url)
        logger.debug(f"Slack body: {body}")

        try:
            resp = self.session.post(
                webhook_url,
                json=body,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
            logger.debug(f"Slack response: {resp.status_code}")
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            error = redact_webhook_url(str(e), webhook_url)
            logger.error(f"Error while pushing Slack message: {error}")
            status_code = e.response.status_code if e.response is not None else None
            if fail_on_error:
                logger.error(REMEDIATION_MESSAGE)
                raise DeliveryError(cause=e) from e
            logger.warning(REMEDIATION_MESSAGE)
            return DeliveryResult(ok=False, status_code=status_code, error=error, fatal=False)

        logger.info('Successfully sent Slack notification')
        return DeliveryResult(ok=True, status_code=resp.status_code)
