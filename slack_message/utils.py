import re
from typing import Optional

from .constants import SLACK_MESSAGE_MAX_LENGTH

HTML_LINK_PATTERN = re.compile(r'<a.*?href.*?=.*?(["\'])(?P<link>.*?)\1.*?>(?P<text>.+?)</a>')
MARKDOWN_LINK_PATTERN = re.compile(r'\[(?P<text>[^\[\]]*?)\]\((?P<link>https?://.*?|mailto:.*?)\)')


def _is_meaningful(value):
    if value is None:
        return False
    v = str(value).strip()
    if v == "":
        return False
    return v.lower() not in {"n/a", "none", "null", "head"}


def pick_first_nonempty(*candidates):
    for c in candidates:
        if _is_meaningful(c):
            return str(c).strip()
    return None


def trim_message(text, limit: int = SLACK_MESSAGE_MAX_LENGTH) -> str:
    # str do Python é indexada por code point, o corte nunca parte um caractere multi-byte
    if text is None:
        return ''
    text = str(text)
    if limit < 0:
        limit = 0
    return text[:limit]


def slack_link(href: str, text: Optional[str]) -> str:
    if not text:
        return f"<{href}>"
    return f"<{href}|{text}>"


def convert_links(text) -> str:
    """
    Converte links markdown `[texto](url)` e HTML `<a href="url">texto</a>`
    para o formato nativo do Slack `<url|texto>`.

    Texto já convertido não casa com nenhum dos padrões, então aplicar duas
    vezes dá o mesmo resultado.
    """
    text = '' if text is None else str(text)
    text = HTML_LINK_PATTERN.sub(lambda m: slack_link(m.group('link'), m.group('text')), text)
    return MARKDOWN_LINK_PATTERN.sub(lambda m: slack_link(m.group('link'), m.group('text')), text)


def interpret_newlines(text) -> str:
    # '\n' literal (barra + n) vindo de config escapada -> quebra de linha real
    return ('' if text is None else str(text)).replace('\\n', '\n')


def format_channel(channel_name: Optional[str]) -> Optional[str]:
    if not channel_name:
        return None
    if channel_name[0] in ('#', '@'):
        return channel_name
    # sem prefixo, envia para canal por padrão
    return '#' + channel_name
