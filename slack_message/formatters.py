import copy
from typing import Any, Dict, List, Optional

from .constants import COLORS, MRKDWN_IN, SLACK_HIDE_AUTHOR_ON_SUCCESS
from .enrichment import BuildFacts
from .request import NotificationRequest
from .utils import convert_links, interpret_newlines, trim_message


def deep_merge(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge recursivo sem alterar as entradas:
    - dict + dict -> merge chave a chave
    - list + list -> concatena (base primeiro)
    - qualquer outro caso -> vence o override
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = current + copy.deepcopy(value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _field(title: str, value: Any, short: bool) -> Dict[str, Any]:
    return {'title': title, 'value': value, 'short': short}


def build_default_fields(request: NotificationRequest, facts: BuildFacts) -> List[Dict[str, Any]]:
    wanted = set(request.default_payloads)
    fields = []

    # lane pode não existir quando a ação roda fora de uma lane
    if 'lane' in wanted:
        lane = facts.lane_name()
        if lane:
            fields.append(_field('Lane', lane, True))

    if 'test_result' in wanted:
        fields.append(_field('Result', 'Success' if request.success else 'Error', True))

    if 'git_branch' in wanted:
        branch = facts.git_branch()
        if branch:
            fields.append(_field('Git Branch', branch, True))

    if 'git_author' in wanted and not (SLACK_HIDE_AUTHOR_ON_SUCCESS and request.success):
        author = facts.git_author_email()
        if author:
            fields.append(_field('Git Author', author, True))

    if 'last_git_commit' in wanted:
        commit = facts.last_git_commit_message()
        if commit:
            fields.append(_field('Git Commit', commit, False))

    if 'last_git_commit_hash' in wanted:
        commit_hash = facts.last_git_commit_hash()
        if commit_hash:
            fields.append(_field('Git Commit Hash', commit_hash, False))

    return fields


def build_payload_fields(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [_field(str(k), convert_links(str(v)), False) for k, v in (payload or {}).items()]


def generate_attachment(request: NotificationRequest, facts: Optional[BuildFacts] = None) -> Dict[str, Any]:
    """Gera o único attachment enviado ao webhook para esta requisição."""
    facts = facts or BuildFacts()

    message = convert_links(trim_message(request.message))
    pretext = interpret_newlines(request.pretext)

    attachment: Dict[str, Any] = {
        'fallback': message,
        'text': message,
        'pretext': pretext,
    }
    if request.success is not None:
        attachment['color'] = COLORS[bool(request.success)]
    attachment['mrkdwn_in'] = list(MRKDWN_IN)
    attachment['fields'] = build_default_fields(request, facts) + build_payload_fields(request.payload)

    return deep_merge(attachment, request.attachment_properties)
