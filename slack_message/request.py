import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import (
    DEFAULT_ICON_URL,
    DEFAULT_PAYLOADS,
    DEFAULT_USERNAME,
    OPTION_ENV_NAMES,
)
from .errors import ConfigurationError

_TRUE_VALUES = {'true', '1', 'yes', 'on'}
_FALSE_VALUES = {'false', '0', 'no', 'off', ''}


def validate_webhook_url(url: Optional[str]) -> str:
    if not url:
        raise ConfigurationError("No webhook URL given, pass slack_url or set SLACK_URL")
    if not str(url).startswith('https://'):
        raise ConfigurationError("Invalid URL, must start with https://")
    return str(url)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Option '{key}' expects true/false, got {value!r}")


def _parse_mapping(key: str, value: Any) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Option '{key}' is not valid JSON: {e}") from e
        if isinstance(parsed, dict):
            return parsed
    raise ConfigurationError(f"Option '{key}' must be a hash/JSON object, got {value!r}")


def _parse_default_payloads(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        raw = value.strip()
        if raw.startswith('['):
            try:
                value = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Option 'default_payloads' is not valid JSON: {e}") from e
        else:
            value = [s.strip() for s in raw.split(',') if s.strip()]

    names = []
    for item in value:
        name = str(item).strip()
        if name not in DEFAULT_PAYLOADS:
            raise ConfigurationError(
                f"Unknown default payload '{name}', expected any of: {', '.join(DEFAULT_PAYLOADS)}"
            )
        # conjunto ordenado: mantém a primeira ocorrência
        if name not in names:
            names.append(name)
    return tuple(names)


@dataclass(frozen=True)
class NotificationRequest:
    slack_url: str
    message: Optional[str] = None
    pretext: Optional[str] = None
    channel: Optional[str] = None
    thread_timestamp: Optional[str] = None
    username: Optional[str] = DEFAULT_USERNAME
    icon_url: Optional[str] = DEFAULT_ICON_URL
    use_webhook_configured_username_and_icon: bool = False
    payload: Dict[str, Any] = field(default_factory=dict)
    default_payloads: Tuple[str, ...] = DEFAULT_PAYLOADS
    attachment_properties: Dict[str, Any] = field(default_factory=dict)
    success: Optional[bool] = True
    fail_on_error: bool = True
    link_names: bool = False

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> 'NotificationRequest':
        """
        Monta a requisição a partir de um dicionário de opções.

        Ordem de precedência: opção explícita > variável de ambiente
        (OPTION_ENV_NAMES) > valor padrão. Chaves desconhecidas geram
        ConfigurationError.
        """
        options = dict(options or {})
        environ = os.environ if environ is None else environ

        unknown = set(options) - set(OPTION_ENV_NAMES)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        resolved: Dict[str, Any] = {}
        for key, env_name in OPTION_ENV_NAMES.items():
            value = options.get(key)
            if value is None:
                value = environ.get(env_name)
            if value is not None:
                resolved[key] = value

        for key in ('use_webhook_configured_username_and_icon', 'success', 'fail_on_error', 'link_names'):
            if key in resolved:
                resolved[key] = _parse_bool(key, resolved[key])
        for key in ('payload', 'attachment_properties'):
            if key in resolved:
                resolved[key] = _parse_mapping(key, resolved[key])
        if 'default_payloads' in resolved:
            resolved['default_payloads'] = _parse_default_payloads(resolved['default_payloads'])

        resolved['slack_url'] = validate_webhook_url(resolved.get('slack_url'))

        request = cls(**resolved)
        request.validate()
        return request

    def validate(self) -> None:
        validate_webhook_url(self.slack_url)
        _parse_default_payloads(self.default_payloads)

    @property
    def effective_username(self) -> Optional[str]:
        if self.use_webhook_configured_username_and_icon:
            return None
        return self.username

    @property
    def effective_icon_url(self) -> Optional[str]:
        if self.use_webhook_configured_username_and_icon:
            return None
        return self.icon_url
