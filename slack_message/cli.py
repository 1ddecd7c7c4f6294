"""CLI para enviar uma notificação ao Slack a partir de um passo de pipeline."""

import argparse
import json
import logging
import sys

from .constants import DEBUG_MODE
from .controller import run
from .errors import ConfigurationError, DeliveryError

logger = logging.getLogger(__name__)


def _key_value(raw):
    if '=' not in raw:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    key, value = raw.split('=', 1)
    return key.strip(), value


def _json_object(raw):
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}")
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="slack-message",
        description="Send a message to your Slack group through an Incoming WebHook",
    )
    parser.add_argument("--message", help="Message to display, supports Slack markup")
    parser.add_argument("--pretext", help="Text shown above the attachment block")
    parser.add_argument("--channel", help="#channel or @username")
    parser.add_argument("--thread-timestamp", help="Timestamp of the message to reply to")
    parser.add_argument("--slack-url", help="Incoming WebHook URL (default: $SLACK_URL)")
    parser.add_argument("--username", help="Overrides the webhook's username")
    parser.add_argument("--icon-url", help="Overrides the webhook's image")
    parser.add_argument(
        "--use-webhook-configured-username-and-icon",
        action="store_const",
        const=True,
        default=None,
        help="Use the webhook's own username and icon",
    )
    parser.add_argument(
        "--payload",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        help="Extra field added to the attachment (repeatable)",
    )
    parser.add_argument(
        "--default-payloads",
        help="Comma separated default payloads to include, empty string to suppress all",
    )
    parser.add_argument(
        "--attachment-properties",
        type=_json_object,
        help="JSON object deep merged into the attachment",
    )
    for name, help_text in (
        ("success", "Was this build successful?"),
        ("fail-on-error", "Should a failure to send cause a non-zero exit?"),
        ("link-names", "Find and link channel names and usernames"),
    ):
        dest = name.replace('-', '_')
        parser.add_argument(f"--{name}", dest=dest, action="store_const", const=True, default=None, help=help_text)
        parser.add_argument(f"--no-{name}", dest=dest, action="store_const", const=False)
    return parser


def parse_options(argv=None):
    args = build_parser().parse_args(argv)
    options = {key: value for key, value in vars(args).items() if value is not None}
    if 'payload' in options:
        options['payload'] = dict(options['payload'])
    return options


def main(argv=None):
    logging.basicConfig(
        level=logging.DEBUG if DEBUG_MODE else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    options = parse_options(argv)
    try:
        run(options)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except DeliveryError:
        # já logado pelo cliente do webhook
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
