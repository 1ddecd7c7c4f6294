#!/usr/bin/env python3
import os
import sys
import unittest
from unittest import mock

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from slack_message.constants import REMEDIATION_MESSAGE
from slack_message.errors import ConfigurationError, DeliveryError
from slack_message.services import SlackWebhookClient

URL = "https://hooks.slack.test/services/T000/B000/XXX"


def make_response(status_code):
    resp = mock.Mock(status_code=status_code)
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=resp
        )
    return resp


def make_client(status_code=200, error=None):
    session = mock.Mock(spec=requests.Session)
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = make_response(status_code)
    return SlackWebhookClient(session=session, timeout=10), session


def deliver(client, fail_on_error=True, webhook_url=URL):
    return client.deliver(
        webhook_url=webhook_url,
        channel='#general',
        thread_timestamp='1700000000.000100',
        username='fastlane',
        attachments=[{'text': 'Deploy ok', 'color': 'good'}],
        link_names=False,
        icon_url='https://i.test/icon.png',
        fail_on_error=fail_on_error,
    )


class TestSlackWebhookClient(unittest.TestCase):
    def test_success_posts_json_body(self):
        client, session = make_client(200)
        with self.assertLogs('slack_message.services', level='INFO') as logs:
            result = deliver(client)

        self.assertTrue(result.ok)
        self.assertEqual(result.status_code, 200)
        infos = [r for r in logs.records if r.levelname == 'INFO']
        self.assertEqual(len(infos), 1)
        self.assertIn('Successfully sent Slack notification', infos[0].getMessage())

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], URL)
        self.assertEqual(kwargs['headers'], {'Content-Type': 'application/json'})
        self.assertEqual(kwargs['timeout'], 10)
        self.assertEqual(kwargs['json'], {
            'channel': '#general',
            'username': 'fastlane',
            'thread_ts': '1700000000.000100',
            'icon_url': 'https://i.test/icon.png',
            'attachments': [{'text': 'Deploy ok', 'color': 'good'}],
            'link_names': False,
        })

    def test_body_logged_at_debug_level(self):
        client, _ = make_client(200)
        with self.assertLogs('slack_message.services', level='DEBUG') as logs:
            deliver(client)
        debug = [r.getMessage() for r in logs.records if r.levelname == 'DEBUG']
        self.assertTrue(any(m.startswith('Slack body:') and 'Deploy ok' in m for m in debug))
        self.assertFalse(any(URL in m for m in debug))

    def test_http_error_is_fatal_with_fail_on_error(self):
        client, _ = make_client(403)
        with self.assertLogs('slack_message.services', level='ERROR'):
            with self.assertRaises(DeliveryError) as ctx:
                deliver(client, fail_on_error=True)

        self.assertIn(REMEDIATION_MESSAGE, str(ctx.exception))
        self.assertTrue(ctx.exception.fatal)
        self.assertIsInstance(ctx.exception.cause, requests.exceptions.HTTPError)

    def test_http_error_is_warning_without_fail_on_error(self):
        client, _ = make_client(404)
        with self.assertLogs('slack_message.services', level='WARNING') as logs:
            result = deliver(client, fail_on_error=False)

        self.assertFalse(result.ok)
        self.assertFalse(result.fatal)
        self.assertEqual(result.status_code, 404)
        warnings = [r.getMessage() for r in logs.records if r.levelname == 'WARNING']
        self.assertEqual(warnings, [REMEDIATION_MESSAGE])

    def test_transport_errors_handled_like_http_errors(self):
        for error in (
            requests.exceptions.ConnectionError("connection reset"),
            requests.exceptions.Timeout("read timed out"),
            requests.exceptions.SSLError("bad handshake"),
        ):
            client, _ = make_client(error=error)
            with self.assertLogs('slack_message.services', level='WARNING'):
                result = deliver(client, fail_on_error=False)
            self.assertFalse(result.ok)
            self.assertIsNone(result.status_code)

            client, _ = make_client(error=error)
            with self.assertLogs('slack_message.services', level='ERROR'):
                with self.assertRaises(DeliveryError):
                    deliver(client, fail_on_error=True)

    def test_webhook_token_never_logged(self):
        secret_url = "https://hooks.slack.test/services/T000/B000/SECRETTOKEN"
        resp = requests.Response()
        resp.status_code = 403
        resp.reason = 'Forbidden'
        resp.url = secret_url
        session = mock.Mock(spec=requests.Session)
        session.post.return_value = resp
        client = SlackWebhookClient(session=session)

        with self.assertLogs('slack_message.services', level='DEBUG') as logs:
            result = deliver(client, fail_on_error=False, webhook_url=secret_url)
        self.assertEqual(result.status_code, 403)
        self.assertNotIn('SECRETTOKEN', result.error)
        for record in logs.records:
            self.assertNotIn('SECRETTOKEN', record.getMessage())
        self.assertTrue(any('403 Client Error' in r.getMessage() for r in logs.records))

        # erro de conexão do urllib3 cita só o path
        error = requests.exceptions.ConnectionError(
            "HTTPSConnectionPool(host='hooks.slack.test', port=443): "
            "Max retries exceeded with url: /services/T000/B000/SECRETTOKEN"
        )
        client, _ = make_client(error=error)
        with self.assertLogs('slack_message.services', level='ERROR') as logs:
            with self.assertRaises(DeliveryError):
                deliver(client, fail_on_error=True, webhook_url=secret_url)
        for record in logs.records:
            self.assertNotIn('SECRETTOKEN', record.getMessage())

    def test_invalid_url_never_hits_network(self):
        client, session = make_client(200)
        for fail_on_error in (True, False):
            with self.assertRaises(ConfigurationError):
                deliver(client, fail_on_error=fail_on_error, webhook_url='http://hooks.slack.test/x')
        self.assertEqual(session.post.call_count, 0)

    def test_owned_session_is_closed(self):
        with mock.patch('slack_message.services.requests.Session') as session_cls:
            with SlackWebhookClient() as client:
                self.assertIs(client.session, session_cls.return_value)
            session_cls.return_value.close.assert_called_once()

        external = mock.Mock(spec=requests.Session)
        SlackWebhookClient(session=external).close()
        external.close.assert_not_called()


if __name__ == '__main__':
    unittest.main()
