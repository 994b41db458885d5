"""
Tests for Slack notification helpers.

The webhook is never called; httpx.AsyncClient is mocked.
"""

from unittest import mock
from django.test import SimpleTestCase, override_settings
import httpx
from config.notifications import (
    format_duration,
    send_slack_notification,
    settlement_message,
)


def summary(**overrides):
    result = {
        'round_number': 4,
        'participants_found': 12,
        'participants_settled': 12,
        'participants_failed': 0,
        'failures': [],
        'status': 'complete',
        'duration_seconds': 75.0,
    }
    result.update(overrides)
    return result


class SettlementMessageTests(SimpleTestCase):
    """Tests for settlement_message"""

    def test_complete_run(self):
        message, blocks = settlement_message(summary())

        self.assertEqual(message, 'Round Settlement Complete: Round 4')
        self.assertEqual(blocks[0]['text']['text'], 'Round Settlement Complete')
        self.assertIn('1.2 minutes', blocks[1]['fields'][1]['text'])

    def test_failures_listed(self):
        failures = [
            {'participant_id': 3, 'roster_id': 30, 'status': 'skipped', 'error': 'Roster 30 has 14 picks'},
        ]
        message, blocks = settlement_message(summary(participants_failed=1, failures=failures))

        self.assertIn('roster 30', blocks[-1]['text']['text'])
        self.assertIn('Roster 30 has 14 picks', blocks[-1]['text']['text'])

    def test_failed_run_shows_error(self):
        message, blocks = settlement_message(summary(status='failed', error='boom'))

        self.assertEqual(message, 'Round Settlement Failed: Round 4')
        self.assertIn('boom', blocks[-1]['text']['text'])

    def test_format_duration(self):
        self.assertEqual(format_duration(12), '12.0 seconds')
        self.assertEqual(format_duration(90), '1.5 minutes')
        self.assertEqual(format_duration(7200), '2.0 hours')


class SendSlackNotificationTests(SimpleTestCase):
    """Tests for send_slack_notification"""

    @override_settings(SLACK_WEBHOOK_URL='')
    def test_no_webhook_configured(self):
        self.assertFalse(send_slack_notification('hello'))

    @override_settings(SLACK_WEBHOOK_URL='https://hooks.slack.test/abc')
    @mock.patch('config.notifications.httpx.AsyncClient')
    def test_posts_payload(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.post = mock.AsyncMock(return_value=mock.Mock())

        self.assertTrue(send_slack_notification('hello', blocks=[{'type': 'divider'}]))

        kwargs = client.post.call_args.kwargs
        self.assertEqual(kwargs['json'], {'text': 'hello', 'blocks': [{'type': 'divider'}]})

    @override_settings(SLACK_WEBHOOK_URL='https://hooks.slack.test/abc')
    @mock.patch('config.notifications.httpx.AsyncClient')
    def test_http_error_returns_false(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.post = mock.AsyncMock(side_effect=httpx.ConnectError('unreachable'))

        self.assertFalse(send_slack_notification('hello'))
