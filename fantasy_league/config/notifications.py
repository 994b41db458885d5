import httpx
import asyncio
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


async def send_slack_notification_async(message: str, blocks: list = None):
    """
    Send a message to Slack via webhook.

    Args:
        message: Plain text message to send
        blocks: Optional list of Slack Block Kit blocks for rich formatting

    Returns:
        True if message sent successfully, False otherwise
    """
    if not settings.SLACK_WEBHOOK_URL:
        logger.info(f"No Slack webhook configured. Message: {message}")
        return False

    payload = {"text": message}

    if blocks:
        payload["blocks"] = blocks

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                settings.SLACK_WEBHOOK_URL,
                headers={"Content-type": "application/json"},
                json=payload,
                timeout=10.0
            )
            response.raise_for_status()
            return True
    except httpx.HTTPError as e:
        logger.warning(f"Failed to send Slack notification: {e}")
        return False


def send_slack_notification(message: str, blocks: list = None):
    """
    Synchronous wrapper for send_slack_notification_async.

    Use this in Django shell, management commands, or any synchronous context.
    For async contexts (like Prefect tasks), use send_slack_notification_async directly.

    Example:
        >>> from config.notifications import send_slack_notification
        >>> send_slack_notification("Round 3 settled")
    """
    return asyncio.run(send_slack_notification_async(message, blocks))


def format_duration(seconds: float) -> str:
    if seconds >= 3600:
        return f"{seconds/3600:.1f} hours"
    if seconds >= 60:
        return f"{seconds/60:.1f} minutes"
    return f"{seconds:.1f} seconds"


def settlement_message(summary: dict):
    """
    Build the Slack text and blocks for a round settlement summary.

    Args:
        summary: Summary dict returned by settle_round_flow

    Returns:
        (message, blocks)
    """
    status_text = 'Complete' if summary['status'] == 'complete' else summary['status'].title()
    round_label = f"Round {summary['round_number']}"

    blocks = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"Round Settlement {status_text}",
                "emoji": True
            }
        },
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Round:*\n{round_label}"},
                {"type": "mrkdwn", "text": f"*Duration:*\n{format_duration(summary.get('duration_seconds', 0))}"},
            ]
        },
        {
            "type": "divider"
        },
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Participants:*\n{summary['participants_found']}"},
                {"type": "mrkdwn", "text": f"*Settled:*\n{summary['participants_settled']}"},
                {"type": "mrkdwn", "text": f"*Failed:*\n{summary['participants_failed']}"},
            ]
        },
    ]

    if summary.get('failures'):
        lines = [
            f"• participant {f['participant_id']} (roster {f['roster_id']}): {f['status']} - {f.get('error', '')}"
            for f in summary['failures'][:10]
        ]
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": "*Failures:*\n" + "\n".join(lines)}
        })

    if summary.get('error'):
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*Error:* {summary['error']}"}
        })

    return f"Round Settlement {status_text}: {round_label}", blocks

