"""
Round Settlement Pipeline.

Produces one RoundPointTotal per participant for a round. Triggered by an
operator (management command or admin action), never on a schedule.

Architecture:
    settle_round_flow
      ├─> Load Round Stats (once, aggregated per athlete)     -> STATS_LOADED
      ├─> Settle Participant (per roster, failures reported)  -> SETTLING
      │     ├─> Load Participant Roster
      │     ├─> Auto-subs, scoring, chip multiplier, transfer penalty
      │     └─> Save lineup repair, chip usage, round total (atomic)
      └─> Send Settlement Notification (optional)             -> FINALIZED

Settlement is idempotent: running it again on unchanged inputs writes the
same totals, so a run killed mid-loop is simply re-run from the top.

Usage:
    settle_round_flow(round_number=3)
    settle_round_flow(round_number=3, notify=True)
"""

from datetime import datetime
from typing import Dict

from prefect import flow, task, get_run_logger

from config.notifications import send_slack_notification, settlement_message
from league.models import Roster, Round, RoundSettlement
from league.processing.settlement import load_round_stats, settle_participant


@flow(name="Settle Round", log_prints=True)
def settle_round_flow(round_number: int, notify: bool = False) -> Dict:
    """
    Settle every participant's roster for a round.

    Args:
        round_number: Round to settle
        notify: If True, send a Slack summary when done

    Returns:
        Summary dict with participant counts, failures and duration
    """
    logger = get_run_logger()
    start_time = datetime.now()

    logger.info("=" * 80)
    logger.info(f"Round Settlement - Round {round_number}")
    logger.info("=" * 80)

    summary = {
        'round_number': round_number,
        'participants_found': 0,
        'participants_settled': 0,
        'participants_failed': 0,
        'failures': [],
        'status': 'running',
        'start_time': start_time.isoformat(),
    }

    try:
        round_obj = Round.objects.get(number=round_number)
        settlement, _ = RoundSettlement.objects.get_or_create(round=round_obj)

        # PHASE 1: stats
        round_stats = load_round_stats(round_number)
        settlement.mark_stats_loaded()

        roster_ids = list(
            Roster.objects
            .filter(round=round_obj)
            .order_by('participant__name', 'id')
            .values_list('id', flat=True)
        )
        summary['participants_found'] = len(roster_ids)
        logger.info(f"📋 Will settle {len(roster_ids)} rosters")

        # PHASE 2: participants
        settlement.mark_settling()
        for i, roster_id in enumerate(roster_ids, 1):
            result = settle_participant(roster_id, round_stats)
            settlement.record_result(result)

            if result['status'] == 'success':
                summary['participants_settled'] += 1
                logger.info(f"[{i}/{len(roster_ids)}] ✅ Roster {roster_id}: {result['points']} pts")
            else:
                summary['participants_failed'] += 1
                summary['failures'].append({
                    'participant_id': result.get('participant_id'),
                    'roster_id': roster_id,
                    'status': result['status'],
                    'error': result.get('error', ''),
                })
                logger.error(
                    f"[{i}/{len(roster_ids)}] ❌ Roster {roster_id} {result['status']}: "
                    f"{result.get('error', 'Unknown error')}"
                )

        # PHASE 3: finalize
        settlement.mark_finalized()

        summary['status'] = 'complete'
        end_time = datetime.now()
        summary['end_time'] = end_time.isoformat()
        summary['duration_seconds'] = (end_time - start_time).total_seconds()

        logger.info(f"\nFinal Summary:")
        logger.info(f"  • Participants: {summary['participants_found']}")
        logger.info(f"  • Settled: {summary['participants_settled']}")
        logger.info(f"  • Failed: {summary['participants_failed']}")
        logger.info(f"  • Duration: {summary['duration_seconds']:.1f}s")

    except Exception as e:
        logger.error(f"❌ Settlement failed with error: {e}")
        summary['status'] = 'failed'
        summary['error'] = str(e)
        summary['duration_seconds'] = (datetime.now() - start_time).total_seconds()

    if notify:
        send_settlement_notification(summary)

    return summary


@task(name="Send Settlement Notification")
def send_settlement_notification(summary: Dict):
    """Send the settlement summary to Slack"""
    logger = get_run_logger()

    message, blocks = settlement_message(summary)
    try:
        sent = send_slack_notification(message, blocks)
        if sent:
            logger.info("Slack notification sent successfully")
    except Exception as e:
        logger.warning(f"Failed to send Slack notification: {e}")
