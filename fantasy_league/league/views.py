import json
from decimal import Decimal

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from league.exceptions import DataIntegrityError, InvariantViolation
from league.models import Participant, Round
from league.processing.chips import chip_availability
from league.processing.selection import load_catalogue
from league.processing.settlement import preview_round
from league.rules.transfers import squad_violations


@csrf_exempt
@require_POST
def validate_squad(request):
    """
    Check a proposed squad without saving it.

    Body: {"athlete_ids": [15 ids]}
    Returns every violation so the UI can show them all at once.
    """
    try:
        payload = json.loads(request.body or b'{}')
        athlete_ids = [int(i) for i in payload.get('athlete_ids', [])]
    except (ValueError, TypeError, AttributeError):
        return JsonResponse({'error': 'Expected JSON body with a list of athlete_ids'}, status=400)

    catalogue = load_catalogue(athlete_ids)
    violations = squad_violations(athlete_ids, catalogue)
    cost = sum((catalogue[i].price for i in set(athlete_ids) if i in catalogue), Decimal('0'))

    return JsonResponse({
        'ok': not violations,
        'violations': [{'code': v.code, 'message': v.message} for v in violations],
        'cost': float(cost),
    })


@require_GET
def participant_chips(request, participant_id):
    """Availability of each chip for a participant"""
    participant = get_object_or_404(Participant, pk=participant_id)
    statuses = chip_availability(participant)

    return JsonResponse({
        'participant_id': participant.id,
        'chips': [
            {
                'chip': status.chip,
                'available': status.available,
                'reason': status.reason,
                'used_in_round': status.used_in_round,
            }
            for status in statuses
        ],
        'remaining': sum(1 for status in statuses if status.available),
    })


@require_GET
def round_preview(request, participant_id, round_number):
    """Live points for a participant's round, computed on the fly"""
    participant = get_object_or_404(Participant, pk=participant_id)
    round_obj = get_object_or_404(Round, number=round_number)

    try:
        preview = preview_round(participant, round_obj)
    except DataIntegrityError as e:
        return JsonResponse({'error': str(e)}, status=404)
    except InvariantViolation as e:
        return JsonResponse({'error': str(e)}, status=500)

    return JsonResponse(preview)
