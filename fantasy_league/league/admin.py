from django.contrib import admin, messages
from .models import (
    Club, Athlete, Participant, Round, Fixture, MatchStatLine,
    Roster, RosterPick, FreeTransferBalance, TransferRecord,
    RoundPointTotal, ChipUsageRecord, RoundSettlement,
)


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    list_display = ['name', 'short_name', 'athlete_count', 'created_at']
    search_fields = ['name', 'short_name']

    def athlete_count(self, obj):
        return obj.athletes.count()
    athlete_count.short_description = 'Athletes'


@admin.register(Athlete)
class AthleteAdmin(admin.ModelAdmin):
    list_display = ['name', 'club', 'position', 'price', 'status']
    list_filter = ['position', 'status', 'club']
    search_fields = ['name', 'club__name']
    ordering = ['club__name', 'position', '-price']


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'free_transfers', 'created_at']
    search_fields = ['name', 'email']

    def free_transfers(self, obj):
        balance = getattr(obj, 'free_transfer_balance', None)
        return balance.free_transfers if balance else None
    free_transfers.short_description = 'Free Transfers'


class FixtureInline(admin.TabularInline):
    """Inline display of fixtures within a round"""
    model = Fixture
    extra = 0
    fields = ['home_club', 'away_club', 'kickoff']


@admin.register(Round)
class RoundAdmin(admin.ModelAdmin):
    list_display = ['number', 'name', 'deadline', 'settlement_state', 'roster_count']
    ordering = ['number']
    inlines = [FixtureInline]
    actions = ['settle_selected_rounds']

    def settlement_state(self, obj):
        settlement = getattr(obj, 'settlement', None)
        return settlement.get_state_display() if settlement else 'Not Started'
    settlement_state.short_description = 'Settlement'

    def roster_count(self, obj):
        return obj.rosters.count()
    roster_count.short_description = 'Rosters'

    @admin.action(description='Settle selected rounds')
    def settle_selected_rounds(self, request, queryset):
        # Imported here so admin autodiscovery does not load Prefect
        from league.flows.settle_round import settle_round_flow

        for round_obj in queryset.order_by('number'):
            summary = settle_round_flow(round_number=round_obj.number)
            if summary['status'] != 'complete':
                self.message_user(
                    request,
                    f"{round_obj}: settlement failed - {summary.get('error', 'unknown error')}",
                    level=messages.ERROR,
                )
            elif summary['participants_failed']:
                self.message_user(
                    request,
                    f"{round_obj}: {summary['participants_settled']} settled, "
                    f"{summary['participants_failed']} failed",
                    level=messages.WARNING,
                )
            else:
                self.message_user(
                    request,
                    f"{round_obj}: {summary['participants_settled']} participants settled",
                    level=messages.SUCCESS,
                )


@admin.register(MatchStatLine)
class MatchStatLineAdmin(admin.ModelAdmin):
    list_display = [
        'athlete', 'fixture', 'minutes', 'goals', 'assists',
        'clean_sheet', 'yellow_cards', 'red_cards'
    ]
    list_filter = ['fixture__round', 'athlete__position']
    search_fields = ['athlete__name']
    readonly_fields = ['updated_at']

    fieldsets = (
        ('Match', {
            'fields': ('athlete', 'fixture', 'minutes')
        }),
        ('Attacking', {
            'fields': ('goals', 'assists', 'penalties_missed')
        }),
        ('Defending', {
            'fields': ('clean_sheet', 'goals_conceded', 'penalties_saved', 'own_goals')
        }),
        ('Discipline & Awards', {
            'fields': ('yellow_cards', 'red_cards', 'man_of_the_match')
        }),
        ('Metadata', {
            'fields': ('updated_at',),
            'classes': ('collapse',)
        }),
    )


class RosterPickInline(admin.TabularInline):
    """Inline display of picks within a roster"""
    model = RosterPick
    extra = 0
    fields = ['slot', 'athlete', 'is_captain', 'is_vice', 'auto_slot', 'auto_captain', 'auto_vice']
    readonly_fields = ['auto_slot', 'auto_captain', 'auto_vice']
    ordering = ['slot']


@admin.register(Roster)
class RosterAdmin(admin.ModelAdmin):
    list_display = ['participant', 'round', 'chip', 'transfers_made', 'free_transfers_available', 'updated_at']
    list_filter = ['round', 'chip']
    search_fields = ['participant__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [RosterPickInline]


@admin.register(FreeTransferBalance)
class FreeTransferBalanceAdmin(admin.ModelAdmin):
    list_display = ['participant', 'free_transfers', 'updated_at']
    search_fields = ['participant__name']


@admin.register(TransferRecord)
class TransferRecordAdmin(admin.ModelAdmin):
    list_display = ['participant', 'round', 'athlete_out', 'athlete_in', 'price_diff', 'created_at']
    list_filter = ['round']
    search_fields = ['participant__name', 'athlete_out__name', 'athlete_in__name']

    def has_add_permission(self, request):
        return False


@admin.register(RoundPointTotal)
class RoundPointTotalAdmin(admin.ModelAdmin):
    list_display = [
        'participant', 'round', 'points', 'base_points', 'captain_bonus',
        'bench_points', 'transfer_penalty', 'chip', 'settled_at'
    ]
    list_filter = ['round', 'chip']
    search_fields = ['participant__name']
    ordering = ['round__number', '-points']

    def has_add_permission(self, request):
        return False


@admin.register(ChipUsageRecord)
class ChipUsageRecordAdmin(admin.ModelAdmin):
    list_display = ['participant', 'chip', 'round', 'used_at']
    list_filter = ['chip', 'round']
    search_fields = ['participant__name']


@admin.register(RoundSettlement)
class RoundSettlementAdmin(admin.ModelAdmin):
    list_display = [
        'round', 'state', 'runs', 'participants_settled',
        'participants_failed', 'started_at', 'finished_at'
    ]
    list_filter = ['state']
    readonly_fields = [
        'round', 'state', 'runs', 'started_at', 'stats_loaded_at', 'finished_at',
        'participants_settled', 'participants_failed', 'failures'
    ]

    def has_add_permission(self, request):
        return False
