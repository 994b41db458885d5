import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Club',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('short_name', models.CharField(blank=True, max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Participant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, unique=True)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Round',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.PositiveIntegerField(unique=True)),
                ('name', models.CharField(blank=True, help_text="e.g., 'GW1'", max_length=50)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'ordering': ['number'],
            },
        ),
        migrations.CreateModel(
            name='Athlete',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('position', models.CharField(choices=[('GK', 'Goalkeeper'), ('DEF', 'Defender'), ('MID', 'Midfielder'), ('FWD', 'Forward')], max_length=3)),
                ('price', models.DecimalField(decimal_places=1, help_text='Price in millions (e.g., 7.5)', max_digits=4, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('available', 'Available'), ('doubtful', 'Doubtful'), ('injured', 'Injured'), ('suspended', 'Suspended'), ('unavailable', 'Unavailable')], default='available', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('club', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='athletes', to='league.club')),
            ],
            options={
                'ordering': ['club__name', 'position', '-price'],
                'indexes': [
                    models.Index(fields=['position'], name='league_athl_positio_5c1a2e_idx'),
                    models.Index(fields=['club', 'position'], name='league_athl_club_id_8f3b7d_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Fixture',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kickoff', models.DateTimeField(blank=True, null=True)),
                ('away_club', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='away_fixtures', to='league.club')),
                ('home_club', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='home_fixtures', to='league.club')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='fixtures', to='league.round')),
            ],
            options={
                'ordering': ['round__number', 'kickoff', 'id'],
            },
        ),
        migrations.CreateModel(
            name='MatchStatLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('minutes', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(130)])),
                ('goals', models.PositiveSmallIntegerField(default=0)),
                ('assists', models.PositiveSmallIntegerField(default=0)),
                ('clean_sheet', models.BooleanField(default=False)),
                ('goals_conceded', models.PositiveSmallIntegerField(default=0)),
                ('penalties_saved', models.PositiveSmallIntegerField(default=0)),
                ('penalties_missed', models.PositiveSmallIntegerField(default=0)),
                ('yellow_cards', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(2)])),
                ('red_cards', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(1)])),
                ('own_goals', models.PositiveSmallIntegerField(default=0)),
                ('man_of_the_match', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stat_lines', to='league.athlete')),
                ('fixture', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stat_lines', to='league.fixture')),
            ],
            options={
                'verbose_name': 'Match Stat Line',
                'verbose_name_plural': 'Match Stat Lines',
                'ordering': ['fixture', 'athlete'],
                'indexes': [
                    models.Index(fields=['fixture', 'athlete'], name='league_matc_fixture_2d4e61_idx'),
                ],
                'unique_together': {('athlete', 'fixture')},
            },
        ),
        migrations.CreateModel(
            name='Roster',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('chip', models.CharField(choices=[('none', 'None'), ('bench_boost', 'Bench Boost'), ('triple_captain', 'Triple Captain'), ('two_captains', 'Two Captains'), ('wildcard', 'Wildcard')], default='none', max_length=20)),
                ('transfers_made', models.PositiveSmallIntegerField(default=0)),
                ('free_transfers_available', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rosters', to='league.participant')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rosters', to='league.round')),
            ],
            options={
                'ordering': ['round__number', 'participant__name'],
                'indexes': [
                    models.Index(fields=['round', 'participant'], name='league_rost_round_i_6a9c0b_idx'),
                ],
                'unique_together': {('participant', 'round')},
            },
        ),
        migrations.CreateModel(
            name='RosterPick',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slot', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(15)])),
                ('is_captain', models.BooleanField(default=False)),
                ('is_vice', models.BooleanField(default=False)),
                ('auto_slot', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('auto_captain', models.BooleanField(default=False)),
                ('auto_vice', models.BooleanField(default=False)),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='picks', to='league.athlete')),
                ('roster', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='picks', to='league.roster')),
            ],
            options={
                'verbose_name': 'Roster Pick',
                'verbose_name_plural': 'Roster Picks',
                'ordering': ['roster', 'slot'],
                'unique_together': {('roster', 'athlete'), ('roster', 'slot')},
            },
        ),
        migrations.CreateModel(
            name='FreeTransferBalance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('free_transfers', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('participant', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='free_transfer_balance', to='league.participant')),
            ],
            options={
                'verbose_name': 'Free Transfer Balance',
                'verbose_name_plural': 'Free Transfer Balances',
            },
        ),
        migrations.CreateModel(
            name='TransferRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('price_diff', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('athlete_in', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers_in', to='league.athlete')),
                ('athlete_out', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers_out', to='league.athlete')),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transfers', to='league.participant')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transfers', to='league.round')),
            ],
            options={
                'ordering': ['round__number', 'participant', 'id'],
                'indexes': [
                    models.Index(fields=['participant', 'round'], name='league_tran_partici_3e7f52_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RoundPointTotal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points', models.IntegerField(help_text='Final points after chip effects and transfer penalty')),
                ('base_points', models.IntegerField(default=0, help_text='Sum over the final starting eleven')),
                ('captain_bonus', models.IntegerField(default=0)),
                ('bench_points', models.IntegerField(default=0, help_text='Bench points counted by the bench boost chip')),
                ('transfer_penalty', models.IntegerField(default=0)),
                ('chip', models.CharField(choices=[('none', 'None'), ('bench_boost', 'Bench Boost'), ('triple_captain', 'Triple Captain'), ('two_captains', 'Two Captains'), ('wildcard', 'Wildcard')], default='none', max_length=20)),
                ('settled_at', models.DateTimeField(auto_now=True)),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='round_totals', to='league.participant')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='point_totals', to='league.round')),
            ],
            options={
                'verbose_name': 'Round Point Total',
                'verbose_name_plural': 'Round Point Totals',
                'ordering': ['round__number', '-points'],
                'indexes': [
                    models.Index(fields=['round', '-points'], name='league_roun_round_i_b81d4a_idx'),
                ],
                'unique_together': {('participant', 'round')},
            },
        ),
        migrations.CreateModel(
            name='ChipUsageRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('chip', models.CharField(choices=[('none', 'None'), ('bench_boost', 'Bench Boost'), ('triple_captain', 'Triple Captain'), ('two_captains', 'Two Captains'), ('wildcard', 'Wildcard')], max_length=20)),
                ('used_at', models.DateTimeField(auto_now_add=True)),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='used_chips', to='league.participant')),
                ('round', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='chip_usages', to='league.round')),
            ],
            options={
                'verbose_name': 'Chip Usage Record',
                'verbose_name_plural': 'Chip Usage Records',
                'ordering': ['participant', 'round__number'],
                'unique_together': {('participant', 'chip')},
            },
        ),
        migrations.CreateModel(
            name='RoundSettlement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('state', models.CharField(choices=[('not_started', 'Not Started'), ('stats_loaded', 'Stats Loaded'), ('settling', 'Settling'), ('finalized', 'Finalized')], default='not_started', max_length=20)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('stats_loaded_at', models.DateTimeField(blank=True, null=True)),
                ('finished_at', models.DateTimeField(blank=True, null=True)),
                ('runs', models.PositiveIntegerField(default=0, help_text='Number of settlement runs for this round')),
                ('participants_settled', models.PositiveIntegerField(default=0)),
                ('participants_failed', models.PositiveIntegerField(default=0)),
                ('failures', models.JSONField(blank=True, default=list)),
                ('round', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='settlement', to='league.round')),
            ],
            options={
                'verbose_name': 'Round Settlement',
                'verbose_name_plural': 'Round Settlements',
                'ordering': ['round__number'],
            },
        ),
    ]
