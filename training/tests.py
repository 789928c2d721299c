from datetime import date, time, timedelta
from unittest.mock import patch

from django.core.exceptions import ValidationError as ModelValidationError
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from club.models import Club, Team, Player, TeamPlayer
from training import (
    attendance_service,
    calendar_layout,
    override_service,
    recurrence_service,
    statistics_service,
)
from training.api.exceptions import (
    ExpansionFailedError,
    InactivePatternError,
    PlayerNotOnRosterError,
    SessionAlreadyCancelledError,
    SessionCancelledError,
    TeamChangeNotAllowedError,
)
from training.clock import FixedClock
from training.models import (
    Attendance,
    AttendanceStatus,
    RecurrencePattern,
    SessionKind,
    TrainingSession,
)

MONDAY = date(2026, 3, 2)
MON, WED = 1, 3


class TrainingFixtureMixin:
    def create_team(self, name='U12 Lions', club=None):
        club = club or self.club
        return Team._default_manager.create(club=club, name=name, age_group='U12')

    def create_player(self, team, first_name, last_name='Player', jersey_number=None):
        player = Player._default_manager.create(
            club=team.club,
            first_name=first_name,
            last_name=last_name,
            jersey_number=jersey_number
        )
        TeamPlayer._default_manager.create(team=team, player=player)
        return player

    def create_session(self, team, session_date, start_time=time(18, 0), duration_minutes=90, **extra):
        return TrainingSession._default_manager.create(
            team=team,
            session_date=session_date,
            start_time=start_time,
            duration_minutes=duration_minutes,
            **extra
        )

    def create_schedule(self, team, days=(MON, WED), start=MONDAY, until=None):
        return recurrence_service.create_recurring_schedule(
            team=team,
            days_of_week=list(days),
            start_time=time(18, 0),
            duration_minutes=90,
            generate_from=start,
            generate_until=until or start + timedelta(days=13),
            location='Main Field',
            clock=FixedClock(start),
        )


class RecurrenceExpansionTestCase(TrainingFixtureMixin, TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.team = self.create_team()

    def test_expand_dates_monday_wednesday_two_weeks(self):
        dates = recurrence_service.expand_dates([MON, WED], MONDAY, MONDAY + timedelta(days=13))
        self.assertEqual(dates, [date(2026, 3, 2), date(2026, 3, 4), date(2026, 3, 9), date(2026, 3, 11)])

    def test_sunday_is_day_zero(self):
        dates = recurrence_service.expand_dates([0, 6], MONDAY, MONDAY + timedelta(days=13))
        self.assertEqual(dates, [date(2026, 3, 7), date(2026, 3, 8), date(2026, 3, 14), date(2026, 3, 15)])

    def test_create_schedule_generates_one_instance_per_matching_date(self):
        pattern, sessions = self.create_schedule(self.team)

        self.assertEqual(len(sessions), 4)
        stored = TrainingSession._default_manager.filter(team=self.team)
        self.assertEqual(stored.count(), 4)
        self.assertEqual(set(stored.values_list('recurrence_id', flat=True)), {pattern.pk})
        for session in stored:
            self.assertIn(session.session_date.isoweekday() % 7, (MON, WED))
            self.assertGreaterEqual(session.session_date, pattern.generated_from)
            self.assertLessEqual(session.session_date, pattern.generate_until)
            self.assertEqual(session.kind, SessionKind.PATTERN_INSTANCE)
            self.assertEqual(session.start_time, time(18, 0))
            self.assertEqual(session.duration_minutes, 90)
            self.assertEqual(session.location, 'Main Field')

    def test_generation_start_defaults_to_today(self):
        pattern, sessions = recurrence_service.create_recurring_schedule(
            team=self.team,
            days_of_week=[WED],
            start_time=time(17, 0),
            duration_minutes=60,
            generate_until=MONDAY + timedelta(days=6),
            clock=FixedClock(MONDAY),
        )
        self.assertEqual(pattern.generated_from, MONDAY)
        self.assertEqual([session.session_date for session in sessions], [date(2026, 3, 4)])

    def test_rejects_invalid_schedules(self):
        cases = [
            dict(days_of_week=[], start_time=time(18, 0), duration_minutes=60),
            dict(days_of_week=[7], start_time=time(18, 0), duration_minutes=60),
            dict(days_of_week=[MON], start_time=time(18, 0), duration_minutes=0),
            dict(days_of_week=[MON], start_time=time(23, 0), duration_minutes=90),
        ]
        for case in cases:
            with self.subTest(case=case):
                with self.assertRaises(ValidationError):
                    recurrence_service.create_recurring_schedule(
                        team=self.team,
                        generate_from=MONDAY,
                        generate_until=MONDAY + timedelta(days=13),
                        **case
                    )
        self.assertFalse(RecurrencePattern._default_manager.exists())

    def test_rejects_horizon_before_start(self):
        with self.assertRaises(ValidationError) as context:
            recurrence_service.create_recurring_schedule(
                team=self.team,
                days_of_week=[MON],
                start_time=time(18, 0),
                duration_minutes=60,
                generate_from=MONDAY,
                generate_until=MONDAY - timedelta(days=1),
            )
        self.assertIn('generate_until', context.exception.detail)

    @override_settings(TRAINING_MAX_GENERATION_DAYS=30)
    def test_rejects_horizon_beyond_generation_limit(self):
        with self.assertRaises(ValidationError):
            self.create_schedule(self.team, until=MONDAY + timedelta(days=31))
        pattern, sessions = self.create_schedule(self.team, until=MONDAY + timedelta(days=30))
        self.assertEqual(len(sessions), 10)

    def test_failed_date_rolls_back_whole_expansion(self):
        clashing = [date(2026, 3, 2), date(2026, 3, 2), date(2026, 3, 4)]
        with patch.object(recurrence_service, 'expand_dates', return_value=clashing):
            with self.assertRaises(ExpansionFailedError) as context:
                self.create_schedule(self.team)

        self.assertEqual(context.exception.failed_dates, [date(2026, 3, 2)])
        self.assertEqual(context.exception.succeeded_dates, [date(2026, 3, 2), date(2026, 3, 4)])
        self.assertEqual(context.exception.status_code, 409)
        self.assertFalse(RecurrencePattern._default_manager.exists())
        self.assertFalse(TrainingSession._default_manager.exists())

    def test_extend_appends_missing_dates(self):
        pattern, _ = self.create_schedule(self.team)

        pattern, sessions = recurrence_service.extend_pattern(
            pattern.pk, MONDAY + timedelta(days=27), clock=FixedClock(MONDAY)
        )

        self.assertEqual(
            [session.session_date for session in sessions],
            [date(2026, 3, 16), date(2026, 3, 18), date(2026, 3, 23), date(2026, 3, 25)]
        )
        self.assertEqual(pattern.generate_until, MONDAY + timedelta(days=27))
        self.assertEqual(pattern.sessions.count(), 8)

    def test_extend_skips_dates_that_already_exist(self):
        pattern, _ = self.create_schedule(self.team)
        self.create_session(self.team, date(2026, 3, 16), recurrence=pattern)

        _, sessions = recurrence_service.extend_pattern(
            pattern.pk, date(2026, 3, 22), clock=FixedClock(MONDAY)
        )

        self.assertEqual([session.session_date for session in sessions], [date(2026, 3, 18)])
        self.assertEqual(pattern.sessions.filter(session_date=date(2026, 3, 16)).count(), 1)

    def test_extend_does_not_refill_date_vacated_by_moved_instance(self):
        pattern, sessions = self.create_schedule(self.team)
        override_service.update_session(sessions[0].pk, {'session_date': date(2026, 3, 3)})

        _, created = recurrence_service.extend_pattern(
            pattern.pk, MONDAY + timedelta(days=27), clock=FixedClock(MONDAY)
        )

        self.assertFalse(pattern.sessions.filter(session_date=MONDAY).exists())
        self.assertTrue(all(session.session_date > date(2026, 3, 15) for session in created))
        self.assertEqual(pattern.sessions.count(), 8)

    def test_extend_requires_later_horizon(self):
        pattern, _ = self.create_schedule(self.team)
        with self.assertRaises(ValidationError):
            recurrence_service.extend_pattern(pattern.pk, pattern.generate_until, clock=FixedClock(MONDAY))

    def test_extend_rejects_inactive_pattern(self):
        pattern, _ = self.create_schedule(self.team)
        pattern.is_active = False
        pattern.save()
        with self.assertRaises(InactivePatternError):
            recurrence_service.extend_pattern(pattern.pk, date(2026, 4, 30), clock=FixedClock(MONDAY))


class SessionInvariantTestCase(TrainingFixtureMixin, TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.team = self.create_team()

    def test_standalone_session_cannot_be_override(self):
        with self.assertRaises(ModelValidationError):
            self.create_session(self.team, MONDAY, is_override=True)

    def test_database_rejects_override_without_recurrence(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TrainingSession._default_manager.bulk_create([
                    TrainingSession(
                        team=self.team,
                        session_date=MONDAY,
                        start_time=time(18, 0),
                        duration_minutes=60,
                        is_override=True,
                    )
                ])

    def test_pattern_instance_must_share_team(self):
        pattern, _ = self.create_schedule(self.team)
        other_team = self.create_team(name='U14 Hawks')
        with self.assertRaises(ModelValidationError):
            self.create_session(other_team, date(2026, 3, 20), recurrence=pattern)

    def test_end_time(self):
        session = self.create_session(self.team, MONDAY, start_time=time(18, 0), duration_minutes=90)
        self.assertEqual(session.end_time, time(19, 30))


class OverrideResolverTestCase(TrainingFixtureMixin, TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.team = self.create_team()
        self.pattern, sessions = self.create_schedule(self.team)
        self.sessions = sorted(sessions, key=lambda session: session.session_date)

    def test_single_edit_only_touches_target(self):
        target = self.sessions[1]

        updated = override_service.update_session(target.pk, {'start_time': time(19, 0), 'location': 'Gym'})

        self.assertTrue(updated.is_override)
        self.assertEqual(updated.kind, SessionKind.OVERRIDDEN_INSTANCE)
        self.assertEqual(updated.recurrence_id, self.pattern.pk)
        for sibling in TrainingSession._default_manager.exclude(pk=target.pk):
            self.assertFalse(sibling.is_override)
            self.assertEqual(sibling.start_time, time(18, 0))
            self.assertEqual(sibling.location, 'Main Field')
        self.pattern.refresh_from_db()
        self.assertEqual(self.pattern.start_time, time(18, 0))
        self.assertTrue(self.pattern.is_active)

    def test_pattern_instance_cannot_change_team(self):
        other_team = self.create_team(name='U14 Hawks')
        with self.assertRaises(TeamChangeNotAllowedError):
            override_service.update_session(self.sessions[0].pk, {'team': other_team})

    def test_standalone_edit_is_not_an_override(self):
        session = self.create_session(self.team, date(2026, 3, 6))
        other_team = self.create_team(name='U14 Hawks')

        updated = override_service.update_session(session.pk, {'team': other_team, 'duration_minutes': 60})

        self.assertFalse(updated.is_override)
        self.assertEqual(updated.kind, SessionKind.STANDALONE)
        self.assertEqual(updated.team_id, other_team.pk)

    def test_moving_instance_onto_sibling_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            override_service.update_session(self.sessions[0].pk, {'session_date': self.sessions[1].session_date})

    def test_cancelled_session_cannot_be_edited(self):
        override_service.cancel_session(self.sessions[0].pk)
        with self.assertRaises(SessionCancelledError):
            override_service.update_session(self.sessions[0].pk, {'location': 'Gym'})

    def test_single_delete_cancels_only_target(self):
        clock = FixedClock(MONDAY)
        result = override_service.cancel_session(self.sessions[2].pk, reason='Pitch closed', clock=clock)

        self.assertEqual(result, {'cancelled_count': 1, 'pattern_deactivated': False})
        cancelled = TrainingSession._default_manager.get(pk=self.sessions[2].pk)
        self.assertTrue(cancelled.is_cancelled)
        self.assertEqual(cancelled.cancellation_reason, 'Pitch closed')
        self.assertEqual(cancelled.cancelled_at, clock.now())
        self.assertEqual(TrainingSession._default_manager.filter(is_cancelled=True).count(), 1)
        self.pattern.refresh_from_db()
        self.assertTrue(self.pattern.is_active)

    def test_cancelling_twice_is_rejected(self):
        override_service.cancel_session(self.sessions[0].pk)
        with self.assertRaises(SessionAlreadyCancelledError):
            override_service.cancel_session(self.sessions[0].pk)

    def test_all_future_cancels_from_target_date(self):
        result = override_service.cancel_session(
            self.sessions[2].pk, delete_mode=override_service.DELETE_ALL_FUTURE, clock=FixedClock(MONDAY)
        )

        self.assertEqual(result, {'cancelled_count': 2, 'pattern_deactivated': True})
        for session in self.sessions[:2]:
            session.refresh_from_db()
            self.assertFalse(session.is_cancelled)
        for session in self.sessions[2:]:
            session.refresh_from_db()
            self.assertTrue(session.is_cancelled)
        self.pattern.refresh_from_db()
        self.assertFalse(self.pattern.is_active)
        self.assertIsNotNone(self.pattern.deactivated_at)

    def test_all_future_with_explicit_cutoff(self):
        result = override_service.cancel_session(
            self.sessions[3].pk,
            delete_mode=override_service.DELETE_ALL_FUTURE,
            cutoff_date=self.sessions[1].session_date,
        )
        self.assertEqual(result['cancelled_count'], 3)
        self.assertEqual(
            list(
                TrainingSession._default_manager.filter(is_cancelled=True)
                .order_by('session_date').values_list('pk', flat=True)
            ),
            [session.pk for session in self.sessions[1:]]
        )

    def test_all_future_cutoff_after_target_is_rejected(self):
        with self.assertRaises(ValidationError) as context:
            override_service.cancel_session(
                self.sessions[0].pk,
                delete_mode=override_service.DELETE_ALL_FUTURE,
                cutoff_date=self.sessions[3].session_date,
            )
        self.assertIn('cutoff_date', context.exception.detail)
        self.assertFalse(TrainingSession._default_manager.filter(is_cancelled=True).exists())
        self.pattern.refresh_from_db()
        self.assertTrue(self.pattern.is_active)

    def test_all_future_locks_pattern_before_sessions(self):
        with patch.object(
            override_service.session_store, 'get_session', wraps=override_service.session_store.get_session
        ) as get_session, patch.object(
            override_service.session_store, 'get_pattern', wraps=override_service.session_store.get_pattern
        ) as get_pattern:
            override_service.cancel_session(self.sessions[2].pk, delete_mode=override_service.DELETE_ALL_FUTURE)

        self.assertFalse(any(call.kwargs.get('lock') for call in get_session.call_args_list))
        get_pattern.assert_called_once_with(self.pattern.pk, lock=True)

    def test_edit_without_changes_keeps_instance_unchanged(self):
        target = self.sessions[0]

        override_service.update_session(target.pk, {})
        updated = override_service.update_session(
            target.pk, {'start_time': target.start_time, 'location': target.location}
        )

        self.assertFalse(updated.is_override)
        self.assertEqual(updated.kind, SessionKind.PATTERN_INSTANCE)
        target.refresh_from_db()
        self.assertFalse(target.is_override)

    def test_all_future_on_standalone_behaves_like_single(self):
        session = self.create_session(self.team, date(2026, 3, 6))
        result = override_service.cancel_session(session.pk, delete_mode=override_service.DELETE_ALL_FUTURE)
        self.assertEqual(result, {'cancelled_count': 1, 'pattern_deactivated': False})
        self.pattern.refresh_from_db()
        self.assertTrue(self.pattern.is_active)

    def test_notes_edit_does_not_create_override(self):
        session = override_service.update_session_notes(self.sessions[0].pk, 'Bring cones')
        self.assertEqual(session.notes, 'Bring cones')
        self.assertFalse(session.is_override)


class AttendanceLedgerTestCase(TrainingFixtureMixin, TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.team = self.create_team()
        self.alice = self.create_player(self.team, 'Alice', 'Adams', 7)
        self.ben = self.create_player(self.team, 'Ben', 'Brown', 9)
        self.cara = self.create_player(self.team, 'Cara', 'Clark')
        self.session = self.create_session(self.team, MONDAY)

    def save(self, *entries, **kwargs):
        return attendance_service.save_attendance(self.session.pk, list(entries), **kwargs)

    def test_unsaved_players_are_unmarked(self):
        ledger = attendance_service.get_session_attendance(self.session)
        self.assertEqual([row['first_name'] for row in ledger['attendance']], ['Alice', 'Ben', 'Cara'])
        self.assertTrue(all(row['status'] == AttendanceStatus.UNMARKED for row in ledger['attendance']))
        self.assertIsNone(ledger['last_saved_at'])

    def test_arrival_time_kept_only_when_late(self):
        result = self.save(
            {'player_id': self.alice.pk, 'status': AttendanceStatus.LATE, 'arrival_time': time(18, 10)},
            {'player_id': self.ben.pk, 'status': AttendanceStatus.ABSENT, 'arrival_time': time(18, 5)},
        )

        self.assertEqual(result['records_saved'], 2)
        self.assertEqual(Attendance._default_manager.get(player=self.alice).arrival_time, time(18, 10))
        self.assertIsNone(Attendance._default_manager.get(player=self.ben).arrival_time)

    def test_leaving_late_clears_arrival_time(self):
        self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.LATE, 'arrival_time': time(18, 10)})
        self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT, 'arrival_time': time(18, 10)})

        record = Attendance._default_manager.get(player=self.alice)
        self.assertEqual(record.status, AttendanceStatus.PRESENT)
        self.assertIsNone(record.arrival_time)
        self.assertEqual(Attendance._default_manager.count(), 1)

    def test_unmarked_removes_record(self):
        self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT})
        result = self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.UNMARKED})

        self.assertEqual(result['records_cleared'], 1)
        self.assertFalse(Attendance._default_manager.exists())

    def test_rejects_player_not_on_roster(self):
        other_team = self.create_team(name='U14 Hawks')
        outsider = self.create_player(other_team, 'Omar')
        with self.assertRaises(PlayerNotOnRosterError):
            self.save({'player_id': outsider.pk, 'status': AttendanceStatus.PRESENT})
        self.assertFalse(Attendance._default_manager.exists())

    def test_removed_player_disappears_from_roster(self):
        self.save({'player_id': self.cara.pk, 'status': AttendanceStatus.PRESENT})
        TeamPlayer._default_manager.filter(player=self.cara).update(is_active=False)

        ledger = attendance_service.get_session_attendance(self.session)
        self.assertNotIn(self.cara.pk, [row['player_id'] for row in ledger['attendance']])
        with self.assertRaises(PlayerNotOnRosterError):
            self.save({'player_id': self.cara.pk, 'status': AttendanceStatus.ABSENT})

    def test_rejects_duplicate_players(self):
        with self.assertRaises(ValidationError):
            self.save(
                {'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT},
                {'player_id': self.alice.pk, 'status': AttendanceStatus.ABSENT},
            )

    def test_rejects_cancelled_session(self):
        override_service.cancel_session(self.session.pk)
        with self.assertRaises(SessionCancelledError):
            self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT})

    def test_stale_save_flags_overwrite(self):
        first = self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT})
        self.assertFalse(first['overwrote_newer'])

        stale = first['last_saved_at'] - timedelta(minutes=5)
        second = self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.ABSENT}, client_last_saved_at=stale)

        self.assertTrue(second['overwrote_newer'])
        self.assertEqual(Attendance._default_manager.get(player=self.alice).status, AttendanceStatus.ABSENT)

    def test_fresh_save_does_not_flag_overwrite(self):
        first = self.save({'player_id': self.alice.pk, 'status': AttendanceStatus.PRESENT})
        second = self.save(
            {'player_id': self.ben.pk, 'status': AttendanceStatus.PRESENT},
            client_last_saved_at=first['last_saved_at'],
        )
        self.assertFalse(second['overwrote_newer'])


class AttendanceStatisticsTestCase(TrainingFixtureMixin, TestCase):
    def setUp(self):
        self.club = Club._default_manager.create(name='Riverside FC')
        self.team = self.create_team()

    def record(self, session, player, status):
        return Attendance._default_manager.create(session=session, player=player, status=status)

    def test_percentage_rounding(self):
        self.assertIsNone(statistics_service.attendance_percentage(0, 0))
        self.assertEqual(statistics_service.attendance_percentage(13, 15), 87)
        self.assertEqual(statistics_service.attendance_percentage(1, 8), 13)
        self.assertEqual(statistics_service.attendance_percentage(3, 3), 100)

    def test_team_of_fifteen(self):
        session = self.create_session(self.team, MONDAY)
        statuses = [AttendanceStatus.PRESENT] * 12 + [AttendanceStatus.ABSENT] * 2 + [AttendanceStatus.LATE]
        for index, status in enumerate(statuses):
            self.record(session, self.create_player(self.team, f'Player{index:02d}'), status)

        stats = statistics_service.compute_statistics([self.team])

        team_row = stats['teams'][0]
        self.assertEqual(team_row['total_records'], 15)
        self.assertEqual(team_row['attended'], 13)
        self.assertEqual(team_row['attendance_percentage'], 87)
        self.assertEqual(stats['overall']['total_sessions'], 1)
        self.assertEqual(stats['overall']['perfect_attendance_count'], 13)
        self.assertEqual(stats['overall']['low_attendance_count'], 2)
        self.assertEqual(stats['overall']['average_attendance'], 87)

    def test_player_rows(self):
        sessions = [self.create_session(self.team, MONDAY + timedelta(days=offset)) for offset in (0, 2, 7)]
        alice = self.create_player(self.team, 'Alice', 'Adams')
        ben = self.create_player(self.team, 'Ben', 'Brown')
        newcomer = self.create_player(self.team, 'Nia', 'New')
        self.record(sessions[0], alice, AttendanceStatus.PRESENT)
        self.record(sessions[1], alice, AttendanceStatus.LATE)
        self.record(sessions[2], alice, AttendanceStatus.ABSENT)
        self.record(sessions[0], ben, AttendanceStatus.PRESENT)
        self.record(sessions[1], ben, AttendanceStatus.INJURED)

        rows = statistics_service.compute_statistics([self.team])['statistics']

        self.assertEqual([row['player_id'] for row in rows], [alice.pk, ben.pk, newcomer.pk])
        self.assertEqual(rows[0]['attendance_percentage'], 67)
        self.assertEqual(rows[0]['total_sessions'], 3)
        self.assertEqual(rows[0]['late'], 1)
        self.assertEqual(rows[1]['attendance_percentage'], 50)
        self.assertEqual(rows[1]['injured'], 1)
        self.assertIsNone(rows[2]['attendance_percentage'])
        self.assertEqual(rows[2]['total_sessions'], 0)

    def test_cancelled_sessions_and_range_are_respected(self):
        alice = self.create_player(self.team, 'Alice')
        kept = self.create_session(self.team, MONDAY)
        cancelled = self.create_session(self.team, MONDAY + timedelta(days=1))
        outside = self.create_session(self.team, MONDAY + timedelta(days=30))
        self.record(kept, alice, AttendanceStatus.PRESENT)
        self.record(cancelled, alice, AttendanceStatus.ABSENT)
        self.record(outside, alice, AttendanceStatus.ABSENT)
        override_service.cancel_session(cancelled.pk)

        stats = statistics_service.compute_statistics(
            [self.team], date_from=MONDAY, date_to=MONDAY + timedelta(days=7)
        )

        self.assertEqual(stats['overall']['total_sessions'], 1)
        self.assertEqual(stats['statistics'][0]['attendance_percentage'], 100)
        self.assertEqual(stats['overall']['perfect_attendance_count'], 1)

    def test_no_records_means_no_average(self):
        self.create_player(self.team, 'Alice')
        overall = statistics_service.compute_statistics([self.team])['overall']
        self.assertIsNone(overall['average_attendance'])
        self.assertEqual(overall['players_count'], 1)

    def test_player_summary_windows(self):
        today = date(2026, 6, 1)
        alice = self.create_player(self.team, 'Alice')
        for days_ago, status in ((10, AttendanceStatus.PRESENT), (60, AttendanceStatus.ABSENT), (200, AttendanceStatus.LATE)):
            session = self.create_session(self.team, today - timedelta(days=days_ago))
            self.record(session, alice, status)

        summary = statistics_service.player_summary(alice, clock=FixedClock(today))

        self.assertEqual(summary['statistics']['last_30_days']['total_sessions'], 1)
        self.assertEqual(summary['statistics']['last_30_days']['attendance_percentage'], 100)
        self.assertEqual(summary['statistics']['last_90_days']['total_sessions'], 2)
        self.assertEqual(summary['statistics']['last_90_days']['attendance_percentage'], 50)
        self.assertEqual(summary['statistics']['all_time']['total_sessions'], 3)
        self.assertEqual(summary['statistics']['all_time']['attendance_percentage'], 67)
        self.assertEqual(
            [row['session_date'] for row in summary['recent_attendance']],
            [today - timedelta(days=10), today - timedelta(days=60), today - timedelta(days=200)]
        )


def make_session(team, session_date, start_time=time(9, 0), duration=60, pk=None, is_cancelled=False):
    session = TrainingSession(
        team=team,
        session_date=session_date,
        start_time=start_time,
        duration_minutes=duration,
        is_cancelled=is_cancelled,
    )
    session.pk = pk
    return session


class CalendarLayoutTestCase(SimpleTestCase):
    def setUp(self):
        self.lions = Team(pk=1, name='Lions', age_group='U12')
        self.hawks = Team(pk=2, name='Hawks', age_group='U14')

    def test_day_block_position(self):
        offset, height = calendar_layout.block_position(time(9, 0), 60, calendar_layout.DAY_SCALE)
        self.assertEqual(offset, 12)
        self.assertEqual(height, 6)

    def test_week_block_position(self):
        offset, height = calendar_layout.block_position(time(18, 30), 90, calendar_layout.WEEK_SCALE)
        self.assertEqual(offset, 46)
        self.assertEqual(height, 6)

    def test_week_starts_on_sunday(self):
        self.assertEqual(calendar_layout.week_start(date(2026, 3, 4)), date(2026, 3, 1))
        self.assertEqual(calendar_layout.week_start(date(2026, 3, 1)), date(2026, 3, 1))
        self.assertEqual(calendar_layout.week_start(date(2026, 3, 7)), date(2026, 3, 1))

    def test_day_view_draws_overlaps_independently(self):
        sessions = [
            make_session(self.lions, MONDAY, time(9, 0), 60, pk=1),
            make_session(self.hawks, MONDAY, time(9, 0), 90, pk=2),
        ]
        result = calendar_layout.build_calendar('day', MONDAY, sessions, today=MONDAY)

        self.assertTrue(result['is_today'])
        self.assertEqual(result['hours'][0], 7)
        self.assertEqual(result['hours'][-1], 21)
        self.assertEqual([block['offset'] for block in result['blocks']], [12, 12])
        self.assertEqual([block['height'] for block in result['blocks']], [6, 9])
        self.assertEqual(result['blocks'][0]['start_label'], '09:00')
        self.assertEqual(result['blocks'][1]['end_label'], '10:30')
        self.assertEqual(result['blocks'][0]['kind'], SessionKind.STANDALONE)

    def test_week_view_columns(self):
        sessions = [make_session(self.lions, date(2026, 3, 4), pk=1)]
        result = calendar_layout.build_calendar('week', MONDAY, sessions, today=MONDAY)

        self.assertEqual(result['start_date'], date(2026, 3, 1))
        self.assertEqual(result['end_date'], date(2026, 3, 7))
        self.assertEqual([day['left_percent'] for day in result['days']][:2], [12.5, 25.0])
        self.assertEqual(result['days'][6]['left_percent'], 87.5)
        self.assertTrue(result['days'][1]['is_today'])
        self.assertEqual(len(result['days'][3]['blocks']), 1)
        self.assertEqual(result['days'][3]['blocks'][0]['offset'], 8)

    def test_month_grid_includes_adjacent_days(self):
        result = calendar_layout.build_calendar('month', date(2026, 4, 15), [], today=MONDAY)

        first_cell = result['weeks'][0][0]
        last_cell = result['weeks'][-1][-1]
        self.assertEqual(first_cell['date'], date(2026, 3, 29))
        self.assertFalse(first_cell['is_current_month'])
        self.assertEqual(last_cell['date'], date(2026, 5, 2))
        self.assertTrue(all(len(week) == 7 for week in result['weeks']))
        self.assertEqual(calendar_layout.visible_range('month', date(2026, 4, 15)), (date(2026, 3, 29), date(2026, 5, 2)))

    def test_month_cell_overflow(self):
        day = date(2026, 4, 8)
        sessions = [make_session(self.lions, day, time(8 + index, 0), pk=index + 1) for index in range(5)]
        result = calendar_layout.build_calendar('month', day, sessions, today=MONDAY)

        cell = next(cell for week in result['weeks'] for cell in week if cell['date'] == day)
        self.assertEqual(len(cell['sessions']), 3)
        self.assertEqual(cell['overflow'], 2)
        self.assertEqual(cell['sessions'][0]['start_label'], '08:00')

    def test_team_colors_follow_first_seen_order(self):
        teams = [Team(pk=pk, name=f'Team {pk}') for pk in range(10, 19)]
        sessions = [make_session(team, MONDAY, pk=index) for index, team in enumerate(reversed(teams))]

        colors = calendar_layout.team_colors(sessions)

        self.assertEqual(colors[18], 'blue')
        self.assertEqual(colors[17], 'green')
        self.assertEqual(colors[11], 'teal')
        self.assertEqual(colors[10], 'blue')

    def test_stable_colors_ignore_order(self):
        forward = calendar_layout.team_colors([make_session(self.lions, MONDAY), make_session(self.hawks, MONDAY)], stable=True)
        backward = calendar_layout.team_colors([make_session(self.hawks, MONDAY), make_session(self.lions, MONDAY)], stable=True)
        self.assertEqual(forward, backward)

    def test_cancelled_sessions_hidden_unless_requested(self):
        sessions = [
            make_session(self.lions, MONDAY, pk=1),
            make_session(self.lions, MONDAY, time(11, 0), pk=2, is_cancelled=True),
        ]
        hidden = calendar_layout.build_calendar('day', MONDAY, sessions, today=MONDAY)
        shown = calendar_layout.build_calendar('day', MONDAY, sessions, today=MONDAY, include_cancelled=True)

        self.assertEqual(len(hidden['blocks']), 1)
        self.assertEqual(len(shown['blocks']), 2)
        self.assertTrue(shown['blocks'][1]['is_cancelled'])


class ClockTestCase(SimpleTestCase):
    def test_fixed_clock_now_is_midnight_of_today(self):
        clock = FixedClock(MONDAY)
        self.assertEqual(clock.today(), MONDAY)
        self.assertEqual(timezone.localtime(clock.now()).date(), MONDAY)
