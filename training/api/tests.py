from datetime import date, time, timedelta
from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from club.models import Club, Team, Player, TeamPlayer, Coach, TeamCoach
from training.api.views import ClockMixin
from training.clock import FixedClock
from training.models import Attendance, AttendanceStatus, RecurrencePattern, TrainingSession
from user.models import User, UserRole, Role

MONDAY = date(2026, 3, 2)


class TrainingAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.club = Club._default_manager.create(name='Riverside FC')
        self.other_club = Club._default_manager.create(name='Hilltop United')
        self.team = Team._default_manager.create(club=self.club, name='Lions', age_group='U12')
        self.other_team = Team._default_manager.create(club=self.club, name='Hawks', age_group='U14')
        self.foreign_team = Team._default_manager.create(club=self.other_club, name='Eagles', age_group='U12')

        self.coach_user = self.create_user('coach@test.com', Role.COACH, self.club)
        coach = Coach._default_manager.create(user=self.coach_user, club=self.club, full_name='Casey Coach')
        TeamCoach._default_manager.create(team=self.team, coach=coach)

        self.club_admin = self.create_user('admin@test.com', Role.CLUB_ADMIN, self.club)
        self.super_admin = self.create_user('root@test.com', Role.SUPER_ADMIN)
        self.parent = self.create_user('parent@test.com', Role.PARENT, self.club)

        self.players = []
        for index, (first_name, last_name) in enumerate([('Alice', 'Adams'), ('Ben', 'Brown'), ('Cara', 'Clark')]):
            player = Player._default_manager.create(
                club=self.club, first_name=first_name, last_name=last_name, jersey_number=index + 1
            )
            TeamPlayer._default_manager.create(team=self.team, player=player)
            self.players.append(player)

        clock_patcher = patch.object(ClockMixin, 'clock', FixedClock(MONDAY))
        clock_patcher.start()
        self.addCleanup(clock_patcher.stop)

    def create_user(self, email, role, club=None):
        user = User._default_manager.create_user(email=email, password='testpass123')
        UserRole._default_manager.create(user=user, role=role, club=club)
        return user

    def authenticate(self, user):
        token = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(token.access_token)}')

    def create_session(self, team=None, session_date=MONDAY, **extra):
        return TrainingSession._default_manager.create(
            team=team or self.team,
            session_date=session_date,
            start_time=time(18, 0),
            duration_minutes=90,
            **extra
        )

    def create_schedule(self):
        self.authenticate(self.coach_user)
        response = self.client.post(reverse('training_api:recurring-list-create'), {
            'team_id': self.team.pk,
            'days_of_week': [1, 3],
            'start_time': '18:00',
            'duration_minutes': 90,
            'location': 'Main Field',
            'generate_from': '2026-03-02',
            'generate_until': '2026-03-15',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return RecurrencePattern._default_manager.get(pk=response.data['data']['pattern']['id'])


class TrainingPermissionTestCase(TrainingAPITestCase):

    def test_requires_authentication(self):
        response = self.client.get(reverse('training_api:session-list-create'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_parent_is_forbidden(self):
        self.authenticate(self.parent)
        response = self.client.get(reverse('training_api:session-list-create'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_coach_cannot_schedule_for_unassigned_team(self):
        self.authenticate(self.coach_user)
        response = self.client.post(reverse('training_api:session-list-create'), {
            'team_id': self.other_team.pk,
            'session_date': '2026-03-05',
            'start_time': '17:00',
            'duration_minutes': 60,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(TrainingSession._default_manager.exists())

    def test_coach_cannot_read_unassigned_session(self):
        session = self.create_session(team=self.other_team)
        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:session-detail', kwargs={'pk': session.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_club_admin_manages_every_team_of_their_club(self):
        session = self.create_session(team=self.other_team)
        self.authenticate(self.club_admin)
        response = self.client.get(reverse('training_api:session-detail', kwargs={'pk': session.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        foreign = self.create_session(team=self.foreign_team)
        response = self.client.get(reverse('training_api:session-detail', kwargs={'pk': foreign.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_admin_sees_all_teams(self):
        self.create_session(team=self.team)
        self.create_session(team=self.foreign_team)
        self.authenticate(self.super_admin)
        response = self.client.get(reverse('training_api:session-list-create'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['sessions']), 2)

    def test_inactive_assignment_revokes_access(self):
        TeamCoach._default_manager.update(is_active=False)
        session = self.create_session()
        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:session-detail', kwargs={'pk': session.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_coach_grant_in_other_club_does_not_cover_assignment(self):
        outsider = self.create_user('outsider@test.com', Role.COACH, self.other_club)
        coach = Coach._default_manager.create(user=outsider, club=self.club, full_name='Olly Outsider')
        TeamCoach._default_manager.create(team=self.team, coach=coach)
        session = self.create_session()
        self.authenticate(outsider)

        response = self.client.delete(
            reverse('training_api:session-detail', kwargs={'pk': session.pk}),
            {'delete_mode': 'single'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        session.refresh_from_db()
        self.assertFalse(session.is_cancelled)

        response = self.client.get(reverse('training_api:session-list-create'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['sessions'], [])


class TrainingSessionAPITestCase(TrainingAPITestCase):

    def test_create_standalone_session(self):
        self.authenticate(self.coach_user)
        response = self.client.post(reverse('training_api:session-list-create'), {
            'team_id': self.team.pk,
            'session_date': '2026-03-05',
            'start_time': '17:00',
            'duration_minutes': 60,
            'location': 'Gym',
            'focus_areas': ['passing', 'set pieces'],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        session = response.data['data']['session']
        self.assertEqual(session['kind'], 'standalone')
        self.assertIsNone(session['recurrence_id'])
        self.assertEqual(session['end_time'], '18:00:00')
        self.assertEqual(session['focus_areas'], ['passing', 'set pieces'])

    def test_create_session_crossing_midnight(self):
        self.authenticate(self.coach_user)
        response = self.client.post(reverse('training_api:session-list-create'), {
            'team_id': self.team.pk,
            'session_date': '2026-03-05',
            'start_time': '23:30',
            'duration_minutes': 60,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('duration_minutes', response.data)

    def test_create_session_unknown_team(self):
        self.authenticate(self.super_admin)
        response = self.client.post(reverse('training_api:session-list-create'), {
            'team_id': 9999,
            'session_date': '2026-03-05',
            'start_time': '17:00',
            'duration_minutes': 60,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('team_id', response.data)

    def test_list_filters(self):
        self.create_session(session_date=MONDAY)
        self.create_session(session_date=MONDAY + timedelta(days=20))
        self.create_session(session_date=MONDAY + timedelta(days=1), is_cancelled=True)
        self.authenticate(self.coach_user)
        url = reverse('training_api:session-list-create')

        response = self.client.get(url, {'upcoming': 'true'})
        self.assertEqual(len(response.data['data']['sessions']), 1)

        response = self.client.get(url, {'include_cancelled': 'true'})
        self.assertEqual(len(response.data['data']['sessions']), 3)

        response = self.client.get(url, {'date_from': '2026-03-10', 'date_to': '2026-03-31'})
        self.assertEqual(len(response.data['data']['sessions']), 1)

        response = self.client.get(url, {'date_from': 'not-a-date'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filtered_by_forbidden_team(self):
        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:session-list-create'), {'team_id': self.other_team.pk})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_patch_pattern_instance_becomes_override(self):
        pattern = self.create_schedule()
        sessions = list(pattern.sessions.order_by('session_date'))

        response = self.client.patch(
            reverse('training_api:session-detail', kwargs={'pk': sessions[1].pk}),
            {'start_time': '19:00', 'location': 'Indoor Hall'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['session']['kind'], 'overridden_instance')
        self.assertTrue(response.data['data']['session']['is_override'])
        sessions[0].refresh_from_db()
        self.assertFalse(sessions[0].is_override)
        self.assertEqual(sessions[0].location, 'Main Field')

    def test_put_cannot_move_instance_to_other_team(self):
        pattern = self.create_schedule()
        session = pattern.sessions.first()
        self.authenticate(self.club_admin)
        response = self.client.put(reverse('training_api:session-detail', kwargs={'pk': session.pk}), {
            'team_id': self.other_team.pk,
            'session_date': session.session_date.isoformat(),
            'start_time': '18:00',
            'duration_minutes': 90,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_single(self):
        session = self.create_session()
        self.authenticate(self.coach_user)
        url = reverse('training_api:session-detail', kwargs={'pk': session.pk})

        response = self.client.delete(url, {'delete_mode': 'single', 'reason': 'Rain'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['cancelled_count'], 1)
        session.refresh_from_db()
        self.assertTrue(session.is_cancelled)
        self.assertEqual(session.cancellation_reason, 'Rain')

        response = self.client.delete(url, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_all_future(self):
        pattern = self.create_schedule()
        sessions = list(pattern.sessions.order_by('session_date'))

        response = self.client.delete(
            reverse('training_api:session-detail', kwargs={'pk': sessions[2].pk}),
            {'delete_mode': 'all_future'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'cancelled_count': 2, 'pattern_deactivated': True})
        self.assertEqual(
            list(pattern.sessions.filter(is_cancelled=False).order_by('session_date').values_list('pk', flat=True)),
            [sessions[0].pk, sessions[1].pk]
        )
        pattern.refresh_from_db()
        self.assertFalse(pattern.is_active)

    def test_delete_rejects_unknown_mode(self):
        session = self.create_session()
        self.authenticate(self.coach_user)
        response = self.client.delete(
            reverse('training_api:session-detail', kwargs={'pk': session.pk}),
            {'delete_mode': 'everything'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_notes(self):
        pattern = self.create_schedule()
        session = pattern.sessions.first()
        response = self.client.patch(
            reverse('training_api:session-notes', kwargs={'pk': session.pk}),
            {'notes': 'Focus on first touch'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['session']['notes'], 'Focus on first touch')
        self.assertFalse(response.data['data']['session']['is_override'])

    def test_missing_session(self):
        self.authenticate(self.super_admin)
        response = self.client.get(reverse('training_api:session-detail', kwargs={'pk': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class RecurringScheduleAPITestCase(TrainingAPITestCase):

    def test_create_monday_wednesday_for_two_weeks(self):
        pattern = self.create_schedule()
        self.assertEqual(pattern.sessions.count(), 4)
        self.assertEqual(pattern.days_of_week, [1, 3])

    def test_create_returns_generated_count(self):
        self.authenticate(self.coach_user)
        response = self.client.post(reverse('training_api:recurring-list-create'), {
            'team_id': self.team.pk,
            'days_of_week': [6],
            'start_time': '10:00',
            'duration_minutes': 120,
            'generate_until': '2026-03-31',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['generated_count'], 4)
        self.assertEqual(response.data['data']['pattern']['generated_from'], '2026-03-02')
        self.assertEqual(response.data['data']['pattern']['days_display'], ['Saturday'])

    def test_create_rejects_bad_input(self):
        self.authenticate(self.coach_user)
        url = reverse('training_api:recurring-list-create')
        base = {
            'team_id': self.team.pk,
            'days_of_week': [1],
            'start_time': '18:00',
            'duration_minutes': 60,
            'generate_from': '2026-03-02',
            'generate_until': '2026-03-31',
        }
        for field, value in [
            ('days_of_week', []),
            ('days_of_week', [7]),
            ('days_of_week', [1, 1]),
            ('duration_minutes', 0),
            ('start_time', '23:30'),
            ('generate_until', '2026-03-01'),
            ('generate_until', '2028-03-01'),
        ]:
            with self.subTest(field=field, value=value):
                response = self.client.post(url, {**base, field: value}, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(RecurrencePattern._default_manager.exists())

    def test_list_and_retrieve(self):
        pattern = self.create_schedule()
        response = self.client.get(reverse('training_api:recurring-list-create'), {'active': 'true'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['data']['patterns']], [pattern.pk])

        response = self.client.get(reverse('training_api:recurring-list-create'), {'active': 'false'})
        self.assertEqual(response.data['data']['patterns'], [])

        response = self.client.get(reverse('training_api:recurring-detail', kwargs={'pk': pattern.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['pattern']['sessions_count'], 4)

    def test_extend(self):
        pattern = self.create_schedule()
        url = reverse('training_api:recurring-extend', kwargs={'pk': pattern.pk})

        response = self.client.post(url, {'generate_until': '2026-03-29'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['generated_count'], 4)
        self.assertEqual(pattern.sessions.count(), 8)

        response = self.client.post(url, {'generate_until': '2026-03-20'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_extend_inactive_pattern(self):
        pattern = self.create_schedule()
        RecurrencePattern._default_manager.filter(pk=pattern.pk).update(is_active=False)
        response = self.client.post(
            reverse('training_api:recurring-extend', kwargs={'pk': pattern.pk}),
            {'generate_until': '2026-04-30'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AttendanceAPITestCase(TrainingAPITestCase):

    def setUp(self):
        super().setUp()
        self.session = self.create_session()
        self.url = reverse('training_api:session-attendance', kwargs={'pk': self.session.pk})
        self.authenticate(self.coach_user)

    def test_get_roster_defaults_to_unmarked(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data['data']['attendance']
        self.assertEqual([row['first_name'] for row in rows], ['Alice', 'Ben', 'Cara'])
        self.assertTrue(all(row['status'] == 'unmarked' for row in rows))
        self.assertIsNone(response.data['data']['last_saved_at'])
        self.assertEqual(response.data['data']['session']['id'], self.session.pk)

    def test_save_and_read_back(self):
        alice, ben, cara = self.players
        response = self.client.post(self.url, {'attendance': [
            {'player_id': alice.pk, 'status': 'present'},
            {'player_id': ben.pk, 'status': 'late', 'arrival_time': '18:15'},
            {'player_id': cara.pk, 'status': 'excused', 'arrival_time': '18:15', 'notes': 'School trip'},
        ]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['records_saved'], 3)
        self.assertFalse(response.data['data']['overwrote_newer'])

        rows = {row['player_id']: row for row in self.client.get(self.url).data['data']['attendance']}
        self.assertEqual(rows[ben.pk]['arrival_time'], '18:15:00')
        self.assertIsNone(rows[cara.pk]['arrival_time'])
        self.assertEqual(rows[cara.pk]['notes'], 'School trip')

    def test_unmarked_clears_record(self):
        alice = self.players[0]
        Attendance._default_manager.create(session=self.session, player=alice, status=AttendanceStatus.ABSENT)
        response = self.client.post(self.url, {'attendance': [
            {'player_id': alice.pk, 'status': 'unmarked'},
        ]}, format='json')
        self.assertEqual(response.data['data']['records_cleared'], 1)
        self.assertFalse(Attendance._default_manager.exists())

    def test_rejects_unknown_status_and_duplicates(self):
        alice = self.players[0]
        response = self.client.post(self.url, {'attendance': [
            {'player_id': alice.pk, 'status': 'asleep'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(self.url, {'attendance': [
            {'player_id': alice.pk, 'status': 'present'},
            {'player_id': alice.pk, 'status': 'absent'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rejects_player_off_roster(self):
        outsider = Player._default_manager.create(club=self.club, first_name='Omar', last_name='Out')
        response = self.client.post(self.url, {'attendance': [
            {'player_id': outsider.pk, 'status': 'present'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['player_ids'], [str(outsider.pk)])

    def test_rejects_cancelled_session(self):
        TrainingSession._default_manager.filter(pk=self.session.pk).update(is_cancelled=True)
        response = self.client.post(self.url, {'attendance': [
            {'player_id': self.players[0].pk, 'status': 'present'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stale_last_saved_at_is_flagged(self):
        alice = self.players[0]
        first = self.client.post(self.url, {'attendance': [
            {'player_id': alice.pk, 'status': 'present'},
        ]}, format='json')
        saved_at = first.data['data']['last_saved_at']

        response = self.client.post(self.url, {
            'attendance': [{'player_id': alice.pk, 'status': 'absent'}],
            'last_saved_at': (saved_at - timedelta(minutes=1)).isoformat(),
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['overwrote_newer'])


class StatisticsAPITestCase(TrainingAPITestCase):

    def test_statistics_for_visible_teams(self):
        session = self.create_session()
        hidden = self.create_session(team=self.other_team)
        alice, ben, cara = self.players
        Attendance._default_manager.create(session=session, player=alice, status=AttendanceStatus.PRESENT)
        Attendance._default_manager.create(session=session, player=ben, status=AttendanceStatus.ABSENT)
        outsider = Player._default_manager.create(club=self.club, first_name='Omar', last_name='Out')
        TeamPlayer._default_manager.create(team=self.other_team, player=outsider)
        Attendance._default_manager.create(session=hidden, player=outsider, status=AttendanceStatus.PRESENT)

        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:attendance-statistics'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual([team['team_id'] for team in data['teams']], [self.team.pk])
        self.assertEqual(data['teams'][0]['attendance_percentage'], 50)
        self.assertEqual([row['player_id'] for row in data['statistics']], [alice.pk, ben.pk, cara.pk])
        self.assertIsNone(data['statistics'][2]['attendance_percentage'])
        self.assertEqual(data['overall']['average_attendance'], 50)
        self.assertEqual(data['overall']['low_attendance_threshold'], 60)

    def test_statistics_date_range_validation(self):
        self.authenticate(self.coach_user)
        response = self.client.get(
            reverse('training_api:attendance-statistics'),
            {'date_from': '2026-03-10', 'date_to': '2026-03-01'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_player_summary(self):
        alice = self.players[0]
        session = self.create_session(session_date=MONDAY - timedelta(days=3))
        Attendance._default_manager.create(session=session, player=alice, status=AttendanceStatus.LATE)

        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:player-attendance', kwargs={'pk': alice.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['statistics']['last_30_days']['attendance_percentage'], 100)
        self.assertEqual(data['recent_attendance'][0]['status'], 'late')

    def test_player_summary_forbidden_for_other_team(self):
        outsider = Player._default_manager.create(club=self.other_club, first_name='Omar', last_name='Out')
        TeamPlayer._default_manager.create(team=self.foreign_team, player=outsider)
        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:player-attendance', kwargs={'pk': outsider.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(reverse('training_api:player-attendance', kwargs={'pk': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class CalendarAPITestCase(TrainingAPITestCase):

    def test_week_view(self):
        self.create_session(session_date=date(2026, 3, 4))
        self.create_session(session_date=date(2026, 3, 9))
        self.authenticate(self.coach_user)

        response = self.client.get(reverse('training_api:calendar'), {'view': 'week'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['start_date'], date(2026, 3, 1))
        self.assertTrue(data['days'][1]['is_today'])
        self.assertEqual(sum(len(day['blocks']) for day in data['days']), 1)
        block = data['days'][3]['blocks'][0]
        self.assertEqual(block['offset'], 44)
        self.assertEqual(block['height'], 6)
        self.assertEqual(block['color'], 'blue')

    def test_month_view_with_cancelled(self):
        self.create_session(session_date=date(2026, 3, 4), is_cancelled=True)
        self.authenticate(self.coach_user)
        url = reverse('training_api:calendar')

        response = self.client.get(url, {'view': 'month', 'date': '2026-03-15'})
        cells = [cell for week in response.data['data']['weeks'] for cell in week]
        self.assertEqual(sum(len(cell['sessions']) for cell in cells), 0)

        response = self.client.get(url, {'view': 'month', 'date': '2026-03-15', 'include_cancelled': 'true'})
        cells = [cell for week in response.data['data']['weeks'] for cell in week]
        self.assertEqual(sum(len(cell['sessions']) for cell in cells), 1)

    def test_rejects_unknown_view(self):
        self.authenticate(self.coach_user)
        response = self.client.get(reverse('training_api:calendar'), {'view': 'year'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
