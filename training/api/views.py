from datetime import timedelta

from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status, generics
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from club.models import Player
from training import (
    attendance_service,
    calendar_layout,
    override_service,
    recurrence_service,
    session_store,
    statistics_service,
)
from training.api.exceptions import PlayerNotFoundError
from training.api.permissions import CanManageTraining, visible_teams
from training.api.serializers import (
    TrainingSessionSerializer,
    TrainingSessionWriteSerializer,
    RecurrencePatternSerializer,
    RecurringScheduleSerializer,
    ExtendPatternSerializer,
    SessionDeleteSerializer,
    SessionNotesSerializer,
    AttendanceRowSerializer,
    AttendanceSaveSerializer,
)
from training.api.utils import parse_query_date, parse_query_int, parse_query_bool, parse_date_range
from training.clock import default_clock
from training.models import RecurrencePattern
from user.api.utils import success_response

TEAM_ID_PARAM = openapi.Parameter('team_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, description='Filter by team')
DATE_FROM_PARAM = openapi.Parameter('date_from', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE)
DATE_TO_PARAM = openapi.Parameter('date_to', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE)
INCLUDE_CANCELLED_PARAM = openapi.Parameter(
    'include_cancelled', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, description='Include cancelled sessions'
)


class ClockMixin:
    clock = default_clock


class TrainingViewMixin(ClockMixin):
    permission_classes = [CanManageTraining]

    def get_visible_teams(self, team_id=None):
        teams = visible_teams(self.request.user)  # type: ignore
        if team_id is not None:
            team = session_store.get_team(team_id)
            self.check_object_permissions(self.request, team)  # type: ignore
            teams = teams.filter(pk=team.pk)
        return teams


class TrainingSessionListCreateView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = TrainingSessionSerializer

    @swagger_auto_schema(
        operation_description="List training sessions of the teams the user manages. "
                              "`upcoming=true` limits the list to the next few days.",
        operation_summary="List Training Sessions",
        manual_parameters=[
            TEAM_ID_PARAM, DATE_FROM_PARAM, DATE_TO_PARAM, INCLUDE_CANCELLED_PARAM,
            openapi.Parameter('upcoming', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
        ],
        responses={
            200: openapi.Response('Sessions loaded', TrainingSessionSerializer(many=True)),
            403: openapi.Response('Permission denied'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def get(self, request, *args, **kwargs):
        teams = self.get_visible_teams(parse_query_int(request, 'team_id'))
        date_from, date_to = parse_date_range(request)
        if parse_query_bool(request, 'upcoming'):
            today = self.clock.today()
            date_from = today
            date_to = today + timedelta(days=settings.TRAINING_UPCOMING_WINDOW_DAYS)

        sessions = session_store.sessions_for_teams(
            teams,
            date_from=date_from,
            date_to=date_to,
            include_cancelled=parse_query_bool(request, 'include_cancelled'),
        )
        serializer = TrainingSessionSerializer(sessions, many=True)
        return success_response(
            data={'sessions': serializer.data},
            message='Sessions loaded.'
        )

    @swagger_auto_schema(
        operation_description="Create a one-off training session for a team.",
        operation_summary="Create Training Session",
        request_body=TrainingSessionWriteSerializer,
        responses={
            201: openapi.Response('Session created', TrainingSessionSerializer),
            400: openapi.Response('Validation errors'),
            403: openapi.Response('Permission denied'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def post(self, request, *args, **kwargs):
        serializer = TrainingSessionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        team = data.pop('team')
        self.check_object_permissions(request, team)

        session = session_store.create_standalone_session(team, **data)
        return success_response(
            data={'session': TrainingSessionSerializer(session).data},
            message='Training session created.',
            status_code=status.HTTP_201_CREATED
        )


class TrainingSessionDetailView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = TrainingSessionSerializer

    def get_queryset(self):
        return session_store.session_queryset()

    @swagger_auto_schema(
        operation_summary="Get Training Session",
        responses={
            200: openapi.Response('Session loaded', TrainingSessionSerializer),
            404: openapi.Response('Session not found'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def get(self, request, *args, **kwargs):
        session = self.get_object()
        return success_response(
            data={'session': TrainingSessionSerializer(session).data},
            message='Session loaded.'
        )

    def _update(self, request, partial):
        session = self.get_object()
        serializer = TrainingSessionWriteSerializer(session, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        if 'team' in changes:
            self.check_object_permissions(request, changes['team'])

        session = override_service.update_session(session.pk, changes)
        return success_response(
            data={'session': TrainingSessionSerializer(session).data},
            message='Training session updated.'
        )

    @swagger_auto_schema(
        operation_description="Replace the details of one session. A session that belongs to a "
                              "recurring schedule becomes an override; its siblings are untouched.",
        operation_summary="Update Training Session",
        request_body=TrainingSessionWriteSerializer,
        responses={
            200: openapi.Response('Session updated', TrainingSessionSerializer),
            400: openapi.Response('Validation errors or cancelled session'),
            404: openapi.Response('Session not found'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def put(self, request, *args, **kwargs):
        return self._update(request, partial=False)

    @swagger_auto_schema(
        operation_description="Change some details of one session. A session that belongs to a "
                              "recurring schedule becomes an override; its siblings are untouched.",
        operation_summary="Partially Update Training Session",
        request_body=TrainingSessionWriteSerializer,
        responses={
            200: openapi.Response('Session updated', TrainingSessionSerializer),
            400: openapi.Response('Validation errors or cancelled session'),
            404: openapi.Response('Session not found'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def patch(self, request, *args, **kwargs):
        return self._update(request, partial=True)

    @swagger_auto_schema(
        operation_description="Cancel a session. `all_future` also deactivates its recurring schedule "
                              "and cancels every instance on or after the cutoff date (defaults to the "
                              "session's own date). Past sessions are kept.",
        operation_summary="Cancel Training Session",
        request_body=SessionDeleteSerializer,
        responses={
            200: openapi.Response('Session(s) cancelled'),
            400: openapi.Response('Already cancelled'),
            404: openapi.Response('Session not found'),
        },
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def delete(self, request, *args, **kwargs):
        session = self.get_object()
        serializer = SessionDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = override_service.cancel_session(
            session.pk,
            delete_mode=data['delete_mode'],
            reason=data['reason'],
            cutoff_date=data.get('cutoff_date'),
            clock=self.clock,
        )
        return success_response(
            data=result,
            message=f"{result['cancelled_count']} session(s) cancelled."
        )


class SessionNotesView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = SessionNotesSerializer

    def get_queryset(self):
        return session_store.session_queryset()

    @swagger_auto_schema(
        operation_description="Edit the session notes. Does not turn a recurring instance into an override.",
        operation_summary="Update Session Notes",
        request_body=SessionNotesSerializer,
        responses={200: openapi.Response('Notes updated', TrainingSessionSerializer)},
        security=[{'Bearer': []}],
        tags=['Training Sessions']
    )
    def patch(self, request, *args, **kwargs):
        session = self.get_object()
        serializer = SessionNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = override_service.update_session_notes(session.pk, serializer.validated_data['notes'])
        return success_response(
            data={'session': TrainingSessionSerializer(session).data},
            message='Session notes updated.'
        )


class RecurringScheduleListCreateView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = RecurrencePatternSerializer

    @swagger_auto_schema(
        operation_summary="List Recurring Schedules",
        manual_parameters=[
            TEAM_ID_PARAM,
            openapi.Parameter('active', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
        ],
        responses={200: openapi.Response('Schedules loaded', RecurrencePatternSerializer(many=True))},
        security=[{'Bearer': []}],
        tags=['Recurring Schedules']
    )
    def get(self, request, *args, **kwargs):
        teams = self.get_visible_teams(parse_query_int(request, 'team_id'))
        patterns = RecurrencePattern._default_manager.select_related('team').filter(team__in=teams)
        if request.query_params.get('active') not in (None, ''):
            patterns = patterns.filter(is_active=parse_query_bool(request, 'active'))

        serializer = RecurrencePatternSerializer(patterns, many=True)
        return success_response(
            data={'patterns': serializer.data},
            message='Recurring schedules loaded.'
        )

    @swagger_auto_schema(
        operation_description="Create a weekly schedule and generate one session per matching date "
                              "up to `generate_until`. Weekdays: 0 = Sunday ... 6 = Saturday. "
                              "Either every session is created or none are.",
        operation_summary="Create Recurring Schedule",
        request_body=RecurringScheduleSerializer,
        responses={
            201: openapi.Response('Schedule created', RecurrencePatternSerializer),
            400: openapi.Response('Validation errors'),
            409: openapi.Response('Some dates failed; nothing was saved'),
        },
        security=[{'Bearer': []}],
        tags=['Recurring Schedules']
    )
    def post(self, request, *args, **kwargs):
        serializer = RecurringScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        team = session_store.get_team(data['team_id'])
        self.check_object_permissions(request, team)

        pattern, sessions = recurrence_service.create_recurring_schedule(
            team=team,
            days_of_week=data['days_of_week'],
            start_time=data['start_time'],
            duration_minutes=data['duration_minutes'],
            generate_until=data['generate_until'],
            generate_from=data.get('generate_from'),
            location=data['location'],
            notes=data['notes'],
            clock=self.clock,
        )
        return success_response(
            data={
                'pattern': RecurrencePatternSerializer(pattern).data,
                'generated_count': len(sessions),
            },
            message=f'Recurring schedule created with {len(sessions)} sessions.',
            status_code=status.HTTP_201_CREATED
        )


class RecurrencePatternDetailView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = RecurrencePatternSerializer

    def get_queryset(self):
        return RecurrencePattern._default_manager.select_related('team', 'team__club')

    @swagger_auto_schema(
        operation_summary="Get Recurring Schedule",
        responses={
            200: openapi.Response('Schedule loaded', RecurrencePatternSerializer),
            404: openapi.Response('Schedule not found'),
        },
        security=[{'Bearer': []}],
        tags=['Recurring Schedules']
    )
    def get(self, request, *args, **kwargs):
        pattern = self.get_object()
        return success_response(
            data={'pattern': RecurrencePatternSerializer(pattern).data},
            message='Recurring schedule loaded.'
        )


class RecurrencePatternExtendView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = ExtendPatternSerializer

    def get_queryset(self):
        return RecurrencePattern._default_manager.select_related('team', 'team__club')

    @swagger_auto_schema(
        operation_description="Generate the missing sessions of an active schedule up to a later horizon. "
                              "Dates that already have a session are skipped.",
        operation_summary="Extend Recurring Schedule",
        request_body=ExtendPatternSerializer,
        responses={
            200: openapi.Response('Schedule extended', RecurrencePatternSerializer),
            400: openapi.Response('Inactive schedule or invalid horizon'),
            409: openapi.Response('Some dates failed; nothing was saved'),
        },
        security=[{'Bearer': []}],
        tags=['Recurring Schedules']
    )
    def post(self, request, *args, **kwargs):
        pattern = self.get_object()
        serializer = ExtendPatternSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pattern, sessions = recurrence_service.extend_pattern(
            pattern.pk,
            serializer.validated_data['generate_until'],
            clock=self.clock,
        )
        return success_response(
            data={
                'pattern': RecurrencePatternSerializer(pattern).data,
                'generated_count': len(sessions),
            },
            message=f'Recurring schedule extended with {len(sessions)} sessions.'
        )


class SessionAttendanceView(TrainingViewMixin, generics.GenericAPIView):
    serializer_class = AttendanceSaveSerializer

    def get_queryset(self):
        return session_store.session_queryset()

    @swagger_auto_schema(
        operation_description="Current roster of the session's team with each player's attendance. "
                              "Players without a record are `unmarked`.",
        operation_summary="Get Session Attendance",
        responses={200: openapi.Response('Attendance loaded', AttendanceRowSerializer(many=True))},
        security=[{'Bearer': []}],
        tags=['Attendance']
    )
    def get(self, request, *args, **kwargs):
        session = self.get_object()
        ledger = attendance_service.get_session_attendance(session)
        return success_response(
            data={
                'session': TrainingSessionSerializer(session).data,
                'attendance': AttendanceRowSerializer(ledger['attendance'], many=True).data,
                'last_saved_at': ledger['last_saved_at'],
            },
            message='Attendance loaded.'
        )

    @swagger_auto_schema(
        operation_description="Save attendance for players on the roster. `arrival_time` is kept only "
                              "for `late`; `unmarked` clears the player's record. Pass the "
                              "`last_saved_at` you read to learn whether a newer save was overwritten.",
        operation_summary="Save Session Attendance",
        request_body=AttendanceSaveSerializer,
        responses={
            200: openapi.Response('Attendance saved'),
            400: openapi.Response('Validation errors, cancelled session or player not on roster'),
        },
        security=[{'Bearer': []}],
        tags=['Attendance']
    )
    def post(self, request, *args, **kwargs):
        session = self.get_object()
        serializer = AttendanceSaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = attendance_service.save_attendance(
            session.pk,
            serializer.validated_data['attendance'],
            client_last_saved_at=serializer.validated_data.get('last_saved_at'),
        )
        return success_response(
            data=result,
            message=f"Attendance saved for {result['records_saved']} players."
        )


class AttendanceStatisticsView(TrainingViewMixin, APIView):

    @swagger_auto_schema(
        operation_description="Attendance per team and per player over non-cancelled sessions. "
                              "Players with no records have a null percentage and are listed last.",
        operation_summary="Attendance Statistics",
        manual_parameters=[TEAM_ID_PARAM, DATE_FROM_PARAM, DATE_TO_PARAM],
        responses={200: openapi.Response('Statistics computed')},
        security=[{'Bearer': []}],
        tags=['Attendance']
    )
    def get(self, request, *args, **kwargs):
        teams = self.get_visible_teams(parse_query_int(request, 'team_id'))
        date_from, date_to = parse_date_range(request)

        data = statistics_service.compute_statistics(teams, date_from=date_from, date_to=date_to)
        return success_response(data=data, message='Attendance statistics computed.')


class PlayerAttendanceView(TrainingViewMixin, APIView):

    def get_object(self):
        player = Player._default_manager.filter(pk=self.kwargs['pk']).first()
        if player is None:
            raise PlayerNotFoundError()
        self.check_object_permissions(self.request, player)
        return player

    @swagger_auto_schema(
        operation_description="Rolling attendance of one player (30 days, 90 days, all time) "
                              "and their most recent records.",
        operation_summary="Player Attendance Summary",
        responses={
            200: openapi.Response('Summary loaded'),
            404: openapi.Response('Player not found'),
        },
        security=[{'Bearer': []}],
        tags=['Attendance']
    )
    def get(self, request, *args, **kwargs):
        player = self.get_object()
        data = statistics_service.player_summary(
            player,
            teams=visible_teams(request.user),
            clock=self.clock,
        )
        return success_response(data=data, message='Player attendance loaded.')


class CalendarView(TrainingViewMixin, APIView):

    @swagger_auto_schema(
        operation_description="Sessions laid out for a day, week (Sunday first) or month grid. "
                              "Positions are relative to 07:00.",
        operation_summary="Training Calendar",
        manual_parameters=[
            openapi.Parameter('view', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=list(calendar_layout.VIEWS)),
            openapi.Parameter('date', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            TEAM_ID_PARAM,
            INCLUDE_CANCELLED_PARAM,
        ],
        responses={200: openapi.Response('Calendar built')},
        security=[{'Bearer': []}],
        tags=['Calendar']
    )
    def get(self, request, *args, **kwargs):
        view = request.query_params.get('view') or calendar_layout.VIEW_WEEK
        if view not in calendar_layout.VIEWS:
            raise ValidationError({'view': [f'Choose one of: {", ".join(calendar_layout.VIEWS)}.']})

        today = self.clock.today()
        anchor = parse_query_date(request, 'date', default=today)
        include_cancelled = parse_query_bool(request, 'include_cancelled')
        teams = self.get_visible_teams(parse_query_int(request, 'team_id'))

        date_from, date_to = calendar_layout.visible_range(view, anchor)
        sessions = session_store.sessions_for_teams(
            teams,
            date_from=date_from,
            date_to=date_to,
            include_cancelled=include_cancelled,
        )
        data = calendar_layout.build_calendar(
            view,
            anchor,
            sessions,
            today=today,
            include_cancelled=include_cancelled,
            stable_colors=settings.CALENDAR_STABLE_TEAM_COLORS,
        )
        return success_response(data=data, message='Calendar built.')
