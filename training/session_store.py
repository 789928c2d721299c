"""
Persistence helpers for training sessions and recurrence patterns.

Every mutating service goes through ``get_session(..., lock=True)`` inside
``transaction.atomic()`` so concurrent writes to one session are serialized.
Reads never lock.
"""
import logging

from club.models import Team
from training.api.exceptions import (
    TeamNotFoundError,
    SessionNotFoundError,
    RecurrencePatternNotFoundError,
)
from training.models import TrainingSession, RecurrencePattern

logger = logging.getLogger(__name__)


def get_team(team_id) -> Team:
    try:
        return Team._default_manager.select_related('club').get(pk=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError()


def session_queryset():
    return TrainingSession._default_manager.select_related('team', 'team__club', 'recurrence')


def get_session(session_id, lock: bool = False) -> TrainingSession:
    queryset = session_queryset()
    if lock:
        queryset = queryset.select_for_update(of=('self',))
    try:
        return queryset.get(pk=session_id)
    except TrainingSession.DoesNotExist:
        raise SessionNotFoundError()


def get_pattern(pattern_id, lock: bool = False) -> RecurrencePattern:
    queryset = RecurrencePattern._default_manager.select_related('team', 'team__club')
    if lock:
        queryset = queryset.select_for_update(of=('self',))
    try:
        return queryset.get(pk=pattern_id)
    except RecurrencePattern.DoesNotExist:
        raise RecurrencePatternNotFoundError()


def sessions_for_teams(teams, date_from=None, date_to=None, include_cancelled: bool = False):
    queryset = session_queryset().filter(team__in=teams)
    if date_from is not None:
        queryset = queryset.filter(session_date__gte=date_from)
    if date_to is not None:
        queryset = queryset.filter(session_date__lte=date_to)
    if not include_cancelled:
        queryset = queryset.filter(is_cancelled=False)
    return queryset.order_by('session_date', 'start_time', 'id')


def create_standalone_session(team: Team, **fields) -> TrainingSession:
    session = TrainingSession(team=team, **fields)
    session.save()
    logger.info(f"Created standalone session {session.pk} for team {team.pk} on {session.session_date}")
    return session
