"""
Attendance statistics computed on demand from stored records.

Cancelled sessions never count. A player's percentage is
``round(100 * (present + late) / total)`` with half-up rounding, or ``None``
when the player has no recorded sessions in range.
"""
import logging
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Count

from club.models import Player
from training.clock import default_clock
from training.models import Attendance, AttendanceStatus, TrainingSession, ATTENDED_STATUSES

logger = logging.getLogger(__name__)

COUNTED_STATUSES = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.LATE,
    AttendanceStatus.ABSENT,
    AttendanceStatus.EXCUSED,
    AttendanceStatus.INJURED,
)

RECENT_RECORDS_LIMIT = 10


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def attendance_percentage(attended: int, total: int) -> int | None:
    if total <= 0:
        return None
    return round_half_up(Decimal(100 * attended) / Decimal(total))


def _empty_counts() -> dict:
    return {status.value: 0 for status in COUNTED_STATUSES}


def _summarize(counts: dict) -> dict:
    total = sum(counts.values())
    attended = sum(counts[status.value] for status in ATTENDED_STATUSES)
    return {
        **counts,
        'total_sessions': total,
        'attendance_percentage': attendance_percentage(attended, total),
    }


def _sessions_in_range(teams, date_from=None, date_to=None):
    sessions = TrainingSession._default_manager.filter(team__in=teams, is_cancelled=False)
    if date_from is not None:
        sessions = sessions.filter(session_date__gte=date_from)
    if date_to is not None:
        sessions = sessions.filter(session_date__lte=date_to)
    return sessions


def _team_rows(teams, sessions) -> list[dict]:
    session_counts = dict(
        sessions.values('team_id').order_by().annotate(total=Count('id')).values_list('team_id', 'total')
    )
    record_counts = {}
    for row in (
        Attendance._default_manager.filter(session__in=sessions)
        .values('session__team_id', 'status')
        .order_by()
        .annotate(total=Count('id'))
    ):
        team_counts = record_counts.setdefault(row['session__team_id'], _empty_counts())
        team_counts[row['status']] = row['total']

    rows = []
    for team in teams:
        counts = record_counts.get(team.pk, _empty_counts())
        total_records = sum(counts.values())
        attended = sum(counts[status.value] for status in ATTENDED_STATUSES)
        rows.append({
            'team_id': team.pk,
            'team_name': team.name,
            'age_group': team.age_group,
            'total_sessions': session_counts.get(team.pk, 0),
            'total_records': total_records,
            'attended': attended,
            'attendance_percentage': attendance_percentage(attended, total_records),
        })
    return rows


def compute_statistics(teams, date_from=None, date_to=None, low_threshold: int | None = None) -> dict:
    """
    Per-team rows, per-player rows and an overall summary for ``teams``.

    Players on a current roster with no recorded sessions are listed with a
    ``None`` percentage and left out of the average.
    """
    if low_threshold is None:
        low_threshold = settings.ATTENDANCE_LOW_THRESHOLD

    teams = list(teams)
    sessions = _sessions_in_range(teams, date_from, date_to)

    counts_by_player = {}
    for row in (
        Attendance._default_manager.filter(session__in=sessions)
        .values('player_id', 'status')
        .order_by()
        .annotate(total=Count('id'))
    ):
        counts_by_player.setdefault(row['player_id'], _empty_counts())[row['status']] = row['total']

    players = Player._default_manager.filter(
        team_memberships__team__in=teams,
        team_memberships__is_active=True,
    ) | Player._default_manager.filter(pk__in=list(counts_by_player))

    rows = []
    for player in players.distinct():
        summary = _summarize(counts_by_player.get(player.pk, _empty_counts()))
        rows.append({
            'player_id': player.pk,
            'first_name': player.first_name,
            'last_name': player.last_name,
            'jersey_number': player.jersey_number,
            **summary,
        })

    rows.sort(key=lambda row: (
        row['attendance_percentage'] is None,
        -(row['attendance_percentage'] or 0),
        row['last_name'],
        row['first_name'],
    ))

    percentages = [row['attendance_percentage'] for row in rows if row['attendance_percentage'] is not None]
    average = round_half_up(Decimal(sum(percentages)) / Decimal(len(percentages))) if percentages else None

    overall = {
        'total_sessions': sessions.count(),
        'players_count': len(rows),
        'average_attendance': average,
        'perfect_attendance_count': sum(1 for value in percentages if value == 100),
        'low_attendance_count': sum(1 for value in percentages if value < low_threshold),
        'low_attendance_threshold': low_threshold,
    }

    logger.info(f"Computed attendance statistics for {len(teams)} teams and {len(rows)} players")
    return {
        'teams': _team_rows(teams, sessions),
        'statistics': rows,
        'overall': overall,
    }


def _window_summary(records, since=None) -> dict:
    if since is not None:
        records = records.filter(session__session_date__gte=since)
    counts = _empty_counts()
    for row in records.values('status').order_by().annotate(total=Count('id')):
        counts[row['status']] = row['total']
    return _summarize(counts)


def player_summary(player: Player, teams=None, clock=default_clock) -> dict:
    """
    Rolling attendance for one player: last 30 days, last 90 days, all time,
    plus the most recent records. ``teams`` limits which teams' sessions count.
    """
    today = clock.today()
    records = Attendance._default_manager.filter(player=player, session__is_cancelled=False)
    if teams is not None:
        records = records.filter(session__team__in=teams)

    recent = records.select_related('session', 'session__team').order_by(
        '-session__session_date', '-session__start_time'
    )[:RECENT_RECORDS_LIMIT]

    return {
        'player': {
            'player_id': player.pk,
            'first_name': player.first_name,
            'last_name': player.last_name,
            'jersey_number': player.jersey_number,
        },
        'statistics': {
            'last_30_days': _window_summary(records, today - timedelta(days=30)),
            'last_90_days': _window_summary(records, today - timedelta(days=90)),
            'all_time': _window_summary(records),
        },
        'recent_attendance': [
            {
                'session_id': record.session_id,  # type: ignore
                'session_date': record.session.session_date,  # type: ignore
                'start_time': record.session.start_time,  # type: ignore
                'team_id': record.session.team_id,  # type: ignore
                'team_name': record.session.team.name,  # type: ignore
                'status': record.status,
                'arrival_time': record.arrival_time,
                'notes': record.notes,
            }
            for record in recent
        ],
    }
