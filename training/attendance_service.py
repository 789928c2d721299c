"""
Per-session attendance ledger.

The roster shown for a session is the team's current active roster, read
live. Players without a stored record are reported as ``unmarked``; saving a
player back to ``unmarked`` removes their record.
"""
import logging
from collections import Counter

from django.db import transaction
from django.db.models import Max
from rest_framework.exceptions import ValidationError

from training import session_store
from training.api.exceptions import SessionCancelledError, PlayerNotOnRosterError
from training.models import Attendance, AttendanceStatus, TrainingSession

logger = logging.getLogger(__name__)


def last_saved_at(session: TrainingSession):
    return session.attendance_records.aggregate(latest=Max('updated_at'))['latest']  # type: ignore


def get_session_attendance(session: TrainingSession) -> dict:
    roster = session.team.current_roster().order_by('last_name', 'first_name')  # type: ignore
    records = {
        record.player_id: record
        for record in Attendance._default_manager.filter(session=session)
    }

    rows = []
    for player in roster:
        record = records.get(player.pk)
        rows.append({
            'player_id': player.pk,
            'first_name': player.first_name,
            'last_name': player.last_name,
            'jersey_number': player.jersey_number,
            'status': record.status if record else AttendanceStatus.UNMARKED.value,
            'arrival_time': record.arrival_time if record else None,
            'notes': record.notes if record else '',
        })

    return {
        'session': session,
        'attendance': rows,
        'last_saved_at': last_saved_at(session),
    }


def save_attendance(session_id, entries, client_last_saved_at=None) -> dict:
    """
    Upsert a batch of ``{player_id, status, arrival_time, notes}`` entries.

    Concurrent saves are last-write-wins. When the caller passes the
    ``last_saved_at`` it read and a newer save has landed since, the batch is
    still applied and ``overwrote_newer`` is set in the result.
    """
    duplicates = sorted(
        player_id for player_id, count in Counter(entry['player_id'] for entry in entries).items() if count > 1
    )
    if duplicates:
        raise ValidationError({
            'attendance': [f'Player {player_id} appears more than once.' for player_id in duplicates]
        })

    with transaction.atomic():
        session = session_store.get_session(session_id, lock=True)
        if session.is_cancelled:
            logger.warning(f"Rejected attendance save on cancelled session {session.pk}")
            raise SessionCancelledError()

        roster_ids = set(session.team.current_roster().values_list('id', flat=True))  # type: ignore
        unknown = sorted({entry['player_id'] for entry in entries} - roster_ids)
        if unknown:
            logger.warning(f"Rejected attendance save on session {session.pk}: players {unknown} not on roster")
            raise PlayerNotOnRosterError(unknown)

        previous_save = last_saved_at(session)
        overwrote_newer = (
            client_last_saved_at is not None
            and previous_save is not None
            and previous_save > client_last_saved_at
        )
        if overwrote_newer:
            logger.warning(
                f"Attendance for session {session.pk} saved over a newer save "
                f"({previous_save.isoformat()} > {client_last_saved_at.isoformat()})"
            )

        cleared_ids = [entry['player_id'] for entry in entries if entry['status'] == AttendanceStatus.UNMARKED]
        records_cleared = 0
        if cleared_ids:
            records_cleared, _ = Attendance._default_manager.filter(
                session=session, player_id__in=cleared_ids
            ).delete()

        records_saved = 0
        for entry in entries:
            status = entry['status']
            if status == AttendanceStatus.UNMARKED:
                continue
            Attendance._default_manager.update_or_create(
                session=session,
                player_id=entry['player_id'],
                defaults={
                    'status': status,
                    'arrival_time': entry.get('arrival_time') if status == AttendanceStatus.LATE else None,
                    'notes': entry.get('notes') or '',
                },
            )
            records_saved += 1

        saved_at = last_saved_at(session)

    logger.info(
        f"Saved attendance for session {session.pk}: {records_saved} saved, {records_cleared} cleared"
    )
    return {
        'records_saved': records_saved,
        'records_cleared': records_cleared,
        'overwrote_newer': overwrote_newer,
        'last_saved_at': saved_at,
    }
