"""
Single-occurrence edits and cancellations of training sessions.

Editing a pattern instance marks it as an override and leaves the pattern and
its siblings alone. Deletion never removes rows: sessions are cancelled so
past attendance stays queryable.
"""
import logging
from datetime import date

from django.db import transaction
from rest_framework.exceptions import ValidationError

from training import session_store
from training.api.exceptions import (
    SessionCancelledError,
    SessionAlreadyCancelledError,
    TeamChangeNotAllowedError,
)
from training.clock import default_clock
from training.models import TrainingSession

logger = logging.getLogger(__name__)

DELETE_SINGLE = 'single'
DELETE_ALL_FUTURE = 'all_future'

EDITABLE_FIELDS = ('session_date', 'start_time', 'duration_minutes', 'location', 'notes', 'focus_areas')


def update_session(session_id, changes: dict) -> TrainingSession:
    """
    Apply ``changes`` to one session. ``changes`` may carry ``team`` plus any
    of ``EDITABLE_FIELDS``. A pattern instance becomes an override only when a
    value actually changes.
    """
    with transaction.atomic():
        session = session_store.get_session(session_id, lock=True)
        if session.is_cancelled:
            logger.warning(f"Rejected edit of cancelled session {session.pk}")
            raise SessionCancelledError()

        changed = []
        team = changes.get('team')
        if team is not None and team.pk != session.team_id:  # type: ignore
            if session.is_recurring:
                logger.warning(f"Rejected team change on pattern instance {session.pk}")
                raise TeamChangeNotAllowedError()
            session.team = team
            changed.append('team')

        for field in EDITABLE_FIELDS:
            if field in changes and getattr(session, field) != changes[field]:
                setattr(session, field, changes[field])
                changed.append(field)

        if not changed:
            logger.debug(f"No changes for session {session.pk}")
            return session

        if session.is_recurring:
            clash = TrainingSession._default_manager.filter(
                recurrence_id=session.recurrence_id,  # type: ignore
                session_date=session.session_date,
            ).exclude(pk=session.pk)
            if clash.exists():
                raise ValidationError({
                    'session_date': ['Another session of this recurring schedule is already on that date.']
                })
            session.is_override = True
        session.save()

    logger.info(f"Updated session {session.pk} ({session.kind}): {', '.join(changed)}")
    return session


def update_session_notes(session_id, notes: str) -> TrainingSession:
    with transaction.atomic():
        session = session_store.get_session(session_id, lock=True)
        session.notes = notes
        session.save(update_fields=['notes', 'updated_at'])

    logger.info(f"Updated notes of session {session.pk}")
    return session


def cancel_session(
    session_id,
    delete_mode: str = DELETE_SINGLE,
    reason: str = '',
    cutoff_date: date | None = None,
    clock=default_clock,
) -> dict:
    """
    Cancel one session, or with ``all_future`` deactivate its pattern and
    cancel every instance dated on or after the cutoff.

    The cutoff defaults to the target session's date and may not be later
    than it. On a standalone session ``all_future`` behaves like ``single``.
    Locks are always taken pattern first, then session rows.
    """
    with transaction.atomic():
        session = session_store.get_session(session_id)

        if delete_mode == DELETE_ALL_FUTURE and session.is_recurring:
            cutoff = cutoff_date or session.session_date
            if cutoff > session.session_date:
                raise ValidationError({
                    'cutoff_date': ['Cutoff cannot be after the date of the session being deleted.']
                })
            return _cancel_all_future(session.recurrence_id, reason, cutoff, clock)  # type: ignore

        session = session_store.get_session(session_id, lock=True)
        if session.is_cancelled:
            logger.warning(f"Rejected cancellation of already cancelled session {session.pk}")
            raise SessionAlreadyCancelledError()

        session.is_cancelled = True
        session.cancellation_reason = reason
        session.cancelled_at = clock.now()
        session.save(update_fields=['is_cancelled', 'cancellation_reason', 'cancelled_at', 'updated_at'])

    logger.info(f"Cancelled session {session.pk}")
    return {'cancelled_count': 1, 'pattern_deactivated': False}


def _cancel_all_future(pattern_id, reason: str, cutoff: date, clock) -> dict:
    now = clock.now()
    pattern = session_store.get_pattern(pattern_id, lock=True)

    future_ids = list(
        TrainingSession._default_manager
        .select_for_update()
        .filter(recurrence=pattern, session_date__gte=cutoff, is_cancelled=False)
        .order_by('id')
        .values_list('id', flat=True)
    )
    cancelled_count = TrainingSession._default_manager.filter(id__in=future_ids).update(
        is_cancelled=True,
        cancellation_reason=reason,
        cancelled_at=now,
        updated_at=now,
    )

    pattern.is_active = False
    pattern.deactivated_at = pattern.deactivated_at or now
    pattern.save()

    logger.info(
        f"Deactivated pattern {pattern.pk} and cancelled {cancelled_count} sessions from {cutoff.isoformat()}"
    )
    return {'cancelled_count': cancelled_count, 'pattern_deactivated': True}
