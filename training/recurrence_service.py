"""
Weekly recurrence expansion.

A recurring schedule is stored once as a ``RecurrencePattern`` and expanded
into one ``TrainingSession`` per matching date in ``[generated_from,
generate_until]``. Expansion is all-or-nothing: when any candidate date fails
to insert, the transaction is rolled back and ``ExpansionFailedError``
reports which dates went through and which did not.

Weekdays use 0 = Sunday ... 6 = Saturday.
"""
import logging
from datetime import date, datetime, time, timedelta

from dateutil.rrule import rrule, WEEKLY
from django.conf import settings
from django.db import transaction, IntegrityError, DatabaseError
from rest_framework.exceptions import ValidationError

from club.models import Team
from training import session_store
from training.api.exceptions import ExpansionFailedError, InactivePatternError
from training.clock import default_clock
from training.models import RecurrencePattern, TrainingSession, end_time_of

logger = logging.getLogger(__name__)


def to_rrule_weekday(day: int) -> int:
    """Map 0 = Sunday numbering onto dateutil's 0 = Monday."""
    return (day - 1) % 7


def expand_dates(days_of_week, start: date, until: date) -> list[date]:
    if until < start or not days_of_week:
        return []
    rule = rrule(
        WEEKLY,
        byweekday=sorted({to_rrule_weekday(day) for day in days_of_week}),
        dtstart=datetime.combine(start, time.min),
        until=datetime.combine(until, time.min),
    )
    return [occurrence.date() for occurrence in rule]


def validate_schedule(days_of_week, start_time, duration_minutes, generate_from: date, generate_until: date):
    errors = {}

    if not days_of_week:
        errors['days_of_week'] = ['At least one weekday is required.']
    elif any(isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6 for day in days_of_week):
        errors['days_of_week'] = ['Weekdays must be integers between 0 (Sunday) and 6 (Saturday).']

    if duration_minutes is None or duration_minutes <= 0:
        errors['duration_minutes'] = ['Duration must be positive.']
    elif end_time_of(start_time, duration_minutes) is None:
        errors['duration_minutes'] = ['Session must end on the same day it starts.']

    if generate_until < generate_from:
        errors['generate_until'] = ['Horizon cannot be before the start date.']
    elif (generate_until - generate_from).days > settings.TRAINING_MAX_GENERATION_DAYS:
        errors['generate_until'] = [
            f'Horizon cannot be more than {settings.TRAINING_MAX_GENERATION_DAYS} days after the start date.'
        ]

    if errors:
        raise ValidationError(errors)


def _build_instances(pattern: RecurrencePattern, dates) -> list[TrainingSession]:
    return [
        TrainingSession(
            team_id=pattern.team_id,  # type: ignore
            recurrence=pattern,
            session_date=session_date,
            start_time=pattern.start_time,
            duration_minutes=pattern.duration_minutes,
            location=pattern.location,
            notes=pattern.notes,
        )
        for session_date in dates
    ]


def _probe_failed_dates(instances):
    succeeded, failed = [], []
    for instance in instances:
        try:
            with transaction.atomic():
                TrainingSession._default_manager.bulk_create([instance])
            succeeded.append(instance.session_date)
        except IntegrityError:
            failed.append(instance.session_date)
    return succeeded, failed


def _insert_instances(pattern: RecurrencePattern, dates) -> list[TrainingSession]:
    """Must run inside the caller's transaction; raising rolls the whole batch back."""
    instances = _build_instances(pattern, dates)
    if not instances:
        return []

    try:
        with transaction.atomic():
            return TrainingSession._default_manager.bulk_create(instances)
    except IntegrityError:
        succeeded, failed = _probe_failed_dates(_build_instances(pattern, dates))
        logger.warning(
            f"Expansion of pattern {pattern.pk} failed for {len(failed)} of {len(instances)} dates: "
            f"{', '.join(day.isoformat() for day in failed)}"
        )
        raise ExpansionFailedError(succeeded_dates=succeeded, failed_dates=failed)


def create_recurring_schedule(
    team: Team,
    days_of_week,
    start_time,
    duration_minutes: int,
    generate_until: date,
    generate_from: date | None = None,
    location: str = '',
    notes: str = '',
    clock=default_clock,
):
    """
    Create a pattern and every session instance up to ``generate_until``.

    Returns ``(pattern, sessions)``.
    """
    generate_from = generate_from or clock.today()
    validate_schedule(days_of_week, start_time, duration_minutes, generate_from, generate_until)

    try:
        with transaction.atomic():
            pattern = RecurrencePattern(
                team=team,
                days_of_week=sorted(set(days_of_week)),
                start_time=start_time,
                duration_minutes=duration_minutes,
                location=location,
                notes=notes,
                generated_from=generate_from,
                generate_until=generate_until,
            )
            pattern.save()
            sessions = _insert_instances(pattern, expand_dates(pattern.days_of_week, generate_from, generate_until))
    except DatabaseError as e:
        logger.error(f"Storage failure while creating recurring schedule for team {team.pk}: {e}")
        raise

    logger.info(f"Created recurring pattern {pattern.pk} for team {team.pk} with {len(sessions)} sessions")
    return pattern, sessions


def extend_pattern(pattern_id, generate_until: date, clock=default_clock):
    """
    Push an active pattern's horizon out to ``generate_until``.

    Only dates after the current horizon are expanded, so an instance moved
    off its original date is not regenerated there. Dates that already have an
    instance, cancelled or not, are skipped. Returns ``(pattern, sessions)``.
    """
    with transaction.atomic():
        pattern = session_store.get_pattern(pattern_id, lock=True)
        if not pattern.is_active:
            logger.warning(f"Rejected extension of inactive pattern {pattern.pk}")
            raise InactivePatternError()

        if generate_until <= pattern.generate_until:
            raise ValidationError({
                'generate_until': [f'New horizon must be after the current one ({pattern.generate_until.isoformat()}).']
            })

        window_start = max(pattern.generated_from, clock.today())
        if (generate_until - window_start).days > settings.TRAINING_MAX_GENERATION_DAYS:
            raise ValidationError({
                'generate_until': [
                    f'Horizon cannot be more than {settings.TRAINING_MAX_GENERATION_DAYS} days ahead.'
                ]
            })

        existing = set(pattern.sessions.values_list('session_date', flat=True))  # type: ignore
        candidates = [
            day for day in expand_dates(
                pattern.days_of_week, pattern.generate_until + timedelta(days=1), generate_until
            )
            if day not in existing
        ]
        sessions = _insert_instances(pattern, candidates)

        pattern.generate_until = generate_until
        pattern.save()

    logger.info(f"Extended pattern {pattern.pk} to {generate_until} with {len(sessions)} new sessions")
    return pattern, sessions

