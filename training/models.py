from datetime import datetime, timedelta

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from club.models import Team, Player
from user.models import BaseModel


class Weekday(models.IntegerChoices):
    SUNDAY = (0, 'Sunday')
    MONDAY = (1, 'Monday')
    TUESDAY = (2, 'Tuesday')
    WEDNESDAY = (3, 'Wednesday')
    THURSDAY = (4, 'Thursday')
    FRIDAY = (5, 'Friday')
    SATURDAY = (6, 'Saturday')


class SessionKind(models.TextChoices):
    STANDALONE = ('standalone', 'Standalone')
    PATTERN_INSTANCE = ('pattern_instance', 'Pattern Instance')
    OVERRIDDEN_INSTANCE = ('overridden_instance', 'Overridden Instance')


class AttendanceStatus(models.TextChoices):
    UNMARKED = ('unmarked', 'Unmarked')
    PRESENT = ('present', 'Present')
    ABSENT = ('absent', 'Absent')
    LATE = ('late', 'Late')
    EXCUSED = ('excused', 'Excused')
    INJURED = ('injured', 'Injured')


# Statuses that count towards attendance percentage.
ATTENDED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


def end_time_of(start_time, duration_minutes):
    """Wall-clock end of a session, or None when it would cross midnight."""
    start = datetime.combine(datetime.min.date(), start_time)
    end = start + timedelta(minutes=duration_minutes)
    if end.date() != start.date():
        return None
    return end.time()


class RecurrencePattern(BaseModel):
    team = models.ForeignKey(  # type: ignore
        Team,
        on_delete=models.CASCADE,
        related_name='recurrence_patterns',
        verbose_name='Team'
    )
    days_of_week = models.JSONField(
        default=list,
        verbose_name='Days of Week',
        help_text='Weekday numbers, 0 = Sunday ... 6 = Saturday.'
    )
    start_time = models.TimeField(verbose_name='Start Time')
    duration_minutes = models.PositiveIntegerField(verbose_name='Duration (minutes)')
    location = models.CharField(max_length=255, blank=True, default='', verbose_name='Location')
    notes = models.TextField(blank=True, default='', verbose_name='Notes')
    generated_from = models.DateField(verbose_name='Generated From')
    generate_until = models.DateField(verbose_name='Generate Until')
    is_active = models.BooleanField(default=True, verbose_name='Is Active')  # type: ignore
    deactivated_at = models.DateTimeField(null=True, blank=True, verbose_name='Deactivated At')

    class Meta:  # type: ignore
        db_table = 'training_recurrences'
        verbose_name = 'Recurrence Pattern'
        verbose_name_plural = 'Recurrence Patterns'
        ordering = ['-created_at']

    def __str__(self):
        days = ', '.join(Weekday(day).label[:3] for day in sorted(self.days_of_week))
        return f"{self.team} - {days} {self.start_time:%H:%M}"

    def get_days_display(self):
        return [Weekday(day).label for day in sorted(self.days_of_week)]

    def clean(self):
        errors = {}
        days = self.days_of_week
        if not isinstance(days, list) or not days:
            errors['days_of_week'] = 'At least one weekday is required.'
        elif any(isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6 for day in days):
            errors['days_of_week'] = 'Weekdays must be integers between 0 (Sunday) and 6 (Saturday).'
        if self.duration_minutes is not None and self.start_time is not None:
            if self.duration_minutes <= 0:
                errors['duration_minutes'] = 'Duration must be positive.'
            elif end_time_of(self.start_time, self.duration_minutes) is None:
                errors['duration_minutes'] = 'Session must end on the same day it starts.'
        if self.generated_from and self.generate_until and self.generate_until < self.generated_from:
            errors['generate_until'] = 'Horizon cannot be before the start date.'
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class TrainingSession(BaseModel):
    team = models.ForeignKey(  # type: ignore
        Team,
        on_delete=models.CASCADE,
        related_name='training_sessions',
        verbose_name='Team'
    )
    recurrence = models.ForeignKey(  # type: ignore
        RecurrencePattern,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='sessions',
        verbose_name='Recurrence Pattern'
    )
    session_date = models.DateField(verbose_name='Session Date')
    start_time = models.TimeField(verbose_name='Start Time')
    duration_minutes = models.PositiveIntegerField(verbose_name='Duration (minutes)')
    location = models.CharField(max_length=255, blank=True, default='', verbose_name='Location')
    notes = models.TextField(blank=True, default='', verbose_name='Notes')
    focus_areas = models.JSONField(default=list, blank=True, verbose_name='Focus Areas')
    is_override = models.BooleanField(default=False, verbose_name='Is Override')  # type: ignore
    is_cancelled = models.BooleanField(default=False, verbose_name='Is Cancelled')  # type: ignore
    cancellation_reason = models.CharField(max_length=255, blank=True, default='', verbose_name='Cancellation Reason')
    cancelled_at = models.DateTimeField(null=True, blank=True, verbose_name='Cancelled At')

    class Meta:  # type: ignore
        db_table = 'training_sessions'
        verbose_name = 'Training Session'
        verbose_name_plural = 'Training Sessions'
        ordering = ['session_date', 'start_time']
        constraints = [
            models.UniqueConstraint(
                fields=['team', 'recurrence', 'session_date'],
                condition=Q(recurrence__isnull=False),
                name='unique_pattern_instance_per_date',
            ),
            models.CheckConstraint(
                condition=Q(is_override=False) | Q(recurrence__isnull=False),
                name='override_requires_recurrence',
            ),
        ]
        indexes = [
            models.Index(fields=['team', 'session_date'], name='training_team_date_idx'),
        ]

    def __str__(self):
        return f"{self.team} - {self.session_date} {self.start_time:%H:%M}"

    @property
    def kind(self) -> str:
        if self.recurrence_id is None:  # type: ignore
            return SessionKind.STANDALONE
        if self.is_override:
            return SessionKind.OVERRIDDEN_INSTANCE
        return SessionKind.PATTERN_INSTANCE

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_id is not None  # type: ignore

    @property
    def end_time(self):
        return end_time_of(self.start_time, self.duration_minutes)

    def clean(self):
        errors = {}
        if self.is_override and self.recurrence_id is None:  # type: ignore
            errors['is_override'] = 'Only pattern instances can be overrides.'
        if self.recurrence_id is not None and self.team_id and self.recurrence.team_id != self.team_id:  # type: ignore
            errors['team'] = 'A pattern instance must belong to the same team as its pattern.'
        if self.duration_minutes is not None and self.start_time is not None:
            if self.duration_minutes <= 0:
                errors['duration_minutes'] = 'Duration must be positive.'
            elif end_time_of(self.start_time, self.duration_minutes) is None:
                errors['duration_minutes'] = 'Session must end on the same day it starts.'
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean(validate_constraints=False)
        super().save(*args, **kwargs)


class Attendance(BaseModel):
    session = models.ForeignKey(  # type: ignore
        TrainingSession,
        on_delete=models.CASCADE,
        related_name='attendance_records',
        verbose_name='Training Session'
    )
    player = models.ForeignKey(  # type: ignore
        Player,
        on_delete=models.CASCADE,
        related_name='attendance_records',
        verbose_name='Player'
    )
    status = models.CharField(
        max_length=20,
        choices=[choice for choice in AttendanceStatus.choices if choice[0] != AttendanceStatus.UNMARKED],
        verbose_name='Status'
    )
    arrival_time = models.TimeField(null=True, blank=True, verbose_name='Arrival Time')
    notes = models.TextField(blank=True, default='', verbose_name='Notes')

    class Meta:  # type: ignore
        db_table = 'attendance'
        verbose_name = 'Attendance'
        verbose_name_plural = 'Attendance'
        ordering = ['-session__session_date', 'player__last_name']
        unique_together = [['session', 'player']]

    def __str__(self):
        return f"{self.player} - {self.session.session_date} ({self.get_status_display()})"  # type: ignore

    def save(self, *args, **kwargs):
        if self.status != AttendanceStatus.LATE:
            self.arrival_time = None
        super().save(*args, **kwargs)
