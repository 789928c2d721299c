from rest_framework import serializers

from club.models import Team
from training.models import (
    RecurrencePattern,
    TrainingSession,
    AttendanceStatus,
    end_time_of,
)
from training.override_service import DELETE_SINGLE, DELETE_ALL_FUTURE


class TrainingSessionSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    age_group = serializers.CharField(source='team.age_group', read_only=True)
    recurrence_id = serializers.IntegerField(read_only=True, allow_null=True)
    end_time = serializers.TimeField(read_only=True)
    kind = serializers.CharField(read_only=True)
    is_recurring = serializers.BooleanField(read_only=True)

    class Meta:
        model = TrainingSession
        fields = [
            'id', 'team_id', 'team_name', 'age_group', 'recurrence_id', 'kind', 'is_recurring',
            'session_date', 'start_time', 'end_time', 'duration_minutes',
            'location', 'notes', 'focus_areas',
            'is_override', 'is_cancelled', 'cancellation_reason', 'cancelled_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class TrainingSessionWriteSerializer(serializers.Serializer):
    team_id = serializers.IntegerField()
    session_date = serializers.DateField()
    start_time = serializers.TimeField()
    duration_minutes = serializers.IntegerField(min_value=1)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    focus_areas = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list
    )

    def validate_team_id(self, value):
        team = Team._default_manager.select_related('club').filter(pk=value).first()
        if team is None:
            raise serializers.ValidationError('Team not found.')
        if not team.is_active:
            raise serializers.ValidationError('Team is not active.')
        return value

    def validate(self, attrs):
        instance = self.instance
        start_time = attrs.get('start_time', instance.start_time if instance else None)
        duration = attrs.get('duration_minutes', instance.duration_minutes if instance else None)
        if start_time is not None and duration is not None and end_time_of(start_time, duration) is None:
            raise serializers.ValidationError({
                'duration_minutes': 'Session must end on the same day it starts.'
            })
        if 'team_id' in attrs:
            attrs['team'] = Team._default_manager.select_related('club').get(pk=attrs.pop('team_id'))
        return attrs


class RecurrencePatternSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    days_display = serializers.ListField(source='get_days_display', read_only=True)
    sessions_count = serializers.SerializerMethodField()

    class Meta:
        model = RecurrencePattern
        fields = [
            'id', 'team_id', 'team_name', 'days_of_week', 'days_display',
            'start_time', 'duration_minutes', 'location', 'notes',
            'generated_from', 'generate_until', 'is_active', 'deactivated_at',
            'sessions_count', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_sessions_count(self, obj):
        if obj.pk:
            return obj.sessions.filter(is_cancelled=False).count()
        return 0


class RecurringScheduleSerializer(serializers.Serializer):
    team_id = serializers.IntegerField()
    days_of_week = serializers.ListField(
        child=serializers.IntegerField(min_value=0, max_value=6),
        allow_empty=False,
        help_text='0 = Sunday ... 6 = Saturday'
    )
    start_time = serializers.TimeField()
    duration_minutes = serializers.IntegerField(min_value=1)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    generate_until = serializers.DateField()
    generate_from = serializers.DateField(required=False)

    def validate_team_id(self, value):
        team = Team._default_manager.filter(pk=value).first()
        if team is None:
            raise serializers.ValidationError('Team not found.')
        if not team.is_active:
            raise serializers.ValidationError('Team is not active.')
        return value

    def validate_days_of_week(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError('Weekdays must not repeat.')
        return sorted(value)

    def validate(self, attrs):
        if end_time_of(attrs['start_time'], attrs['duration_minutes']) is None:
            raise serializers.ValidationError({
                'duration_minutes': 'Session must end on the same day it starts.'
            })
        return attrs


class ExtendPatternSerializer(serializers.Serializer):
    generate_until = serializers.DateField()


class SessionDeleteSerializer(serializers.Serializer):
    delete_mode = serializers.ChoiceField(
        choices=[DELETE_SINGLE, DELETE_ALL_FUTURE],
        required=False,
        default=DELETE_SINGLE
    )
    cutoff_date = serializers.DateField(required=False, allow_null=True)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class SessionNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True)


class AttendanceRowSerializer(serializers.Serializer):
    player_id = serializers.IntegerField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    jersey_number = serializers.IntegerField(allow_null=True)
    status = serializers.CharField()
    arrival_time = serializers.TimeField(allow_null=True)
    notes = serializers.CharField(allow_blank=True)


class AttendanceEntrySerializer(serializers.Serializer):
    player_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=AttendanceStatus.choices)
    arrival_time = serializers.TimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AttendanceSaveSerializer(serializers.Serializer):
    attendance = AttendanceEntrySerializer(many=True, allow_empty=False)
    last_saved_at = serializers.DateTimeField(required=False, allow_null=True)

    def validate_attendance(self, value):
        seen = set()
        for entry in value:
            if entry['player_id'] in seen:
                raise serializers.ValidationError(f"Player {entry['player_id']} appears more than once.")
            seen.add(entry['player_id'])
        return value
