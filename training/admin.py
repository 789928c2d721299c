from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import RecurrencePattern, TrainingSession, Attendance, AttendanceStatus, SessionKind


class TrainingSessionInline(admin.TabularInline):
    model = TrainingSession
    extra = 0
    fields = ('session_date', 'start_time', 'duration_minutes', 'location', 'is_override', 'is_cancelled')
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


class AttendanceInline(admin.TabularInline):
    model = Attendance
    extra = 0
    fields = ('player', 'status', 'arrival_time', 'notes')
    autocomplete_fields = ('player',)


@admin.register(RecurrencePattern)
class RecurrencePatternAdmin(admin.ModelAdmin):

    list_display = ('id', 'team', 'days_display', 'start_time', 'duration_minutes', 'generated_from', 'generate_until', 'is_active', 'created_at')
    list_filter = ('is_active', 'team__club', 'team')
    search_fields = ('team__name', 'location', 'notes')
    readonly_fields = ('created_at', 'updated_at', 'deactivated_at')
    ordering = ('-created_at',)
    autocomplete_fields = ('team',)
    inlines = (TrainingSessionInline,)

    fieldsets = (
        (_('Schedule'), {
            'fields': ('team', 'days_of_week', 'start_time', 'duration_minutes', 'location', 'notes')
        }),
        (_('Generation Window'), {
            'fields': ('generated_from', 'generate_until', 'is_active', 'deactivated_at')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def days_display(self, obj):
        if not obj:
            return ''
        return ', '.join(obj.get_days_display())
    days_display.short_description = 'Days'


@admin.register(TrainingSession)
class TrainingSessionAdmin(admin.ModelAdmin):

    list_display = ('id', 'team', 'session_date', 'start_time', 'duration_minutes', 'location', 'kind_display', 'status_display')
    list_filter = ('is_cancelled', 'is_override', 'team__club', 'team', 'session_date')
    search_fields = ('team__name', 'location', 'notes')
    readonly_fields = ('created_at', 'updated_at', 'cancelled_at', 'kind_display')
    ordering = ('-session_date', '-start_time')
    date_hierarchy = 'session_date'
    autocomplete_fields = ('team',)
    raw_id_fields = ('recurrence',)
    inlines = (AttendanceInline,)

    fieldsets = (
        (_('Session'), {
            'fields': ('team', 'recurrence', 'kind_display', 'session_date', 'start_time', 'duration_minutes', 'location', 'focus_areas')
        }),
        (_('Notes'), {
            'fields': ('notes',)
        }),
        (_('Status'), {
            'fields': ('is_override', 'is_cancelled', 'cancellation_reason', 'cancelled_at')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def kind_display(self, obj):
        if not obj or not obj.pk:
            return ''
        return SessionKind(obj.kind).label
    kind_display.short_description = 'Kind'

    def status_display(self, obj):
        if not obj:
            return ''
        if obj.is_cancelled:
            return format_html('<span style="color: {}; font-weight: bold;">{}</span>', '#e74c3c', 'Cancelled')
        if obj.is_override:
            return format_html('<span style="color: {}; font-weight: bold;">{}</span>', '#f39c12', 'Modified')
        return format_html('<span style="color: {};">{}</span>', '#2ecc71', 'Scheduled')
    status_display.short_description = 'Status'


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):

    list_display = ('player', 'session', 'status_colored', 'arrival_time', 'updated_at')
    list_filter = ('status', 'session__team', 'session__session_date')
    search_fields = ('player__first_name', 'player__last_name', 'session__team__name')
    readonly_fields = ('created_at', 'updated_at')
    autocomplete_fields = ('player',)
    raw_id_fields = ('session',)

    def status_colored(self, obj):
        if not obj:
            return ''
        colors = {
            AttendanceStatus.PRESENT: '#2ecc71',
            AttendanceStatus.LATE: '#f39c12',
            AttendanceStatus.ABSENT: '#e74c3c',
            AttendanceStatus.EXCUSED: '#3498db',
            AttendanceStatus.INJURED: '#9b59b6',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, '#95a5a6'),
            obj.get_status_display()
        )
    status_colored.short_description = 'Status'
    status_colored.admin_order_field = 'status'
