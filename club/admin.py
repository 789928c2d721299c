from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Club, Team, Player, TeamPlayer, Coach, TeamCoach


class TeamPlayerInline(admin.TabularInline):
    model = TeamPlayer
    extra = 0
    fields = ('player', 'is_active', 'joined_at', 'left_at')
    autocomplete_fields = ('player',)


class TeamCoachInline(admin.TabularInline):
    model = TeamCoach
    extra = 0
    fields = ('coach', 'role', 'is_active')
    autocomplete_fields = ('coach',)


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):

    list_display = ('name', 'teams_count', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name',)
    readonly_fields = ('created_at', 'updated_at')

    def teams_count(self, obj):
        if not obj:
            return ''
        return obj.teams.count()
    teams_count.short_description = 'Teams'


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):

    list_display = ('name', 'age_group', 'club', 'season', 'roster_size', 'get_status_display', 'created_at')
    list_filter = ('is_active', 'club', 'age_group', 'season')
    search_fields = ('name', 'age_group', 'club__name')
    readonly_fields = ('created_at', 'updated_at')
    autocomplete_fields = ('club',)
    inlines = (TeamPlayerInline, TeamCoachInline)

    fieldsets = (
        (_('Team Information'), {
            'fields': ('club', 'name', 'age_group', 'season', 'is_active')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def roster_size(self, obj):
        if not obj:
            return ''
        return obj.memberships.filter(is_active=True).count()
    roster_size.short_description = 'Active Players'

    def get_status_display(self, obj):
        if not obj:
            return ''
        if obj.is_active:
            return format_html('<span style="color: {}; font-weight: bold;">{}</span>', '#2ecc71', 'Active')
        return format_html('<span style="color: {};">{}</span>', '#95a5a6', 'Inactive')
    get_status_display.short_description = 'Status'


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):

    list_display = ('full_name', 'jersey_number', 'club', 'is_active', 'created_at')
    list_filter = ('is_active', 'club')
    search_fields = ('first_name', 'last_name', 'club__name')
    readonly_fields = ('created_at', 'updated_at')
    autocomplete_fields = ('club',)
    ordering = ('last_name', 'first_name')


@admin.register(Coach)
class CoachAdmin(admin.ModelAdmin):

    list_display = ('full_name', 'user', 'club', 'created_at')
    list_filter = ('club',)
    search_fields = ('full_name', 'user__email', 'club__name')
    readonly_fields = ('created_at', 'updated_at')
    autocomplete_fields = ('user', 'club')
