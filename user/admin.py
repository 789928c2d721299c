from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User, UserRole, Role


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0
    fields = ('role', 'club', 'created_at')
    readonly_fields = ('created_at',)
    autocomplete_fields = ('club',)


@admin.register(User)
class UserAdmin(BaseUserAdmin):

    list_display = ('email', 'first_name', 'last_name', 'roles_display', 'is_staff', 'is_active', 'date_joined')
    list_filter = ('is_staff', 'is_active', 'is_superuser', 'date_joined', 'role_grants__role')
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('-date_joined',)
    readonly_fields = ('date_joined', 'last_login')
    inlines = (UserRoleInline,)

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Personal info'), {'fields': ('first_name', 'last_name')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'password1', 'password2'),
        }),
    )

    def roles_display(self, obj):
        if not obj:
            return ''
        roles = sorted({grant.get_role_display() for grant in obj.role_grants.all()})
        return ', '.join(roles) or '-'
    roles_display.short_description = 'Roles'


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):

    list_display = ('user', 'get_role_display_colored', 'club', 'created_at')
    list_filter = ('role', 'club', 'created_at')
    search_fields = ('user__email', 'user__first_name', 'user__last_name', 'club__name')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('-created_at',)
    autocomplete_fields = ('user', 'club')

    def get_role_display_colored(self, obj):
        if not obj:
            return ''
        colors = {
            Role.SUPER_ADMIN: '#e74c3c',
            Role.CLUB_ADMIN: '#9b59b6',
            Role.COACH: '#3498db',
            Role.PARENT: '#95a5a6',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.role, '#95a5a6'),
            obj.get_role_display()
        )
    get_role_display_colored.short_description = 'Role'
    get_role_display_colored.admin_order_field = 'role'
