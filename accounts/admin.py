from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Team, UserTeam

# ==================== ADMIN CLASSES ====================

class UserTeamInline(admin.TabularInline):
    model = UserTeam
    extra = 0
    autocomplete_fields = ('team',)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'nickname', 'email', 'is_staff', 'date_joined')
    search_fields = ('username', 'nickname', 'email')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Community profile', {'fields': ('nickname', 'profile_image', 'bio')}),
    )
    inlines = [UserTeamInline]
    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"{updated} users activated")
    activate_users.short_description = "Activate selected users"

    def deactivate_users(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"{updated} users deactivated")
    deactivate_users.short_description = "Deactivate selected users"


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'short_name', 'is_active', 'member_count')
    list_filter = ('is_active',)
    search_fields = ('name', 'short_name')

    def member_count(self, obj):
        return obj.memberships.count()
    member_count.short_description = 'Members'


@admin.register(UserTeam)
class UserTeamAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'team', 'priority', 'created_at')
    list_filter = ('team',)
    search_fields = ('user__username', 'user__nickname', 'team__name')
