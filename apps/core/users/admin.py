from django.contrib import admin

from .models import AuditLog, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('id', 'role', 'username', 'nip', 'nisn', 'is_active')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'nip', 'nisn')


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'user', 'target_model', 'target_id')
    list_filter = ('action', 'method', 'created_at')
    search_fields = ('details', 'path', 'target_model', 'target_id', 'user__username')
