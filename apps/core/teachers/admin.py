from django.contrib import admin

from .models import Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ('nip', 'nama', 'user', 'created_at')
    search_fields = ('nip', 'nama')
