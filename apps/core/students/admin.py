from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('nisn', 'nama', 'kelas', 'user')
    list_filter = ('kelas',)
    search_fields = ('nisn', 'nama')
