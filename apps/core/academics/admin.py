from django.contrib import admin

from .models import SchoolClass


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ('nama_kelas', 'wali_kelas', 'created_at')
    search_fields = ('nama_kelas', 'wali_kelas__nama', 'wali_kelas__nip')
