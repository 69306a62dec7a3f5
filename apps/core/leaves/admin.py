from django.contrib import admin

from .models import LeaveRequest


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ('tanggal', 'siswa', 'jenis', 'status', 'reviewer', 'reviewed_at')
    list_filter = ('status', 'jenis', 'tanggal')
    search_fields = ('siswa__nisn', 'siswa__nama', 'alasan')
