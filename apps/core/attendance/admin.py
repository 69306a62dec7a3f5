from django.contrib import admin

from .models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = (
        'tanggal',
        'siswa',
        'kelas',
        'status',
        'waktu_masuk',
        'waktu_pulang',
        'guru',
    )
    list_filter = ('status', 'kelas', 'tanggal')
    search_fields = (
        'siswa__nisn',
        'siswa__nama',
        'kelas__nama_kelas',
    )
