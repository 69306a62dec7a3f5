from django.urls import path

from .views import (
    absensi_check_in,
    absensi_check_out,
    absensi_detail,
    absensi_list,
    absensi_stats,
    absensi_today,
)

urlpatterns = [
    path('', absensi_list, name='absensi_list'),
    path('<int:absensi_id>/', absensi_detail, name='absensi_detail'),
    path('today/', absensi_today, name='absensi_today'),
    path('stats/', absensi_stats, name='absensi_stats'),
    path('check-in/', absensi_check_in, name='absensi_check_in'),
    path('check-out/', absensi_check_out, name='absensi_check_out'),
]
