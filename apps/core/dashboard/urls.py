from django.urls import path

from .views import dashboard, guru_dashboard, healthcheck, siswa_dashboard

urlpatterns = [
    path('dashboard/', dashboard, name='dashboard'),
    path('dashboard/guru/<int:guru_id>/', guru_dashboard, name='guru_dashboard'),
    path('dashboard/siswa/<int:siswa_id>/', siswa_dashboard, name='siswa_dashboard'),
    path('healthcheck/', healthcheck, name='healthcheck'),
]
