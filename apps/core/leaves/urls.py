from django.urls import path

from .views import (
    pengajuan_izin_detail,
    pengajuan_izin_list,
    pengajuan_izin_pending,
    pengajuan_izin_review,
)

urlpatterns = [
    path('', pengajuan_izin_list, name='pengajuan_izin_list'),
    path('pending/', pengajuan_izin_pending, name='pengajuan_izin_pending'),
    path('<int:pengajuan_id>/', pengajuan_izin_detail, name='pengajuan_izin_detail'),
    path('<int:pengajuan_id>/review/', pengajuan_izin_review, name='pengajuan_izin_review'),
]
