from django.urls import path

from .views import export_excel, export_pdf, rekap

urlpatterns = [
    path('pdf/', export_pdf, name='export_pdf'),
    path('excel/', export_excel, name='export_excel'),
    path('rekap/', rekap, name='rekap_absensi'),
]
