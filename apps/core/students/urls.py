from django.urls import path

from .views import siswa_detail, siswa_list

urlpatterns = [
    path('', siswa_list, name='siswa_list'),
    path('<int:siswa_id>/', siswa_detail, name='siswa_detail'),
]
