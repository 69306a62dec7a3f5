from django.urls import path

from .views import kelas_detail, kelas_list

urlpatterns = [
    path('', kelas_list, name='kelas_list'),
    path('<int:kelas_id>/', kelas_detail, name='kelas_detail'),
]
