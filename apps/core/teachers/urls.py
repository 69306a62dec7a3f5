from django.urls import path

from .views import guru_detail, guru_list

urlpatterns = [
    path('', guru_list, name='guru_list'),
    path('<int:guru_id>/', guru_detail, name='guru_detail'),
]
