from django.urls import path

from .views import login_view, logout_view, me, user_detail, user_list, user_profile

urlpatterns = [
    path('auth/login/', login_view, name='login'),
    path('auth/logout/', logout_view, name='logout'),
    path('auth/me/', me, name='me'),
    path('users/', user_list, name='user_list'),
    path('users/<int:user_id>/', user_detail, name='user_detail'),
    path('users/<int:user_id>/profile/', user_profile, name='user_profile'),
]
