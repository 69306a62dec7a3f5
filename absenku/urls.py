from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/', include('apps.core.users.urls')),
    path('api/teachers/', include('apps.core.teachers.urls')),
    path('api/classes/', include('apps.core.academics.urls')),
    path('api/students/', include('apps.core.students.urls')),
    path('api/attendance/', include('apps.core.attendance.urls')),
    path('api/leave-requests/', include('apps.core.leaves.urls')),
    path('api/', include('apps.core.dashboard.urls')),
    path('api/exports/', include('apps.core.reports.urls')),
]
