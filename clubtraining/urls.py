from django.contrib import admin
from django.urls import path, include
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from clubtraining.health import health_check

schema_view = get_schema_view(
    openapi.Info(
        title="Club Training API",
        default_version='v1',
        description=(
            "Scheduling of one-off and weekly recurring team training sessions, "
            "per-player attendance and attendance statistics. Weekdays are numbered "
            "0 = Sunday ... 6 = Saturday; times are facility wall-clock time."
        ),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health_check, name='health-check'),

    path('api/v1/auth/', include('user.api.urls')),
    path('api/v1/training/', include('training.api.urls')),

    path('swagger.json', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
