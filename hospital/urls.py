"""
URL configuration for the hospital management project.

Routes the Django admin, the API endpoints registered in
``hms.routers`` and the OpenAPI documentation at ``/swagger/`` and
``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Hospital Management API",
    default_version='v1',
    description="Patients, appointments, wards, pharmacy and billing.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site
    path('admin/', admin.site.urls),
    path('', include('hms.routers')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
