"""
URL configuration for Platinum Management.

Every API route lives under /api/ and is owned by one app's urls module.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/staff/', include('apps.staff.urls')),
    path('api/customers/', include('apps.customers.urls')),
    path('api/tables/', include('apps.tables.urls')),
    path('api/visits/', include('apps.visits.urls')),
    path('api/billing/', include('apps.billing.urls')),
    path('api/reservations/', include('apps.reservations.urls')),
    path('api/casts/', include('apps.casts.urls')),
    path('api/inventory/', include('apps.inventory.urls')),
    path('api/bottle-keeps/', include('apps.bottle_keeps.urls')),
    path('api/payroll/', include('apps.payroll.urls')),
    path('api/attendance/', include('apps.attendance.urls')),
    path('api/compliance/', include('apps.compliance.urls')),
    path('api/analytics/', include('apps.analytics.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
