from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'staff'

router = DefaultRouter()
router.register(r'', views.StaffViewSet, basename='staff')

urlpatterns = [
    # GET    /api/staff/                       - Search staff
    # POST   /api/staff/                       - Register staff
    # GET    /api/staff/{id}/                  - Staff detail
    # PATCH  /api/staff/{id}/                  - Update staff
    # DELETE /api/staff/{id}/                  - Deactivate staff
    # GET    /api/staff/unregistered_casts/    - Cast staff without profile
    path('', include(router.urls)),
]
