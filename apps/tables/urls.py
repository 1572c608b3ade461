from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'tables'

router = DefaultRouter()
router.register(r'', views.TableViewSet, basename='table')

urlpatterns = [
    # GET    /api/tables/                    - List/filter tables
    # POST   /api/tables/                    - Create table
    # PATCH  /api/tables/{id}/               - Update table
    # DELETE /api/tables/{id}/               - Delete table
    # POST   /api/tables/{id}/set_status/    - Manual status change
    # GET    /api/tables/available/          - Free tables for a party
    path('', include(router.urls)),
]
