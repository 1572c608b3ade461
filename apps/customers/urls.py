from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # GET    /api/customers/                 - Search customers
    # POST   /api/customers/                 - Create customer
    # GET    /api/customers/{id}/            - Customer detail
    # PATCH  /api/customers/{id}/            - Update customer
    # DELETE /api/customers/{id}/            - Delete customer
    # GET    /api/customers/{id}/visits/     - Visit history
    # POST   /api/customers/bulk_status/     - Bulk status change
    path('', include(router.urls)),
]
