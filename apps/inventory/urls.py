from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'products', views.ProductViewSet, basename='product')
router.register(r'movements', views.InventoryMovementViewSet, basename='movement')

urlpatterns = [
    # GET    /api/inventory/products/                   - Search products
    # POST   /api/inventory/products/                   - Create product
    # PATCH  /api/inventory/products/{id}/              - Edit product
    # DELETE /api/inventory/products/{id}/              - Deactivate product
    # GET    /api/inventory/products/{id}/movements/    - Product movement history
    # POST   /api/inventory/products/{id}/movements/    - Record stock movement
    # GET    /api/inventory/products/{id}/report/       - Product stock report
    # GET    /api/inventory/products/stats/             - Inventory statistics
    # GET    /api/inventory/products/alerts/            - Stock alerts
    # GET    /api/inventory/products/reorder/           - Reorder suggestions
    # GET    /api/inventory/products/categories/        - Category list
    # GET    /api/inventory/products/movement-report/   - Period movement report
    # POST   /api/inventory/products/bulk-movement/     - Many movements
    # POST   /api/inventory/products/bulk-delete/       - Deactivate many
    # GET    /api/inventory/movements/                  - Movement log
    path('', include(router.urls)),
]
