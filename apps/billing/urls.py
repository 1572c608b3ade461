from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'billing'

router = DefaultRouter()
router.register(r'order-items', views.OrderItemViewSet, basename='order-item')

urlpatterns = [
    # GET    /api/billing/order-items/?visit_id=   - Items on a visit
    # POST   /api/billing/order-items/             - Add item (takes stock)
    # PATCH  /api/billing/order-items/{id}/        - Change quantity/price
    # DELETE /api/billing/order-items/{id}/        - Remove item (returns stock)
    # GET    /api/billing/visits/{id}/bill/        - Current bill
    # POST   /api/billing/order-items/{id}/split/  - Charge item to guests
    # DELETE /api/billing/order-items/{id}/split/  - Back to the primary payer
    # GET    /api/billing/visits/{id}/split-bill/  - Bill per guest
    # GET    /api/billing/guests/{id}/bill/        - One guest's bill
    # POST   /api/billing/visits/{id}/pay/         - Settle visit
    # GET    /api/billing/daily-report/            - Daily sales report
    # GET    /api/billing/daily-closing/           - Closing status
    # POST   /api/billing/daily-closing/           - Close register
    path('visits/<uuid:visit_id>/bill/', views.visit_bill, name='visit-bill'),
    path('visits/<uuid:visit_id>/pay/', views.pay_visit, name='pay-visit'),
    path('visits/<uuid:visit_id>/split-bill/', views.visit_split_bill, name='visit-split-bill'),
    path('guests/<uuid:guest_id>/bill/', views.get_guest_bill, name='guest-bill'),
    path('daily-report/', views.get_daily_report, name='daily-report'),
    path('daily-closing/', views.daily_closing, name='daily-closing'),
    path('', include(router.urls)),
]
