from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'visits'

router = DefaultRouter()
router.register(r'', views.VisitViewSet, basename='visit')

urlpatterns = [
    # GET    /api/visits/                          - List visits (?active=true)
    # POST   /api/visits/                          - Seat a customer
    # GET    /api/visits/{id}/                     - Visit detail
    # POST   /api/visits/{id}/move_table/          - Move to another table
    # POST   /api/visits/{id}/cancel/              - Cancel visit
    # POST   /api/visits/{id}/nominations/         - Add nomination
    # POST   /api/visits/nominations/{id}/end/     - End nomination
    # GET    /api/visits/{id}/guests/              - Guests in the party
    # POST   /api/visits/{id}/guests/              - Add guest
    # POST   /api/visits/guests/{id}/check_out/     - Guest leaves early
    # POST   /api/visits/guests/{id}/transfer/      - Move guest to another visit
    # POST   /api/visits/guests/{id}/primary_payer/ - Set primary payer
    path('', include(router.urls)),
]
