from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'casts'

router = DefaultRouter()
router.register(r'', views.CastViewSet, basename='cast')

urlpatterns = [
    # GET    /api/casts/                        - List casts
    # POST   /api/casts/                        - Create cast profile
    # PATCH  /api/casts/{id}/                   - Update cast profile
    # DELETE /api/casts/{id}/                   - Deactivate cast
    # GET    /api/casts/{id}/performances/      - Performance history
    # POST   /api/casts/{id}/performances/      - Record daily performance
    # GET    /api/casts/{id}/compensation/      - Pay estimate for a period
    # GET    /api/casts/compensations/          - Pay estimates for all casts
    # GET    /api/casts/ranking/                - Ranking for a period
    # GET    /api/casts/me/                     - Own profile (cast)
    # PATCH  /api/casts/me/                     - Edit own profile (cast)
    # GET    /api/casts/me/performance/         - Own performance (cast)
    path('', include(router.urls)),
]
