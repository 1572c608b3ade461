from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'compliance'

router = DefaultRouter()
router.register(r'id-verifications', views.IdVerificationViewSet, basename='id-verification')
router.register(r'complaints', views.ComplaintViewSet, basename='complaint')
router.register(r'reports', views.ComplianceReportViewSet, basename='report')

urlpatterns = [
    # GET    /api/compliance/id-verifications/               - Search ID checks
    # POST   /api/compliance/id-verifications/               - Record an ID check
    # POST   /api/compliance/id-verifications/{id}/verify/   - Mark verified
    # GET    /api/compliance/complaints/                     - Complaint register
    # POST   /api/compliance/complaints/                     - Log a complaint
    # POST   /api/compliance/complaints/{id}/resolve/        - Resolve
    # GET    /api/compliance/reports/                        - Generated reports
    # POST   /api/compliance/reports/generate/               - Generate a report
    # POST   /api/compliance/reports/{id}/status/            - Submit / approve
    # GET    /api/compliance/reports/stats/                  - Verification and report counts
    path('', include(router.urls)),
]
