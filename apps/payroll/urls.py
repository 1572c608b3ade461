from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payroll'

router = DefaultRouter()
router.register(r'rules', views.PayrollRuleViewSet, basename='rule')
router.register(r'nomination-types', views.NominationTypeViewSet, basename='nomination-type')
router.register(r'assignments', views.AssignmentViewSet, basename='assignment')
router.register(r'calculations', views.PayrollCalculationViewSet, basename='calculation')

urlpatterns = [
    # GET/POST        /api/payroll/rules/                          - Rules with tiers
    # PATCH/DELETE    /api/payroll/rules/{id}/                     - Edit / deactivate rule
    # GET/POST        /api/payroll/nomination-types/               - Nomination types
    # PATCH/DELETE    /api/payroll/nomination-types/{id}/          - Edit / deactivate type
    # GET/POST        /api/payroll/assignments/                    - Rule assignments
    # GET             /api/payroll/calculations/                   - Payroll history
    # POST            /api/payroll/calculations/calculate/         - Calculate one cast
    # POST            /api/payroll/calculations/monthly/           - Monthly run
    # POST            /api/payroll/calculations/{id}/approve/      - Approve
    path('', include(router.urls)),
]
