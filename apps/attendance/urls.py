from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'attendance'

router = DefaultRouter()
router.register(r'records', views.AttendanceRecordViewSet, basename='record')
router.register(r'shift-requests', views.ShiftRequestViewSet, basename='shift-request')
router.register(r'shifts', views.ConfirmedShiftViewSet, basename='shift')

urlpatterns = [
    # POST   /api/attendance/clock/                         - Clock in/out, break start/end
    # GET    /api/attendance/today/                         - Own record for today
    # GET    /api/attendance/summary/?year=&month=          - Monthly summary
    path('clock/', views.clock, name='clock'),
    path('today/', views.today, name='today'),
    path('summary/', views.summary, name='summary'),

    # POST   /api/attendance/qr/generate/                   - Issue a QR code
    # GET    /api/attendance/qr/mine/                       - Own active code
    # POST   /api/attendance/qr/scan/                       - Record a scan
    # GET    /api/attendance/qr/stats/                      - Today's scan stats
    # GET    /api/attendance/qr/history/                    - Scan log
    path('qr/generate/', views.generate_qr, name='qr-generate'),
    path('qr/mine/', views.my_qr, name='qr-mine'),
    path('qr/scan/', views.scan_qr, name='qr-scan'),
    path('qr/stats/', views.get_qr_stats, name='qr-stats'),
    path('qr/history/', views.get_qr_history, name='qr-history'),

    # GET    /api/attendance/records/                       - Attendance records
    # PATCH  /api/attendance/records/{id}/                  - Manual correction
    # GET    /api/attendance/shift-requests/                - Shift requests
    # POST   /api/attendance/shift-requests/                - Submit a request
    # POST   /api/attendance/shift-requests/{id}/approve/   - Approve
    # POST   /api/attendance/shift-requests/{id}/reject/    - Reject with reason
    # GET    /api/attendance/shifts/                        - Confirmed shifts
    # POST   /api/attendance/shifts/                        - Schedule a shift
    # GET    /api/attendance/shifts/weekly/                 - Week schedule
    path('', include(router.urls)),
]
