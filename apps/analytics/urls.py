from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Customer analytics
    path('customers/', views.customer_metrics, name='customer-metrics'),
    path('customers/<uuid:customer_id>/', views.customer_detail, name='customer-detail'),
    path('rfm/', views.rfm, name='rfm'),
    path('summary/', views.summary, name='summary'),
    path('at-risk/', views.at_risk, name='at-risk'),
    path('vip/', views.vip, name='vip'),

    # Reports
    path('cohorts/', views.cohorts, name='cohorts'),
    path('trends/', views.trends, name='trends'),

    # Dashboard
    path('dashboard/', views.dashboard, name='dashboard'),
]
