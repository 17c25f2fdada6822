from django.urls import path
from .views import CurrentISTDateView, DashboardStatsView, ReportView

urlpatterns = [
    path('reports', ReportView.as_view(), name='reports'),
    path('dashboard-stats', DashboardStatsView.as_view(), name='dashboard_stats'),
    path('current-ist-date', CurrentISTDateView.as_view(), name='current_ist_date'),
]
