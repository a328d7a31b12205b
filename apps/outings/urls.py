# apps/outings/urls.py

from django.urls import path
from . import views

app_name = 'outings'

urlpatterns = [
    # Student
    path('', views.student_dashboard, name='student_dashboard'),
    path('requests/new/', views.create_request, name='request_create'),
    path('requests/<uuid:pk>/', views.request_detail, name='request_detail'),
    path('requests/<uuid:pk>/slip/', views.approval_slip, name='approval_slip'),

    # Reviewers
    path('advisor/', views.AdvisorDashboardView.as_view(), name='advisor_dashboard'),
    path('hod/', views.HODDashboardView.as_view(), name='hod_dashboard'),
    path('warden/', views.WardenDashboardView.as_view(), name='warden_dashboard'),
    path('requests/<uuid:pk>/review/', views.review_request, name='review_request'),

    # Principal
    path('principal/', views.PrincipalDashboardView.as_view(), name='principal_dashboard'),
    path('principal/export/', views.export_requests, name='export_requests'),

    # API endpoints
    path('api/requests/<uuid:pk>/slip-status/', views.slip_status, name='slip_status'),
]
