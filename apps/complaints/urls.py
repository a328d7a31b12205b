# apps/complaints/urls.py

from django.urls import path
from . import views

app_name = 'complaints'

urlpatterns = [
    path('', views.my_complaints, name='my_complaints'),
    path('all/', views.ComplaintListView.as_view(), name='complaint_list'),
    path('<uuid:pk>/respond/', views.respond_to_complaint, name='respond'),
]
