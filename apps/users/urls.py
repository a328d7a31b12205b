# apps/users/urls.py

from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('login/', views.custom_login, name='login'),
    path('logout/', views.custom_logout, name='logout'),
    path('register/', views.register, name='register'),

    # Dashboard & profile
    path('dashboard/', views.user_dashboard, name='dashboard'),
    path('profile/', views.profile_view, name='profile'),
    path('profile/photo/', views.upload_profile_photo, name='upload_photo'),

    # Principal actions
    path('staff/<uuid:pk>/toggle-approval/', views.toggle_staff_approval, name='toggle_staff_approval'),
    path('students/<uuid:pk>/toggle-block/', views.toggle_student_block, name='toggle_student_block'),
]
