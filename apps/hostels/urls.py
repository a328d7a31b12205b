# apps/hostels/urls.py

from django.urls import path
from . import views

app_name = 'hostels'

urlpatterns = [
    # Room board
    path('', views.RoomBoardView.as_view(), name='room_board'),
    path('rooms/create/', views.RoomCreateView.as_view(), name='room_create'),
    path('rooms/<uuid:pk>/', views.room_detail, name='room_detail'),
    path('rooms/<uuid:pk>/update/', views.RoomUpdateView.as_view(), name='room_update'),

    # Residents
    path('rooms/<uuid:pk>/residents/assign/', views.assign_resident, name='assign_resident'),
    path('rooms/<uuid:pk>/residents/<uuid:profile_id>/remove/', views.remove_resident, name='remove_resident'),

    # Keys
    path('rooms/<uuid:pk>/keys/issue/', views.issue_key, name='issue_key'),
    path('rooms/<uuid:pk>/keys/<uuid:profile_id>/return/', views.return_key, name='return_key'),

    # API endpoints
    path('api/rooms/<uuid:pk>/', views.room_detail_json, name='api_room_detail'),
]
