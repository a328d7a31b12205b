from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.views.generic import RedirectView


urlpatterns = [
    # Admin site
    path('admin/', admin.site.urls),

    # Home page redirect - each role lands on its own dashboard
    path('', RedirectView.as_view(pattern_name='users:dashboard'), name='home'),

    # Users app (authentication, profiles, principal actions)
    path('users/', include('apps.users.urls')),

    # Outing requests, approvals and slips
    path('outings/', include('apps.outings.urls')),

    # Rooms and keys
    path('hostels/', include('apps.hostels.urls')),

    # Student complaints
    path('complaints/', include('apps.complaints.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
