"""URL configuration for qrtrack project."""

from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

from apps.qr.views import TrackView

urlpatterns = [
    # Home -> Dashboard
    path('', RedirectView.as_view(url='/dashboard/', permanent=False), name='home'),

    # Django admin
    path('admin/', admin.site.urls),

    # Authentication
    path('accounts/', include('allauth.urls')),

    # Owner API
    path('api/qr/', include('apps.qr.api_urls', namespace='qr_api')),

    # Serverless-style tracking route: /api/track/{qrId}
    path('api/track/', TrackView.as_view(), name='track_missing'),
    path('api/track/<str:qr_id>', TrackView.as_view(), name='track'),

    # Dashboard (analytics)
    path('dashboard/', include('apps.dashboard.urls', namespace='dashboard')),

    # Administration
    path('staff/', include('apps.administration.urls', namespace='administration')),

    # Tracking mount point: /t/{qrId}
    path('t/', include('apps.qr.urls', namespace='qr')),
]
