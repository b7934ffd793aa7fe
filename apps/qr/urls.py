from django.urls import path
from .views import TrackView

app_name = 'qr'

urlpatterns = [
    # Tracking: /t/{qrId} -> destination
    path('', TrackView.as_view(), name='track_missing'),
    path('<str:qr_id>', TrackView.as_view(), name='track'),
]
