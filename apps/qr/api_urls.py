from django.urls import path
from . import api

app_name = 'qr_api'

urlpatterns = [
    path('', api.qr_collection, name='list'),
    path('<str:qr_id>/', api.qr_detail, name='detail'),
    path('<str:qr_id>/destination/', api.qr_update_destination, name='destination'),
    path('<str:qr_id>/delete/', api.qr_delete, name='delete'),
    path('<str:qr_id>/scans/', api.qr_scans, name='scans'),
    path('<str:qr_id>/download/', api.qr_download, name='download'),
    path('<str:qr_id>/copied/', api.qr_copied, name='copied'),
]
