from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('', views.dashboard_index, name='index'),
    path('qr/<str:qr_id>/', views.qr_analytics, name='qr_analytics'),
]
