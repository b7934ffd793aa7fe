from django.urls import path
from . import views

app_name = 'administration'

urlpatterns = [
    path('', views.overview, name='overview'),
    path('users/', views.users_list, name='users'),
    path('users/<uuid:user_id>/delete/', views.user_delete, name='user_delete'),
    path('users/<uuid:user_id>/toggle-admin/', views.user_toggle_admin, name='user_toggle_admin'),
    path('qr/', views.qr_list, name='qr'),
    path('qr/<str:qr_id>/delete/', views.qr_delete, name='qr_delete'),
]
