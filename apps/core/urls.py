# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTHENTICATION ===
    path('auth/signup/', views.signup_view, name='signup'),
    path('auth/login/', views.login_view, name='login'),
    path('auth/logout/', views.logout_view, name='logout'),

    # === CURRENT USER ===
    path('me/', views.me, name='me'),
    path('me/profile/', views.profile, name='profile'),
    path('me/assigned/', views.assigned_items, name='assigned_items'),
    path('me/invitations/', views.my_invitations, name='my_invitations'),

    # === ACTIVITY ===
    path('activity/', views.activity_feed, name='activity_feed'),
]
