# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from apps.core.views import health_check

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # JSON API
    path('api/', include('apps.core.urls')),
    path('api/', include('apps.board.urls')),

    # Monitoring
    path('health/', health_check, name='health'),
]

if settings.DEBUG:
    # Debug Toolbar when installed
    try:
        import debug_toolbar

        urlpatterns = [
            path('__debug__/', include(debug_toolbar.urls)),
        ] + urlpatterns
    except ImportError:
        pass

admin.site.site_header = 'Groove Board Admin'
admin.site.site_title = 'Groove Board'
admin.site.index_title = 'Administration'
