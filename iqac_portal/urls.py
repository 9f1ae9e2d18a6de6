from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),  # Built-in Django admin
    path("events/", include(("events.urls", "events"), namespace="events")),
    path("ai/", include(("ai.urls", "ai"), namespace="ai")),  # generation proxy
]


if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
