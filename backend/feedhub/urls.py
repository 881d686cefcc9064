from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path("admin/", admin.site.urls),

    # JSON API consumed by the feed client
    path("api/", include("social.urls")),
]

# Uploaded media (debug only, serve with the web server in production)
urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
