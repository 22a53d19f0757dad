from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    # Telegram delivers updates to /webhook/
    path('', include('apps.bot.urls')),
]
