from django.urls import path
from . import views

app_name = 'bot'

urlpatterns = [
    # Telegram POSTs every update here (see the set_webhook management command)
    path('webhook/', views.telegram_webhook, name='webhook'),
]
