from django.urls import path

from social.consumers import FeedConsumer

websocket_urlpatterns = [
    path('ws/feed/', FeedConsumer.as_asgi()),
]
