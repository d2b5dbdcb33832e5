from django.urls import path

from kinship.api import api

urlpatterns = [
    path('api/', api.urls),
]
