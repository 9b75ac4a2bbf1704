from django.urls import path, include

urlpatterns = [
    path('v1/', include('navigation.api.v1.urls')),
]
