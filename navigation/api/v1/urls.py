from django.urls import path
from . import views

urlpatterns = [
    path('geocode/', views.GeocodeView.as_view(), name='v1-geocode'),
    path('route/', views.RouteView.as_view(), name='v1-route'),
    path('stations/', views.StationListView.as_view(), name='v1-stations'),
    path('stations/along-route/', views.StationsAlongRouteView.as_view(), name='v1-stations-along-route'),
    path('journey/', views.JourneyView.as_view(), name='v1-journey'),
]
