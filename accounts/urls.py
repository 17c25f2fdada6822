from django.urls import path
from .views import LoginView, LogoutView, LogoutBeaconView

urlpatterns = [
    path('login', LoginView.as_view(), name='login'),
    path('logout', LogoutView.as_view(), name='logout'),
    path('logout-beacon', LogoutBeaconView.as_view(), name='logout_beacon'),
]
