from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BillViewSet, HeldBillListView

router = DefaultRouter(trailing_slash=False)
router.register(r'bills', BillViewSet, basename='bill')

urlpatterns = [
    path('held-bills', HeldBillListView.as_view(), name='held_bill_list'),
    path('', include(router.urls)),
]
