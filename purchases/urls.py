from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PurchaseBillViewSet, SupplierViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'suppliers', SupplierViewSet, basename='supplier')
router.register(r'purchases', PurchaseBillViewSet, basename='purchase')

urlpatterns = [
    path('', include(router.urls)),
]
