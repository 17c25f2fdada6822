from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ProductViewSet, StockAdjustmentCreateView

router = DefaultRouter(trailing_slash=False)
router.register(r'products', ProductViewSet, basename='product')

urlpatterns = [
    path('stock-adjustments', StockAdjustmentCreateView.as_view(), name='stock_adjustment_create'),
    path('', include(router.urls)),
]
