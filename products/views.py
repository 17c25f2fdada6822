import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from rest_framework import generics, serializers, status, viewsets, decorators
from rest_framework.response import Response

from .models import Product
from .serializers import ProductSerializer, StockAdjustmentSerializer
from .stock import apply_stock_delta

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


class ProductViewSet(viewsets.ModelViewSet):
    queryset = Product.objects.all().order_by('-id')
    serializer_class = ProductSerializer
    pagination_class = None
    http_method_names = ['get', 'post', 'put', 'delete']

    @decorators.action(detail=False, methods=['get'], url_path='search')
    def search(self, request):
        """Match name, batch or HSN code; newest first."""
        q = (request.query_params.get('query') or '').strip()
        queryset = self.get_queryset()
        if q:
            queryset = queryset.filter(Q(name__icontains=q) | Q(batch__icontains=q) | Q(hsn__icontains=q))
        return Response(self.get_serializer(queryset[:SEARCH_LIMIT], many=True).data)

    def update(self, request, *args, **kwargs):
        # PUT only touches the fields that were sent
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            raise serializers.ValidationError('Product with same name & batch already exists')

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            raise serializers.ValidationError('Product with same name & batch already exists')

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        product.delete()
        return Response({'message': 'Product deleted'})


class StockAdjustmentCreateView(generics.CreateAPIView):
    """Log a manual correction and move the product's stock by the same amount."""
    serializer_class = StockAdjustmentSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            adjustment = serializer.save()
            apply_stock_delta(adjustment.product_id, adjustment.quantity_adjusted)
        product = Product.objects.get(pk=adjustment.product_id)
        logger.info('Stock adjustment %s recorded for product %s (%s)', adjustment.id, product.id, adjustment.reason)
        data = dict(serializer.data)
        data['new_quantity'] = product.quantity
        return Response(data, status=status.HTTP_201_CREATED)
