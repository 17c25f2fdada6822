import logging

from django.db import DatabaseError
from rest_framework import viewsets, mixins, status
from rest_framework.response import Response

from . import services
from .models import PurchaseBill, Supplier
from .serializers import PurchaseBillSerializer, PurchaseInputSerializer, SupplierSerializer

logger = logging.getLogger(__name__)


class SupplierViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    queryset = Supplier.objects.all().order_by('name')
    serializer_class = SupplierSerializer
    pagination_class = None


class PurchaseBillViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = PurchaseBill.objects.all().prefetch_related('items').order_by('-id')
    serializer_class = PurchaseBillSerializer
    pagination_class = None

    def create(self, request):
        serializer = PurchaseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            purchase = services.create_purchase(serializer.validated_data)
        except DatabaseError:
            logger.exception('POST /api/purchases failed')
            return Response({'error': 'Failed to save purchase'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        purchase = self.get_queryset().get(pk=purchase.pk)
        return Response(
            {'message': 'Purchase saved', **PurchaseBillSerializer(purchase).data},
            status=status.HTTP_201_CREATED,
        )
