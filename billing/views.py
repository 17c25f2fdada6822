import logging

from django.db import DatabaseError
from rest_framework import generics, status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from . import services
from .models import Bill
from .serializers import BillInputSerializer, BillSerializer, BillSummarySerializer

logger = logging.getLogger(__name__)


def _bill_id(pk):
    try:
        return int(pk)
    except (TypeError, ValueError):
        raise NotFound('Bill not found')


class BillViewSet(viewsets.GenericViewSet):
    """Sales. The list shows finalized bills only; parked carts live under held-bills."""
    queryset = Bill.objects.all().prefetch_related('items')
    serializer_class = BillSerializer

    def list(self, request):
        bills = Bill.objects.filter(status=Bill.COMPLETED).order_by('-id')
        return Response(BillSummarySerializer(bills, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(BillSerializer(self.get_object()).data)

    def create(self, request):
        serializer = BillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            bill = services.create_bill(serializer.validated_data)
        except DatabaseError:
            logger.exception('POST /api/bills failed')
            return Response({'error': 'Failed to create bill'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        bill = self.get_queryset().get(pk=bill.pk)
        return Response({'message': 'Bill created', **BillSerializer(bill).data}, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = BillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            bill = services.update_bill(_bill_id(pk), serializer.validated_data)
        except DatabaseError:
            logger.exception('PUT /api/bills/%s failed', pk)
            return Response({'error': 'Failed to update bill'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        bill = self.get_queryset().get(pk=bill.pk)
        return Response({'message': 'Bill updated', **BillSerializer(bill).data})

    def destroy(self, request, pk=None):
        try:
            services.delete_held_bill(_bill_id(pk))
        except DatabaseError:
            logger.exception('DELETE /api/bills/%s failed', pk)
            return Response({'error': 'Failed to delete bill'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({'message': 'Held bill deleted'})


class HeldBillListView(generics.ListAPIView):
    serializer_class = BillSerializer
    pagination_class = None

    def get_queryset(self):
        return Bill.objects.filter(status=Bill.HELD).prefetch_related('items').order_by('-id')
