from django.db import IntegrityError, transaction
from django.db.models import Q
from rest_framework import viewsets, status, decorators
from rest_framework.response import Response

from billing.models import Bill
from billing.serializers import BillSummarySerializer
from .models import Customer
from .serializers import CustomerSerializer

SEARCH_LIMIT = 50
DUPLICATE_MOBILE = 'Another customer with this mobile number already exists.'


class CustomerViewSet(viewsets.ModelViewSet):
    queryset = Customer.objects.all().order_by('name')
    serializer_class = CustomerSerializer
    pagination_class = None
    http_method_names = ['get', 'post', 'put', 'delete']

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        existing = Customer.objects.filter(mobile=serializer.validated_data['mobile']).first()
        if existing:
            return Response({'message': 'Customer already exists', **CustomerSerializer(existing).data})
        try:
            with transaction.atomic():
                customer = serializer.save()
        except IntegrityError:
            # Lost a race against another insert for the same mobile
            customer = Customer.objects.get(mobile=serializer.validated_data['mobile'])
            return Response({'message': 'Customer already exists', **CustomerSerializer(customer).data})
        return Response({'message': 'Customer added', **CustomerSerializer(customer).data}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        customer = self.get_object()
        serializer = self.get_serializer(customer, data=request.data)
        serializer.is_valid(raise_exception=True)
        mobile = serializer.validated_data['mobile']
        if Customer.objects.filter(mobile=mobile).exclude(pk=customer.pk).exists():
            return Response({'error': DUPLICATE_MOBILE}, status=status.HTTP_400_BAD_REQUEST)
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            return Response({'error': DUPLICATE_MOBILE}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'message': 'Customer updated successfully', **serializer.data})

    def destroy(self, request, *args, **kwargs):
        customer = self.get_object()
        customer.delete()
        return Response({'message': 'Customer deleted'})

    @decorators.action(detail=False, methods=['get'], url_path='search')
    def search(self, request):
        q = (request.query_params.get('query') or '').strip()
        queryset = self.get_queryset()
        if q:
            queryset = queryset.filter(Q(name__icontains=q) | Q(mobile__icontains=q))
        return Response(self.get_serializer(queryset[:SEARCH_LIMIT], many=True).data)

    @decorators.action(detail=True, methods=['get'], url_path='history')
    def history(self, request, pk=None):
        """Every bill raised against this customer, newest first."""
        customer = self.get_object()
        bills = Bill.objects.filter(customer=customer).prefetch_related('items').order_by('-id')
        return Response({
            'customer': CustomerSerializer(customer).data,
            'bills': BillSummarySerializer(bills, many=True).data,
        })
