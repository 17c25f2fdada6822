from datetime import datetime

from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.models import Bill
from customers.models import Customer
from preferences.models import Setting
from products.models import Product
from purchases.models import Supplier
from .queries import REPORTS, add_months


def _parse_date(value):
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None


def _parse_date_range(request):
    params = request.query_params
    start_d = _parse_date(params.get('fromDate') or params.get('from_date'))
    end_d = _parse_date(params.get('toDate') or params.get('to_date'))
    return start_d, end_d


class ReportView(APIView):

    def get(self, request):
        report_type = request.query_params.get('type')
        report = REPORTS.get(report_type)
        if report is None:
            return Response(
                {'error': f'Unknown report type. Choose one of: {", ".join(REPORTS)}'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        start_d, end_d = _parse_date_range(request)
        data = report(start_d, end_d)
        return Response({
            'type': report_type,
            'from_date': str(start_d) if start_d else None,
            'to_date': str(end_d) if end_d else None,
            **data,
        })


class DashboardStatsView(APIView):

    def get(self, request):
        today = timezone.localdate()
        todays_sales = Bill.objects.filter(status=Bill.COMPLETED, bill_date=today).aggregate(
            total=Sum('grand_total'), count=Count('id')
        )
        threshold = Setting.objects.low_stock_threshold()
        expiry_limit = add_months(today, 3).strftime('%Y-%m')
        return Response({
            'today_sales': float(todays_sales['total'] or 0),
            'today_bill_count': todays_sales['count'] or 0,
            'held_bill_count': Bill.objects.filter(status=Bill.HELD).count(),
            'product_count': Product.objects.count(),
            'low_stock_count': Product.objects.filter(quantity__lte=threshold).count(),
            'low_stock_threshold': threshold,
            'expiring_soon_count': Product.objects.filter(
                quantity__gt=0, expiry__gte=today.strftime('%Y-%m'), expiry__lte=expiry_limit
            ).exclude(expiry='').count(),
            'customer_count': Customer.objects.count(),
            'supplier_count': Supplier.objects.count(),
        })


class CurrentISTDateView(APIView):
    """Bills are dated in shop time (IST) whatever the till's clock says."""

    def get(self, request):
        now = timezone.localtime()
        return Response({'date': now.date().isoformat(), 'datetime': now.isoformat()})
