from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def index(request):
    return JsonResponse({'message': 'Pharmacy POS API'})


urlpatterns = [
    path('', index, name='index'),
    path('admin/', admin.site.urls),
    path('api/', include('accounts.urls')),
    path('api/', include('products.urls')),
    path('api/', include('customers.urls')),
    path('api/', include('purchases.urls')),
    path('api/', include('billing.urls')),
    path('api/', include('preferences.urls')),
    path('api/', include('reports.urls')),
]
