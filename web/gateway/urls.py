from django.http import JsonResponse
from django.urls import include, path


def welcome_view(_request):
    return JsonResponse({"message": "Bem-vindo à API do Crochê da Ruiva!"})


urlpatterns = [
    path("", welcome_view, name="welcome"),
    path("", include("apps.monitoring.urls")),
    path("api/auth/", include("apps.accounts.urls")),
    path("api/products", include("apps.catalog.urls")),
    path("api/orders", include("apps.orders.urls")),
]
