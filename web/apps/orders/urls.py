from django.urls import path

from .views import MyOrdersView, OrdersCollectionView, OrderStatusView, RetrieveOrderView

app_name = "orders"

urlpatterns = [
    path("", OrdersCollectionView.as_view(), name="orders-collection"),  # GET list / POST create
    path("/meus-pedidos", MyOrdersView.as_view(), name="orders-mine"),
    path("/<uuid:order_id>", RetrieveOrderView.as_view(), name="orders-detail"),
    path("/<uuid:order_id>/status", OrderStatusView.as_view(), name="orders-status"),
]
