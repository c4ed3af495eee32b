from django.urls import path

from .views import OrderDetailView, OrdersCollectionView, OrdersPingView, PlaceOrderView

app_name = "orders"

urlpatterns = [
    path("ping/", OrdersPingView.as_view(), name="ping"),
    path("", OrdersCollectionView.as_view(), name="orders-collection"),  # GET list / POST create
    path("<str:oid>/", OrderDetailView.as_view(), name="orders-detail"),  # GET / DELETE (cancel)
    path("<str:oid>/place/", PlaceOrderView.as_view(), name="orders-place"),
]
