from django.urls import path

from .views import MenuItemDetailView, RestaurantDetailView, RestaurantListView, RestaurantMenuView

app_name = "catalog"

urlpatterns = [
    path("restaurants/", RestaurantListView.as_view(), name="restaurants"),
    path("restaurants/<str:rid>/", RestaurantDetailView.as_view(), name="restaurant-detail"),
    path("restaurants/<str:rid>/menu/", RestaurantMenuView.as_view(), name="restaurant-menu"),
    path("menu-items/<str:mid>/", MenuItemDetailView.as_view(), name="menu-item-detail"),
]
