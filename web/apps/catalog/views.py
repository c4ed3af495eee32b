"""HTTP views for browsing restaurants and menus.

Admins browse the whole catalog; everyone else only sees entries from
their own country. Entries filtered out by country answer 404, exactly
like missing ones. The country filter comes from the shared authorization
policy, and lookups go through the same ``CatalogLookup`` port the order
service uses.
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.orders import providers
from apps.orders.authorization import catalog_country_filter
from apps.orders.errors import OrderDomainError
from apps.orders.permissions import HasOperationRole
from apps.orders.views import domain_error_response

from .schemas import MenuItemReadDTO, RestaurantReadDTO

NOT_FOUND = {"detail": "NOT_FOUND"}


class CatalogView(APIView):
    permission_classes = [HasOperationRole]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "catalog"

    def country_filter(self, request):
        return catalog_country_filter(request.identity.role, request.identity.country)


class RestaurantListView(CatalogView):
    operations = {"GET": "catalog.restaurants"}

    def get(self, request):
        try:
            restaurants = providers.get_catalog().find_restaurants(self.country_filter(request))
        except OrderDomainError as e:
            return domain_error_response(e)
        return Response([RestaurantReadDTO.from_domain(r).to_json() for r in restaurants])


class RestaurantDetailView(CatalogView):
    operations = {"GET": "catalog.restaurant"}

    def get(self, request, rid: str):
        try:
            restaurant = providers.get_catalog().find_restaurant(rid, self.country_filter(request))
        except OrderDomainError as e:
            return domain_error_response(e)
        if restaurant is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(RestaurantReadDTO.from_domain(restaurant).to_json())


class RestaurantMenuView(CatalogView):
    operations = {"GET": "catalog.menu"}

    def get(self, request, rid: str):
        country = self.country_filter(request)
        try:
            catalog = providers.get_catalog()
            if catalog.find_restaurant(rid, country) is None:
                return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
            items = catalog.find_menu_items(rid, country)
        except OrderDomainError as e:
            return domain_error_response(e)
        return Response([MenuItemReadDTO.from_domain(m).to_json() for m in items])


class MenuItemDetailView(CatalogView):
    operations = {"GET": "catalog.menu_item"}

    def get(self, request, mid: str):
        try:
            item = providers.get_catalog().find_menu_item(mid, self.country_filter(request))
        except OrderDomainError as e:
            return domain_error_response(e)
        if item is None:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(MenuItemReadDTO.from_domain(item).to_json())
