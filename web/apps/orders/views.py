"""HTTP views for the orders app.

This module contains DRF API views used by the orders service. Views are
kept intentionally small: they validate requests (via Pydantic), map them
to domain DTOs, delegate to the domain service together with the caller's
``Identity`` (resolved by ``gateway.middleware.IdentityMiddleware``), and
return an HTTP response.

The views obtain a configured ``OrderService`` from ``get_order_service()``,
which wires either the HTTP catalog client or the in-process catalog
depending on runtime settings. This allows tests and local development to
swap implementations without changing view logic.

Role gating happens twice: ``HasOperationRole`` consults the explicit
``OPERATION_ROLES`` table before the view runs, and the domain service
enforces its own rules for place/cancel.
"""
from django.core.paginator import Paginator
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from . import providers
from .errors import (
    AccessDenied,
    CatalogUnavailable,
    InvalidArgument,
    InvalidStateTransition,
    NotFound,
    OrderDomainError,
)
from .permissions import HasOperationRole
from .schemas import CreateOrderDTO, OrderReadDTO, PlaceOrderDTO

ERROR_STATUS = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (AccessDenied, status.HTTP_403_FORBIDDEN),
    (InvalidArgument, status.HTTP_400_BAD_REQUEST),
    (InvalidStateTransition, status.HTTP_400_BAD_REQUEST),
    (CatalogUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def domain_error_response(exc: OrderDomainError) -> Response:
    """Map a domain error to ``{"detail": code, "message": text}`` and its HTTP status."""
    status_code = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 400)
    return Response({"detail": exc.code, "message": exc.message}, status=status_code)


def validation_error_response(exc: ValidationError) -> Response:
    return Response(
        {"detail": "INVALID_ARGUMENT", "message": str(exc)},
        status=status.HTTP_400_BAD_REQUEST,
    )


class OrdersPingView(APIView):
    """Simple health-check endpoint for the orders module.

    This view returns a minimal JSON payload used by liveness/health
    checks and by automated smoke-tests. It requires no identity.
    """

    def get(self, request):
        return Response({"ok": True})


class OrdersCollectionView(APIView):
    """List the caller's visible orders (GET) or create a draft order (POST)."""

    permission_classes = [HasOperationRole]
    throttle_classes = [ScopedRateThrottle]
    operations = {"GET": "orders.list", "POST": "orders.create"}

    def get_throttles(self):
        # DRF evaluates throttles in initial(), before get/post
        self.throttle_scope = "orders_list" if self.request.method == "GET" else "orders_create"
        return [throttle() for throttle in self.throttle_classes]

    def get(self, request):
        """Return a page of orders visible to the caller.

        Query params ``page`` (default 1) and ``page_size`` (default 20,
        max 100) control pagination.
        """
        try:
            page = int(request.GET.get("page", 1))
            page_size = min(max(int(request.GET.get("page_size", 20)), 1), 100)
        except ValueError:
            return Response(
                {"detail": "INVALID_ARGUMENT", "message": "page and page_size must be integers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        orders = providers.get_order_service().find_all(request.identity)
        p = Paginator(orders, page_size)
        page_obj = p.get_page(page)

        return Response(
            {
                "count": p.count,
                "page": page_obj.number,
                "page_size": page_size,
                "results": [OrderReadDTO.from_domain(o).to_json() for o in page_obj.object_list],
            },
            status=200,
        )

    def post(self, request):
        """Create a new order in ``created`` status.

        Returns:
            Response: One of the following responses.
            - 201 with the order body when created.
            - 400 for DTO validation errors or invalid arguments.
            - 404 when the restaurant or a menu item is not available in
              the caller's country.
            - 503 when the catalog service is unavailable.
        """
        try:
            dto = CreateOrderDTO.model_validate(request.data)
        except ValidationError as e:
            return validation_error_response(e)

        try:
            order = providers.get_order_service().create(
                dto.to_domain_items(), dto.restaurant_id, request.identity
            )
        except OrderDomainError as e:
            return domain_error_response(e)

        return Response(OrderReadDTO.from_domain(order).to_json(), status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Retrieve (GET) or cancel (DELETE) a single order."""

    permission_classes = [HasOperationRole]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"
    operations = {"GET": "orders.retrieve", "DELETE": "orders.cancel"}

    def get(self, request, oid: str):
        try:
            order = providers.get_order_service().find_one(oid, request.identity)
        except OrderDomainError as e:
            return domain_error_response(e)
        return Response(OrderReadDTO.from_domain(order).to_json(), status=200)

    def delete(self, request, oid: str):
        try:
            order = providers.get_order_service().cancel_order(oid, request.identity)
        except OrderDomainError as e:
            return domain_error_response(e)
        return Response(OrderReadDTO.from_domain(order).to_json(), status=200)


class PlaceOrderView(APIView):
    """Checkout: move a draft order to ``placed`` (admins and managers only)."""

    permission_classes = [HasOperationRole]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"
    operations = {"PATCH": "orders.place"}

    def patch(self, request, oid: str):
        try:
            dto = PlaceOrderDTO.model_validate(request.data or {})
        except ValidationError as e:
            return validation_error_response(e)

        try:
            order = providers.get_order_service().place_order(
                oid, request.identity, payment_method_id=dto.payment_method_id
            )
        except OrderDomainError as e:
            return domain_error_response(e)
        return Response(OrderReadDTO.from_domain(order).to_json(), status=200)
