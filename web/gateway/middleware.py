"""Gateway middleware: request ids, payload limits and caller identity.

``RequestIdMiddleware`` ensures every incoming HTTP request receives a
request identifier (UUID). The identifier is read from the incoming
``X-Request-Id`` header when provided by the client, or generated
server-side otherwise. The id is stored on the ``request`` object and in a
context variable so code running downstream (log filters, HTTP adapters)
can access it without passing the value explicitly. The response carries
the same id in the ``X-Request-ID`` header.

``IdentityMiddleware`` turns the identity headers set by the trusted
authentication proxy (``X-User-Id``, ``X-User-Role``, ``X-User-Country``)
into an ``Identity`` attached as ``request.identity``. Token verification
happens upstream, never here.
"""

import contextvars
import logging
import os
import uuid

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from apps.orders.domain import Country, Identity, Role

logger = logging.getLogger(__name__)

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")
USER_ID_CTX = contextvars.ContextVar("user_id", default="-")
MAX_API_BYTES = int(os.getenv("API_MAX_BYTES", str(1 * 1024 * 1024)))

PUBLIC_API_PATHS = ("/api/health/", "/api/orders/ping/")


class RequestIdMiddleware(MiddlewareMixin):
    """Django middleware that sets and returns a per-request identifier.

    Attributes:
        HEADER (str): The name of the incoming HTTP header (in Django's
            ``request.META`` casing) that may contain a client-provided id.
        RESPONSE_HEADER (str): The name of the header returned on responses.
    """

    HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def process_request(self, request):
        rid = request.META.get(self.HEADER)
        if not rid:
            rid = str(uuid.uuid4())
        request.request_id = rid
        REQUEST_ID_CTX.set(rid)

    def process_response(self, request, response):
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        return response


class ApiSizeLimitMiddleware(MiddlewareMixin):
    """Reject API requests whose declared body exceeds ``API_MAX_BYTES``."""

    def process_request(self, request):
        if request.path.startswith("/api/"):
            clen = request.META.get("CONTENT_LENGTH")
            if clen and clen.isdigit() and int(clen) > MAX_API_BYTES:
                return JsonResponse({"detail": "PAYLOAD_TOO_LARGE"}, status=413)


class IdentityMiddleware(MiddlewareMixin):
    """Resolve the caller's ``Identity`` from trusted upstream headers.

    Every ``/api/`` path except ``PUBLIC_API_PATHS`` requires a complete and
    valid identity; otherwise the request is answered with 401. Role and
    country accept either the value or the enum name in any case
    (``manager``, ``MANAGER``; ``India``, ``INDIA``).
    """

    USER_HEADER = "HTTP_X_USER_ID"
    ROLE_HEADER = "HTTP_X_USER_ROLE"
    COUNTRY_HEADER = "HTTP_X_USER_COUNTRY"

    def process_request(self, request):
        request.identity = None
        USER_ID_CTX.set("-")
        if not request.path.startswith("/api/") or request.path in PUBLIC_API_PATHS:
            return None

        user_id = (request.META.get(self.USER_HEADER) or "").strip()
        try:
            role = Role.parse(request.META.get(self.ROLE_HEADER))
            country = Country.parse(request.META.get(self.COUNTRY_HEADER))
        except ValueError as e:
            logger.warning("rejected identity headers", extra={"reason": str(e)})
            return JsonResponse({"detail": "UNAUTHENTICATED"}, status=401)
        if not user_id:
            return JsonResponse({"detail": "UNAUTHENTICATED"}, status=401)

        request.identity = Identity(id=user_id, role=role, country=country)
        USER_ID_CTX.set(user_id)
        return None
