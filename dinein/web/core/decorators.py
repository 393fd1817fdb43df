"""
Decorators for request handling and validation.
"""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.cache import cache
from django.http import HttpRequest, JsonResponse

from dinein.web.core.roles import resolve_role

IDEMPOTENCY_TTL = 86400  # 24 hours
IDEMPOTENCY_LOCK_TTL = 60


def idempotency_key_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an Idempotency-Key header for POST requests.

    If the same key is used twice, returns the cached response from the first request.
    A second request arriving while the first is still running gets a 409 instead
    of running the view again (double-click on "Pay" must not create two orders).
    Cached responses are stored for 24 hours.

    Usage:
        @idempotency_key_required
        def checkout(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        key = request.headers.get("Idempotency-Key")

        if not key:
            return JsonResponse(
                {
                    "error": "validation_error",
                    "message": "Idempotency-Key header is required",
                },
                status=400,
            )

        cache_key = f"idempotency:{key}"
        lock_key = f"{cache_key}:lock"

        cached = cache.get(cache_key)
        if cached:
            return JsonResponse(cached["data"], status=cached["status"])

        if not cache.add(lock_key, True, timeout=IDEMPOTENCY_LOCK_TTL):
            return JsonResponse(
                {
                    "error": "request_in_progress",
                    "message": "A request with this Idempotency-Key is in progress",
                },
                status=409,
            )

        try:
            response = view_func(request, *args, **kwargs)

            # Only successful responses are replayed; errors may be retried
            if response.status_code < 400:
                cache.set(
                    cache_key,
                    {
                        "data": json.loads(response.content),
                        "status": response.status_code,
                    },
                    timeout=IDEMPOTENCY_TTL,
                )
        finally:
            cache.delete(lock_key)

        return response

    return wrapper


def staff_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that limits a JSON view to signed-in staff with a role.

    Anonymous requests get 401; accounts without a staff role get 403.
    The view itself still checks whether the role may do what it asks.
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if not request.user.is_authenticated:
            return JsonResponse(
                {
                    "error": "authentication_required",
                    "message": "Sign in to use staff endpoints",
                },
                status=401,
            )
        if resolve_role(request.user) is None:
            return JsonResponse(
                {"error": "forbidden", "message": "No staff role assigned"},
                status=403,
            )
        return view_func(request, *args, **kwargs)

    return wrapper
