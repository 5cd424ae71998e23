"""Middleware registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Route

from wellness.config import Settings
from wellness.middleware.error_handler import setup_error_handlers
from wellness.middleware.logging import setup_logging
from wellness.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware


def mounted_methods(app: FastAPI) -> list[str]:
    """HTTP methods served by the app's routes, plus OPTIONS for preflight."""
    methods = {"OPTIONS"}
    for route in app.routes:
        if isinstance(route, Route) and route.methods:
            methods.update(route.methods)
    return sorted(methods)


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Call after the routers are included: CORS allows exactly the methods the
    mounted routes serve. Starlette runs middleware in reverse-add order
    (last added = outermost), so CORS is added last to wrap every response,
    errors included.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=mounted_methods(app),
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
