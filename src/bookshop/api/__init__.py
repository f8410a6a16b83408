"""Bookshop API package."""

from bookshop.api.routes import cart_router, customer_router, maintenance_router, order_router

__all__ = ["cart_router", "customer_router", "maintenance_router", "order_router"]
