"""Fixtures for HTTP integration tests against the bookshop routers."""

import pytest
from bookshop.api import cart_router, customer_router, maintenance_router, order_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(customer_router)
    app.include_router(maintenance_router)
    register_exception_handlers(app)
    return TestClient(app)
