"""Bookshop FastAPI application.

Processes commands synchronously over HTTP and owns the lifetime of the
cart expiry sweeper: the sweeper starts with the application and is stopped
on shutdown.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from bookshop.domain import bookshop
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

bookshop.init()

from bookshop import config  # noqa: E402
from bookshop.cart.sweeper import CartExpirationSweeper  # noqa: E402
from bookshop.utils.logging import add_context, clear_context, get_logger  # noqa: E402

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = CartExpirationSweeper(bookshop) if config.sweeper_enabled() else None
    if sweeper is not None:
        sweeper.start()
    app.state.sweeper = sweeper
    try:
        yield
    finally:
        if sweeper is not None:
            await sweeper.stop()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Bookshop Orders API",
    description="Order and cart lifecycle with inventory consistency",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the bookshop domain context and bind request info to the logs."""
    add_context(method=request.method, path=request.url.path)
    try:
        with bookshop.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from bookshop.api import cart_router, customer_router, maintenance_router, order_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(customer_router)
app.include_router(maintenance_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    sweeper = getattr(app.state, "sweeper", None)
    return JSONResponse(
        content={
            "status": "ok",
            "domain": bookshop.name,
            "sweeper": {
                "running": bool(sweeper and sweeper.running),
                "runs": sweeper.runs if sweeper else 0,
                "failures": sweeper.failures if sweeper else 0,
            },
        }
    )
