"""Bookshop domain: order and cart lifecycle with inventory consistency.

Owns the order state machine (cart, checkout, confirmation, fulfillment,
cancellation), the stock ledger the confirmation step draws on, and the
background expiry of abandoned carts.
"""

from protean.domain import Domain

from bookshop.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

bookshop = Domain(name="bookshop")
