"""
Order services.

- OrderProcessor: checkout with atomic stock deduction
"""
from orders.services.checkout_service import OrderProcessor

__all__ = [
    'OrderProcessor',
]
