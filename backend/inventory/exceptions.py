"""
Custom exceptions for the inventory ledger.
"""


class InventoryError(Exception):
    """Base exception for inventory-related errors."""
    pass


class TransactionConflictError(InventoryError):
    """
    Raised when the database aborts a stock transaction because of lock
    contention (lock timeout, deadlock or serialization failure).
    Nothing was applied; the caller may retry the whole operation.
    """

    def __init__(self, operation, message=None):
        self.operation = operation
        if message is None:
            message = f"{operation} could not be completed because inventory is busy. Please try again."
        super().__init__(message)


class NotStockTrackedError(InventoryError):
    """Raised when a stock operation targets a product without a stock level."""

    def __init__(self, product, message=None):
        self.product = product
        if message is None:
            message = f"Product '{product.name}' is not stock-tracked."
        super().__init__(message)
