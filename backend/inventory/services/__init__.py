"""
Inventory services.

- InventoryLedger: locked, audited stock mutations
- RestockProcessor: preparation restocking
- PurchaseService: purchase logging
"""
from inventory.services.ledger import InventoryLedger
from inventory.services.purchase_service import PurchaseService
from inventory.services.restock_service import RestockProcessor

__all__ = [
    'InventoryLedger',
    'PurchaseService',
    'RestockProcessor',
]
