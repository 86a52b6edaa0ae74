"""Sale and purchase models - headers and their line items"""

from inventory_app.data.transactions.sale import Sale, SaleItem
from inventory_app.data.transactions.purchase import Purchase, PurchaseItem

__all__ = [
    'Sale',
    'SaleItem',
    'Purchase',
    'PurchaseItem'
]
