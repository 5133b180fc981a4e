from .catalog import Product
from .locations import Location, WAREHOUSE_TYPES
from .stock import StockLevel

__all__ = [
    'Product',
    'Location', 'WAREHOUSE_TYPES',
    'StockLevel',
]
