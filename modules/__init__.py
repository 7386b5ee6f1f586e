# modules/__init__.py
"""Inventory & Production - Business Logic Components"""

from .models import RawMaterial, Product, BillOfMaterialsLine, ProductionCapacity
from .inventory import InventoryManager
from .products import ProductManager
from .production import (
    ProductionManager,
    InvalidBillOfMaterials,
    build_stock_lookup,
    calculate_producible_quantity,
    calculate_potential_value,
    calculate_capacity,
    suggest_production
)

__all__ = [
    'RawMaterial',
    'Product',
    'BillOfMaterialsLine',
    'ProductionCapacity',
    'InventoryManager',
    'ProductManager',
    'ProductionManager',
    'InvalidBillOfMaterials',
    'build_stock_lookup',
    'calculate_producible_quantity',
    'calculate_potential_value',
    'calculate_capacity',
    'suggest_production'
]

__version__ = '1.0.0'
