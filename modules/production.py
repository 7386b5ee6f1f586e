# modules/production.py - Production capacity calculation and reporting
import pandas as pd
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging

from utils.api import ApiClient, ApiError, as_list, get_api_client
from .models import ZERO, Product, ProductionCapacity, RawMaterial
from .inventory import InventoryManager
from .products import ProductManager

logger = logging.getLogger(__name__)

STATUS_AVAILABLE = 'AVAILABLE'
STATUS_STOCK_OUT = 'STOCK_OUT'


class InvalidBillOfMaterials(ValueError):
    """A bill of materials line that cannot be used for capacity math"""


def build_stock_lookup(raw_materials: Iterable[RawMaterial]) -> Dict[int, Decimal]:
    """Map raw material id to on-hand stock"""
    return {m.id: m.stock_quantity for m in raw_materials if m.id is not None}


def calculate_producible_quantity(product: Product, stock_by_material: Dict[int, Decimal]) -> int:
    """Whole units of product the given stock supports.

    Each line allows floor(stock / required) units and the most constraining
    line wins. Missing or negative stock counts as zero. Lines that require
    nothing do not constrain production; a product with no constraining line
    (including an empty bill of materials) yields 0.
    """
    if not product.materials:
        return 0

    allowances = []
    for line in product.materials:
        required = line.quantity_required
        if required < 0:
            raise InvalidBillOfMaterials(
                f"Product {product.code}: negative quantity {required} "
                f"for raw material {line.raw_material_id}"
            )
        if required == 0:
            logger.warning(
                f"Product {product.code}: raw material {line.raw_material_id} "
                f"requires 0 per unit, ignored in capacity"
            )
            continue

        stock = stock_by_material.get(line.raw_material_id, ZERO)
        if stock <= 0:
            allowances.append(0)
        else:
            allowances.append(int(stock // required))

    return min(allowances) if allowances else 0


def calculate_potential_value(product: Product, quantity: int) -> Decimal:
    return product.price * quantity


def calculate_capacity(product: Product, stock_by_material: Dict[int, Decimal]) -> ProductionCapacity:
    quantity = calculate_producible_quantity(product, stock_by_material)
    return ProductionCapacity(
        product=product,
        producible_quantity=quantity,
        total_value=calculate_potential_value(product, quantity),
    )


def suggest_production(products: Iterable[Product],
                       raw_materials: Iterable[RawMaterial]) -> List[ProductionCapacity]:
    """Greedy plan: highest-priced products claim shared stock first.

    Every product is listed, including those that cannot be produced. The
    inputs are not modified.
    """
    remaining = build_stock_lookup(raw_materials)
    plan = []

    for product in sorted(products, key=lambda p: p.price, reverse=True):
        capacity = calculate_capacity(product, remaining)
        plan.append(capacity)

        if capacity.producible_quantity > 0:
            for line in product.materials:
                if line.raw_material_id in remaining:
                    remaining[line.raw_material_id] -= line.quantity_required * capacity.producible_quantity

    return plan


class ProductionManager:
    """Production capacity views over the inventory backend"""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_api_client()
        self.product_manager = ProductManager(self.client)
        self.inventory_manager = InventoryManager(self.client)

    def get_suggestions(self) -> List[ProductionCapacity]:
        """Production plan as computed by the backend"""
        try:
            data = as_list(self.client.get('/production/suggestions'))
        except ApiError as e:
            logger.error(f"Error loading production suggestions: {e}")
            raise

        return [ProductionCapacity.from_suggestion(item) for item in data]

    def get_local_capacity(self) -> List[ProductionCapacity]:
        """Independent capacity of each product against full current stock"""
        products = self.product_manager.get_products()
        stock = self.inventory_manager.get_stock_lookup()
        return [calculate_capacity(p, stock) for p in products]

    def get_local_plan(self) -> List[ProductionCapacity]:
        """Greedy production plan computed client-side"""
        products = self.product_manager.get_products()
        materials = self.inventory_manager.get_raw_materials()
        return suggest_production(products, materials)

    def get_production_report(self, capacities: List[ProductionCapacity]) -> pd.DataFrame:
        """Tabular view of capacities for display and export"""
        rows = []
        for c in capacities:
            rows.append({
                'product_id': c.product.id,
                'product_code': c.product.code,
                'product_name': c.product.name,
                'producible_quantity': c.producible_quantity,
                'unit_price': float(c.product.price),
                'potential_value': float(c.total_value),
                'status': STATUS_AVAILABLE if c.is_producible else STATUS_STOCK_OUT,
            })

        columns = ['product_id', 'product_code', 'product_name', 'producible_quantity',
                   'unit_price', 'potential_value', 'status']
        return pd.DataFrame(rows, columns=columns)

    def get_report_summary(self, capacities: List[ProductionCapacity]) -> Dict:
        total_value = sum((c.total_value for c in capacities), ZERO)
        producible = sum(1 for c in capacities if c.is_producible)
        return {
            'total_products': len(capacities),
            'producible_products': producible,
            'stock_out_products': len(capacities) - producible,
            'total_units': sum(c.producible_quantity for c in capacities),
            'total_value': total_value,
        }

    def get_material_requirements(self, product: Product, quantity: int) -> pd.DataFrame:
        """Raw material needed to produce a quantity, against current stock"""
        materials = {m.id: m for m in self.inventory_manager.get_raw_materials()}

        rows = []
        for line in product.materials:
            material = materials.get(line.raw_material_id)
            required = line.quantity_required * quantity
            available = material.stock_quantity if material else ZERO
            rows.append({
                'material_id': line.raw_material_id,
                'material_name': material.name if material else (line.raw_material_name or 'Unknown'),
                'unit': material.unit if material else '',
                'required': float(required),
                'available': float(available),
                'sufficient': available >= required,
            })

        return pd.DataFrame(rows, columns=['material_id', 'material_name', 'unit',
                                           'required', 'available', 'sufficient'])
