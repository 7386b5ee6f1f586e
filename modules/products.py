# modules/products.py - Products and their bills of materials
import pandas as pd
from typing import List, Optional
import logging

from utils.api import ApiClient, ApiError, as_list, get_api_client
from .models import BillOfMaterialsLine, Product, RawMaterial

logger = logging.getLogger(__name__)


class ProductManager:
    """Manage products and bill of materials operations"""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_api_client()

    def get_products(self, search: Optional[str] = None) -> List[Product]:
        """Get products, optionally filtered by name or code"""
        data = as_list(self.client.get('/products'))
        products = [Product.from_dict(item) for item in data]

        if search:
            term = search.strip().lower()
            products = [p for p in products
                        if term in p.name.lower() or term in p.code.lower()]

        return sorted(products, key=lambda p: p.name.lower())

    def get_product(self, product_id: int) -> Optional[Product]:
        try:
            data = self.client.get(f'/products/{product_id}')
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return Product.from_dict(data) if data else None

    def get_product_materials(self, product_id: int) -> List[BillOfMaterialsLine]:
        """Get BOM lines of a single product"""
        data = as_list(self.client.get(f'/product-materials/product/{product_id}'))
        return [BillOfMaterialsLine.from_dict(item) for item in data]

    def validate_product(self, product: Product,
                         raw_materials: Optional[List[RawMaterial]] = None) -> List[str]:
        """Return a list of validation errors, empty when the product is valid"""
        errors = []

        if not product.code.strip():
            errors.append("Product code is required")
        if not product.name.strip():
            errors.append("Product name is required")
        if product.price < 0:
            errors.append("Price cannot be negative")

        known_ids = {m.id for m in raw_materials} if raw_materials is not None else None
        seen = set()
        for idx, line in enumerate(product.materials, start=1):
            if line.raw_material_id is None:
                errors.append(f"Material line {idx}: select a raw material")
                continue
            if known_ids is not None and line.raw_material_id not in known_ids:
                errors.append(f"Material line {idx}: raw material {line.raw_material_id} does not exist")
            if line.quantity_required <= 0:
                errors.append(f"Material line {idx}: quantity must be greater than 0")
            if line.raw_material_id in seen:
                errors.append(f"Material line {idx}: raw material already added")
            seen.add(line.raw_material_id)

        return errors

    def create_product(self, product: Product) -> Product:
        """Create new product with its materials"""
        try:
            data = self.client.post('/products', product.to_payload())
        except ApiError as e:
            logger.error(f"Error creating product {product.code}: {e}")
            raise

        created = Product.from_dict(data) if data else product
        logger.info(f"Created product {created.code} with {len(created.materials)} materials")
        return created

    def update_product(self, product_id: int, product: Product) -> Product:
        """Replace product fields and its full material list"""
        try:
            data = self.client.put(f'/products/{product_id}', product.to_payload())
        except ApiError as e:
            logger.error(f"Error updating product {product_id}: {e}")
            raise

        logger.info(f"Updated product {product_id}")
        return Product.from_dict(data) if data else product

    def delete_product(self, product_id: int) -> None:
        try:
            self.client.delete(f'/products/{product_id}')
        except ApiError as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            raise

        logger.info(f"Deleted product {product_id}")

    def get_bom_frame(self, product: Product,
                      raw_materials: Optional[List[RawMaterial]] = None) -> pd.DataFrame:
        """Product materials with names and units resolved"""
        lookup = {m.id: m for m in raw_materials or []}

        rows = []
        for line in product.materials:
            material = lookup.get(line.raw_material_id)
            rows.append({
                'material_id': line.raw_material_id,
                'material_code': material.code if material else '',
                'material_name': material.name if material else line.raw_material_name,
                'quantity_required': float(line.quantity_required),
                'unit': material.unit if material else '',
                'unit_cost': float(line.quantity_required * material.cost_per_unit) if material else 0.0,
            })

        return pd.DataFrame(rows, columns=['material_id', 'material_code', 'material_name',
                                           'quantity_required', 'unit', 'unit_cost'])

    def get_material_usage_summary(self, products: Optional[List[Product]] = None,
                                   raw_materials: Optional[List[RawMaterial]] = None) -> pd.DataFrame:
        """Get summary of raw material usage across products"""
        if products is None:
            products = self.get_products()
        names = {m.id: m.name for m in raw_materials or []}

        rows = []
        for product in products:
            for line in product.materials:
                rows.append({
                    'material_id': line.raw_material_id,
                    'material_name': names.get(line.raw_material_id, line.raw_material_name),
                    'product_code': product.code,
                    'quantity': float(line.quantity_required),
                })

        columns = ['material_id', 'material_name', 'usage_count', 'total_quantity', 'products']
        if not rows:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(rows)
        summary = df.groupby(['material_id', 'material_name'], as_index=False).agg(
            usage_count=('product_code', 'nunique'),
            total_quantity=('quantity', 'sum'),
            products=('product_code', lambda codes: ', '.join(sorted(set(codes)))),
        )
        return summary.sort_values(['usage_count', 'total_quantity'],
                                   ascending=False).reset_index(drop=True)[columns]

    def get_where_used(self, raw_material_id: int,
                       products: Optional[List[Product]] = None) -> pd.DataFrame:
        """Find products that consume a raw material"""
        if products is None:
            products = self.get_products()

        rows = []
        for product in products:
            for line in product.materials:
                if line.raw_material_id == raw_material_id:
                    rows.append({
                        'product_id': product.id,
                        'product_code': product.code,
                        'product_name': product.name,
                        'quantity_required': float(line.quantity_required),
                    })

        return pd.DataFrame(rows, columns=['product_id', 'product_code', 'product_name',
                                           'quantity_required'])
