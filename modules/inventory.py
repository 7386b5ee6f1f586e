# modules/inventory.py - Raw material inventory management
import pandas as pd
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from utils.api import ApiClient, ApiError, as_list, get_api_client
from utils.config import config
from .models import RawMaterial

logger = logging.getLogger(__name__)


class InventoryManager:
    """Manage raw material stock held by the backend"""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_api_client()

    def get_raw_materials(self) -> List[RawMaterial]:
        """Get all raw materials ordered by code"""
        data = as_list(self.client.get('/raw-materials'))
        materials = [RawMaterial.from_dict(item) for item in data]
        return sorted(materials, key=lambda m: m.code)

    def get_raw_material(self, material_id: int) -> Optional[RawMaterial]:
        # The backend exposes no single-item route for raw materials
        for material in self.get_raw_materials():
            if material.id == material_id:
                return material
        return None

    def get_stock_lookup(self) -> Dict[int, Decimal]:
        """Current stock keyed by raw material id"""
        return {m.id: m.stock_quantity for m in self.get_raw_materials() if m.id is not None}

    def validate_raw_material(self, material: RawMaterial,
                              existing: Optional[List[RawMaterial]] = None) -> List[str]:
        """Return a list of validation errors, empty when the material is valid"""
        errors = []

        if not material.code.strip():
            errors.append("Material code is required")
        if not material.name.strip():
            errors.append("Material name is required")
        if material.stock_quantity < 0:
            errors.append("Stock quantity cannot be negative")
        if material.cost_per_unit < 0:
            errors.append("Cost per unit cannot be negative")

        if existing and material.code.strip():
            code = material.code.strip().upper()
            for other in existing:
                if other.code.strip().upper() == code and other.id != material.id:
                    errors.append(f"Material code {material.code} is already in use")
                    break

        return errors

    def create_raw_material(self, material: RawMaterial) -> RawMaterial:
        try:
            data = self.client.post('/raw-materials', material.to_payload())
        except ApiError as e:
            logger.error(f"Error creating raw material {material.code}: {e}")
            raise

        created = RawMaterial.from_dict(data) if data else material
        logger.info(f"Created raw material {created.code}")
        return created

    def update_raw_material(self, material_id: int, material: RawMaterial) -> RawMaterial:
        try:
            data = self.client.put(f'/raw-materials/{material_id}', material.to_payload())
        except ApiError as e:
            logger.error(f"Error updating raw material {material_id}: {e}")
            raise

        logger.info(f"Updated raw material {material_id}")
        return RawMaterial.from_dict(data) if data else material

    def delete_raw_material(self, material_id: int) -> None:
        try:
            self.client.delete(f'/raw-materials/{material_id}')
        except ApiError as e:
            logger.error(f"Error deleting raw material {material_id}: {e}")
            raise

        logger.info(f"Deleted raw material {material_id}")

    def get_inventory_frame(self, materials: Optional[List[RawMaterial]] = None) -> pd.DataFrame:
        """Raw materials as a display table"""
        if materials is None:
            materials = self.get_raw_materials()

        rows = [{
            'id': m.id,
            'code': m.code,
            'name': m.name,
            'stock_quantity': float(m.stock_quantity),
            'unit': m.unit,
            'cost_per_unit': float(m.cost_per_unit),
            'stock_value': float(m.stock_value),
        } for m in materials]

        return pd.DataFrame(rows, columns=['id', 'code', 'name', 'stock_quantity',
                                           'unit', 'cost_per_unit', 'stock_value'])

    def get_low_stock_items(self, threshold: Optional[float] = None,
                            materials: Optional[List[RawMaterial]] = None) -> pd.DataFrame:
        """Get raw materials with stock below the threshold"""
        if threshold is None:
            threshold = config.LOW_STOCK_THRESHOLD

        df = self.get_inventory_frame(materials)
        low = df[df['stock_quantity'] < threshold].copy()
        low['shortage'] = threshold - low['stock_quantity']
        return low.sort_values('shortage', ascending=False).reset_index(drop=True)
