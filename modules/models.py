# modules/models.py - Inventory domain objects
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number (or numeric string) without float rounding"""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid number: {value!r}") from e


def _to_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class RawMaterial:
    """A stocked input material"""
    id: Optional[int]
    code: str
    name: str
    stock_quantity: Decimal = ZERO
    unit: str = ""
    cost_per_unit: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawMaterial":
        return cls(
            id=_to_id(data.get("id")),
            code=data.get("code") or "",
            name=data.get("name") or "",
            stock_quantity=to_decimal(data.get("stockQuantity")),
            unit=data.get("unit") or "",
            cost_per_unit=to_decimal(data.get("costPerUnit")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "stockQuantity": float(self.stock_quantity),
            "unit": self.unit,
            "costPerUnit": float(self.cost_per_unit),
        }

    @property
    def stock_value(self) -> Decimal:
        return self.stock_quantity * self.cost_per_unit


@dataclass
class BillOfMaterialsLine:
    """Quantity of one raw material consumed per unit of product"""
    raw_material_id: Optional[int]
    quantity_required: Decimal
    raw_material_name: str = ""
    id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BillOfMaterialsLine":
        # Backend nests the material; older payloads carry a flat rawMaterialId
        material = data.get("rawMaterial") or {}
        material_id = material.get("id", data.get("rawMaterialId"))
        return cls(
            raw_material_id=_to_id(material_id),
            quantity_required=to_decimal(data.get("quantityRequired")),
            raw_material_name=material.get("name") or "",
            id=_to_id(data.get("id")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "quantityRequired": _as_number(self.quantity_required),
            "rawMaterial": {"id": self.raw_material_id},
        }


@dataclass
class Product:
    """A finished good and its bill of materials"""
    id: Optional[int]
    code: str
    name: str
    price: Decimal = ZERO
    materials: List[BillOfMaterialsLine] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=_to_id(data.get("id")),
            code=data.get("code") or "",
            name=data.get("name") or "",
            price=to_decimal(data.get("price")),
            materials=[BillOfMaterialsLine.from_dict(m) for m in data.get("materials") or []],
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "price": float(self.price),
            "materials": [line.to_payload() for line in self.materials],
        }


@dataclass
class ProductionCapacity:
    """How many units of a product current stock supports, and what they are worth"""
    product: Product
    producible_quantity: int
    total_value: Decimal

    @classmethod
    def from_suggestion(cls, data: Dict[str, Any]) -> "ProductionCapacity":
        product = Product.from_dict(data)
        if not product.materials:
            # Backend reports a 999 placeholder for products without materials
            return cls(product=product, producible_quantity=0, total_value=ZERO)
        quantity = int(data.get("producibleQuantity") or 0)
        total = data.get("totalValue")
        return cls(
            product=product,
            producible_quantity=quantity,
            total_value=to_decimal(total) if total is not None else product.price * quantity,
        )

    @property
    def is_producible(self) -> bool:
        return self.producible_quantity > 0


def _as_number(value: Decimal):
    # Backend stores BOM quantities as integers
    return int(value) if value == value.to_integral_value() else float(value)
