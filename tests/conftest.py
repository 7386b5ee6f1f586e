from decimal import Decimal

import pytest

from modules.models import BillOfMaterialsLine, Product, RawMaterial


class FakeClient:
    """Records calls and serves canned JSON by path"""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def _reply(self, method, path, payload=None):
        self.calls.append((method, path, payload))
        value = self.responses.get((method, path))
        if isinstance(value, Exception):
            raise value
        return value

    def get(self, path):
        return self._reply("GET", path)

    def post(self, path, payload):
        return self._reply("POST", path, payload)

    def put(self, path, payload):
        return self._reply("PUT", path, payload)

    def delete(self, path):
        self._reply("DELETE", path)


def make_material(material_id, stock, code=None, name=None, unit="kg", cost="1.00"):
    return RawMaterial(
        id=material_id,
        code=code or f"RM{material_id:03d}",
        name=name or f"Material {material_id}",
        stock_quantity=Decimal(str(stock)),
        unit=unit,
        cost_per_unit=Decimal(cost),
    )


def make_product(product_id, price, lines, code=None, name=None):
    return Product(
        id=product_id,
        code=code or f"P{product_id:03d}",
        name=name or f"Product {product_id}",
        price=Decimal(str(price)),
        materials=[
            BillOfMaterialsLine(raw_material_id=material_id, quantity_required=Decimal(str(qty)))
            for material_id, qty in lines
        ],
    )


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def materials_json():
    return [
        {"id": 2, "code": "RM002", "name": "Varnish", "stockQuantity": 15, "unit": "L", "costPerUnit": 3.5},
        {"id": 1, "code": "RM001", "name": "Pine Wood", "stockQuantity": 20, "unit": "kg", "costPerUnit": 5},
    ]


@pytest.fixture
def products_json():
    return [
        {
            "id": 10,
            "code": "P010",
            "name": "Table",
            "price": 100.0,
            "materials": [
                {"id": 1, "quantityRequired": 2, "rawMaterial": {"id": 1, "name": "Pine Wood"}},
                {"id": 2, "quantityRequired": 3, "rawMaterial": {"id": 2, "name": "Varnish"}},
            ],
        },
        {
            "id": 11,
            "code": "P011",
            "name": "Chair",
            "price": 40.0,
            "materials": [
                {"id": 3, "quantityRequired": 1, "rawMaterial": {"id": 1, "name": "Pine Wood"}},
            ],
        },
    ]


@pytest.fixture
def material():
    return make_material


@pytest.fixture
def product():
    return make_product
