from decimal import Decimal

import pytest

from modules.production import (
    InvalidBillOfMaterials,
    ProductionManager,
    STATUS_AVAILABLE,
    STATUS_STOCK_OUT,
    build_stock_lookup,
    calculate_capacity,
    calculate_potential_value,
    calculate_producible_quantity,
    suggest_production,
)


def stock(**levels):
    return {int(k[1:]): Decimal(str(v)) for k, v in levels.items()}


class TestProducibleQuantity:

    def test_most_constraining_material_wins(self, product):
        table = product(1, 100, [(1, 2), (2, 3)])
        assert calculate_producible_quantity(table, stock(m1=20, m2=15)) == 5

    def test_insufficient_stock_yields_zero(self, product):
        table = product(1, 100, [(1, 10)])
        assert calculate_producible_quantity(table, stock(m1=5)) == 0

    def test_three_materials(self, product):
        item = product(1, 100, [(1, 1), (2, 2), (3, 5)])
        assert calculate_producible_quantity(item, stock(m1=50, m2=50, m3=50)) == 10

    def test_empty_bill_of_materials_yields_zero(self, product):
        item = product(1, 100, [])
        assert calculate_producible_quantity(item, stock(m1=1000)) == 0

    def test_missing_material_counts_as_no_stock(self, product):
        item = product(1, 100, [(1, 1), (99, 2)])
        assert calculate_producible_quantity(item, stock(m1=50)) == 0

    def test_exact_multiples(self, product):
        item = product(1, 100, [(1, 4), (2, 7)])
        assert calculate_producible_quantity(item, stock(m1=28, m2=49)) == 7

    def test_fractional_stock_floors(self, product):
        item = product(1, 10, [(1, 2)])
        assert calculate_producible_quantity(item, stock(m1="9.99")) == 4

    def test_negative_stock_counts_as_zero(self, product):
        item = product(1, 10, [(1, 1)])
        assert calculate_producible_quantity(item, stock(m1=-5)) == 0

    def test_zero_requirement_does_not_constrain(self, product):
        item = product(1, 10, [(1, 0), (2, 2)])
        assert calculate_producible_quantity(item, stock(m1=0, m2=10)) == 5

    def test_zero_requirement_on_missing_material(self, product):
        item = product(1, 10, [(99, 0), (1, 1)])
        assert calculate_producible_quantity(item, stock(m1=3)) == 3

    def test_only_zero_requirements_yields_zero(self, product):
        item = product(1, 10, [(1, 0)])
        assert calculate_producible_quantity(item, stock(m1=10)) == 0

    def test_negative_requirement_is_rejected(self, product):
        item = product(1, 10, [(1, -1)])
        with pytest.raises(InvalidBillOfMaterials):
            calculate_producible_quantity(item, stock(m1=10))


class TestCapacity:

    def test_potential_value_is_exact(self, product):
        item = product(1, "19.99", [(1, 1)])
        assert calculate_potential_value(item, 3) == Decimal("59.97")

    def test_capacity_combines_quantity_and_value(self, product):
        item = product(1, 100, [(1, 2), (2, 3)])
        capacity = calculate_capacity(item, stock(m1=20, m2=15))
        assert capacity.producible_quantity == 5
        assert capacity.total_value == Decimal("500")
        assert capacity.is_producible

    def test_stock_lookup_skips_unsaved_materials(self, material):
        unsaved = material(3, 9)
        unsaved.id = None
        lookup = build_stock_lookup([material(1, 5), material(2, 7), unsaved])
        assert lookup == {1: Decimal("5"), 2: Decimal("7")}


class TestSuggestProduction:

    def test_higher_price_claims_shared_stock_first(self, product, material):
        cheap = product(1, 10, [(1, 1)])
        premium = product(2, 50, [(1, 4)])
        plan = suggest_production([cheap, premium], [material(1, 10)])

        assert [c.product.id for c in plan] == [2, 1]
        assert plan[0].producible_quantity == 2
        # 10 - 2 * 4 = 2 left for the cheaper product
        assert plan[1].producible_quantity == 2
        assert plan[1].total_value == Decimal("20")

    def test_unproducible_products_are_listed(self, product, material):
        plan = suggest_production([product(1, 10, []), product(2, 5, [(1, 100)])], [material(1, 1)])
        assert [c.producible_quantity for c in plan] == [0, 0]

    def test_inputs_are_not_modified(self, product, material):
        wood = material(1, 10)
        suggest_production([product(1, 10, [(1, 3)])], [wood])
        assert wood.stock_quantity == Decimal("10")


class TestProductionManager:

    def test_get_suggestions_parses_backend_plan(self, fake_client, products_json):
        suggestions = [dict(products_json[0], producibleQuantity=5, totalValue=500.0),
                       dict(products_json[1], producibleQuantity=0, totalValue=0)]
        fake_client.responses[("GET", "/production/suggestions")] = suggestions

        capacities = ProductionManager(fake_client).get_suggestions()

        assert [c.producible_quantity for c in capacities] == [5, 0]
        assert capacities[0].total_value == Decimal("500.0")
        assert capacities[0].product.materials[1].raw_material_id == 2

    def test_missing_total_value_is_derived(self, fake_client, products_json):
        fake_client.responses[("GET", "/production/suggestions")] = [
            dict(products_json[1], producibleQuantity=3)
        ]
        capacity = ProductionManager(fake_client).get_suggestions()[0]
        assert capacity.total_value == Decimal("120.0")

    def test_product_without_materials_is_not_producible(self, fake_client):
        fake_client.responses[("GET", "/production/suggestions")] = [
            {"id": 7, "code": "P007", "name": "Sample", "price": 10.0, "materials": [],
             "producibleQuantity": 999, "totalValue": 9990.0}
        ]
        manager = ProductionManager(fake_client)

        capacities = manager.get_suggestions()

        assert capacities[0].producible_quantity == 0
        assert capacities[0].total_value == Decimal("0")
        assert not capacities[0].is_producible
        summary = manager.get_report_summary(capacities)
        assert summary["total_value"] == Decimal("0")
        assert summary["stock_out_products"] == 1

    def test_local_capacity_and_plan(self, fake_client, products_json, materials_json):
        fake_client.responses[("GET", "/products")] = products_json
        fake_client.responses[("GET", "/raw-materials")] = materials_json
        manager = ProductionManager(fake_client)

        capacity = {c.product.code: c.producible_quantity for c in manager.get_local_capacity()}
        assert capacity == {"P010": 5, "P011": 20}

        plan = {c.product.code: c.producible_quantity for c in manager.get_local_plan()}
        # The table uses 10 of the 20 wood before the chair is planned
        assert plan == {"P010": 5, "P011": 10}

    def test_report_and_summary(self, fake_client, product):
        manager = ProductionManager(fake_client)
        capacities = [
            calculate_capacity(product(1, 100, [(1, 2)]), stock(m1=10)),
            calculate_capacity(product(2, 30, [(1, 50)]), stock(m1=10)),
        ]

        report = manager.get_production_report(capacities)
        assert list(report['status']) == [STATUS_AVAILABLE, STATUS_STOCK_OUT]
        assert list(report['producible_quantity']) == [5, 0]
        assert report['potential_value'].sum() == 500.0

        summary = manager.get_report_summary(capacities)
        assert summary['total_value'] == Decimal("500")
        assert summary['producible_products'] == 1
        assert summary['stock_out_products'] == 1
        assert summary['total_units'] == 5

    def test_empty_report_keeps_columns(self, fake_client):
        report = ProductionManager(fake_client).get_production_report([])
        assert report.empty
        assert 'potential_value' in report.columns

    def test_material_requirements(self, fake_client, materials_json, product):
        fake_client.responses[("GET", "/raw-materials")] = materials_json
        table = product(10, 100, [(1, 2), (2, 3)])

        requirements = ProductionManager(fake_client).get_material_requirements(table, 6)

        by_id = requirements.set_index('material_id')
        assert by_id.loc[1, 'required'] == 12.0
        assert bool(by_id.loc[1, 'sufficient']) is True
        assert by_id.loc[2, 'required'] == 18.0
        assert bool(by_id.loc[2, 'sufficient']) is False
