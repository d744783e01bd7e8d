from decimal import Decimal

import pytest

from models.product import Product
from services import catalog, transactions
from services.errors import ReferentialIntegrityError, ValidationError


def test_create_product_sets_only_own_branch(female_gym, category):
    product = catalog.create_product(female_gym, 'Shaker', category.id, purchase_price='100',
                                     sale_price='150', quantity=7)
    assert product.female_gym_quantity == 7
    assert product.male_gym_quantity == 0
    assert product.barcode.isdigit()


def test_duplicate_barcode_is_rejected(male_gym, protein):
    with pytest.raises(ValidationError):
        catalog.create_product(male_gym, 'Copy', barcode=protein.barcode)


def test_negative_price_is_rejected(male_gym):
    with pytest.raises(ValidationError):
        catalog.create_product(male_gym, 'Gloves', sale_price='-5')
    assert Product.query.count() == 0


def test_update_product_quantity_is_per_branch(male_gym, protein):
    catalog.update_product(male_gym, protein.id, quantity=3, sale_price='550')
    assert protein.male_gym_quantity == 3
    assert protein.female_gym_quantity == 4
    assert protein.sale_price == Decimal('550.00')


def test_product_listing(male_gym, protein, water):
    rows = catalog.list_products(male_gym)
    assert {r['name'] for r in rows} == {'Protein Bar', 'Water'}
    row = next(r for r in rows if r['name'] == 'Protein Bar')
    assert row['quantity'] == 10
    assert row['margin'] == Decimal('200.00')
    assert row['stock_status'] == 'normal'

    assert [r['name'] for r in catalog.list_products(male_gym, search='wat')] == ['Water']
    assert [r['name'] for r in catalog.low_stock_products(male_gym)] == ['Water']


def test_available_only_hides_empty_products(female_gym, protein, water):
    assert [r['name'] for r in catalog.list_products(female_gym, available_only=True)] == ['Protein Bar']


def test_find_by_barcode(protein):
    assert catalog.find_by_barcode('1000001') == protein
    assert catalog.find_by_barcode('nope') is None


def test_delete_sold_product_is_blocked(male_gym, cashier, protein):
    transactions.create_invoice(male_gym, cashier.id, [{'product_id': protein.id, 'quantity': 1}])
    with pytest.raises(ReferentialIntegrityError) as exc:
        catalog.delete_product(protein.id)
    assert exc.value.code == 'REFERENTIAL_INTEGRITY'
    assert Product.query.count() == 1


def test_delete_unused_product(water):
    catalog.delete_product(water.id)
    assert Product.query.count() == 0


def test_delete_category_in_use_is_blocked(category, protein):
    with pytest.raises(ReferentialIntegrityError):
        catalog.delete_category(category.id)


def test_category_crud(app):
    category = catalog.create_category('مكملات غذائية', 'البروتين والفيتامينات')
    catalog.update_category(category.id, name='مكملات')
    assert [c.name for c in catalog.list_categories()] == ['مكملات']
    catalog.delete_category(category.id)
    assert catalog.list_categories() == []
