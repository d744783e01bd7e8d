"""
Pytest fixtures for the gym ledger test suite.

Every test gets a fresh in-memory SQLite database inside an application
context. Data fixtures are opt-in.
"""

from datetime import date
from decimal import Decimal

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.category import Category
from models.gym import Gym
from models.product import Product
from models.subscription import SubscriptionType
from models.user import User

TODAY = date(2024, 1, 15)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def male_gym(app):
    gym = Gym(name='نادي الرجال الرياضي', type='male')
    db.session.add(gym)
    db.session.commit()
    return gym


@pytest.fixture
def female_gym(app):
    gym = Gym(name='نادي السيدات الرياضي', type='female')
    db.session.add(gym)
    db.session.commit()
    return gym


@pytest.fixture
def cashier(male_gym):
    user = User(username='cashier', full_name='Cashier', role='admin', gym_id=male_gym.id)
    user.set_password('secret123')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def category(app):
    category = Category(name='مشروبات', description='مشروبات الطاقة والماء')
    db.session.add(category)
    db.session.commit()
    return category


def make_product(name, barcode, male_qty=0, female_qty=0, purchase_price='300', sale_price='500',
                 category=None):
    product = Product(
        name=name,
        barcode=barcode,
        purchase_price=Decimal(purchase_price),
        sale_price=Decimal(sale_price),
        male_gym_quantity=male_qty,
        female_gym_quantity=female_qty,
        category_id=category.id if category else None,
    )
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def protein(category):
    return make_product('Protein Bar', '1000001', male_qty=10, female_qty=4, category=category)


@pytest.fixture
def water(category):
    return make_product('Water', '1000002', male_qty=1, female_qty=0,
                        purchase_price='50', sale_price='100', category=category)


@pytest.fixture
def monthly_type(male_gym):
    st = SubscriptionType(name='اشتراك شهري', type='monthly', duration_months=1,
                          price=Decimal('3000'), gym_id=male_gym.id)
    db.session.add(st)
    db.session.commit()
    return st


@pytest.fixture
def session_type(male_gym):
    st = SubscriptionType(name='12 جلسة', type='session', duration_months=3, session_count=12,
                          price=Decimal('3600'), gym_id=male_gym.id)
    db.session.add(st)
    db.session.commit()
    return st
