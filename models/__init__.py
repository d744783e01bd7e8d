from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .gym import Gym
from .user import User
from .category import Category
from .product import Product
from .subscription import SubscriptionType, Subscriber
from .invoice import Invoice, InvoiceItem
from .purchase import Purchase, PurchaseItem
from .internal_sale import InternalSale
