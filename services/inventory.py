"""
قواعد مخزون الفروع.

كل تعديل للكمية يمر عبر Product.adjust_stock مع تحديد الفرع،
فلا تتأثر كمية الفرع الآخر أبداً.
"""

from flask import current_app, has_app_context
from flask_babel import gettext as _

from services.errors import InsufficientStockError
from services.money import non_negative_money, quantity

LOW_STOCK_THRESHOLD = 5


def apply_purchase(product, branch, qty, unit_cost):
    """إدخال كمية للفرع وتحديث سعر الشراء بآخر تكلفة (وليس المتوسط)"""
    qty = quantity(qty)
    unit_cost = non_negative_money(unit_cost, _('تكلفة الوحدة'))
    new_quantity = product.adjust_stock(branch, qty)
    product.purchase_price = unit_cost
    return new_quantity


def _decrement(product, branch, qty):
    qty = quantity(qty)
    available = product.get_stock(branch)
    if available - qty < 0:
        if has_app_context():
            current_app.logger.warning(
                'Stock rejected: product %s branch %s available %s requested %s',
                product.id, branch, available, qty,
            )
        raise InsufficientStockError(product.id, branch, available, qty, product.name)
    return product.adjust_stock(branch, -qty)


def apply_sale(product, branch, qty):
    return _decrement(product, branch, qty)


def apply_internal_sale(product, branch, qty):
    return _decrement(product, branch, qty)


def is_low_stock(product, branch):
    return product.get_stock(branch) < LOW_STOCK_THRESHOLD


def get_stock_status(product, branch):
    qty = product.get_stock(branch)
    if qty == 0:
        return 'out_of_stock'
    elif qty < LOW_STOCK_THRESHOLD:
        return 'low_stock'
    return 'normal'
