"""الفئات والمنتجات (كتالوج مشترك بين الفرعين)"""

from flask import current_app
from flask_babel import gettext as _

from models import db
from models.category import Category
from models.internal_sale import InternalSale
from models.invoice import InvoiceItem
from models.product import Product
from models.purchase import PurchaseItem
from services.errors import ReferentialIntegrityError, ValidationError
from services.gateway import write_scope
from services.gyms import load_owned
from services.inventory import LOW_STOCK_THRESHOLD, get_stock_status, is_low_stock
from services.money import margin, non_negative_money
from services.references import generate_reference

# ---------- الفئات ----------

def create_category(name, description=None):
    if not name or not name.strip():
        raise ValidationError(_('اسم الفئة مطلوب'))
    category = Category(name=name.strip(), description=description)
    with write_scope() as session:
        session.add(category)
    return category


def update_category(category_id, name=None, description=None):
    category = load_owned(Category, category_id, message=_('الفئة غير موجودة'))
    with write_scope():
        if name is not None:
            if not name.strip():
                raise ValidationError(_('اسم الفئة مطلوب'))
            category.name = name.strip()
        if description is not None:
            category.description = description
    return category


def delete_category(category_id):
    category = load_owned(Category, category_id, message=_('الفئة غير موجودة'))
    if Product.query.filter_by(category_id=category.id).count() > 0:
        raise ReferentialIntegrityError(_('لا يمكن حذف هذه الفئة لأنها مرتبطة بمنتجات'))
    with write_scope() as session:
        session.delete(category)


def list_categories():
    return Category.query.order_by(Category.name).all()


# ---------- المنتجات ----------

def _barcode_exists(barcode, exclude_id=None):
    q = Product.query.filter(Product.barcode == barcode)
    if exclude_id is not None:
        q = q.filter(Product.id != exclude_id)
    return q.count() > 0


def generate_barcode():
    """باركود رقمي فقط، بدون تكرار"""
    return generate_reference(exists=_barcode_exists)


def _check_category(category_id):
    if category_id in (None, ''):
        return None
    load_owned(Category, category_id, message=_('الفئة غير موجودة'))
    return category_id


def create_product(gym, name, category_id=None, purchase_price=0, sale_price=0,
                   quantity=0, barcode=None, notes=None):
    """الكمية المدخلة تضاف لفرع النادي الحالي فقط"""
    if not name or not name.strip():
        raise ValidationError(_('اسم المنتج مطلوب'))
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
        raise ValidationError(_('الكمية لا يمكن أن تكون سالبة'))
    barcode = (barcode or '').strip() or generate_barcode()
    if _barcode_exists(barcode):
        raise ValidationError(_('الباركود مستخدم بالفعل'))
    product = Product(
        barcode=barcode,
        name=name.strip(),
        category_id=_check_category(category_id),
        purchase_price=non_negative_money(purchase_price, _('سعر الشراء')),
        sale_price=non_negative_money(sale_price, _('سعر البيع')),
        male_gym_quantity=0,
        female_gym_quantity=0,
        notes=notes,
    )
    product.set_stock(gym.type, quantity)
    with write_scope() as session:
        session.add(product)
    current_app.logger.info('Product %s (%s) created', product.id, product.barcode)
    return product


def update_product(gym, product_id, name=None, category_id=None, purchase_price=None,
                   sale_price=None, quantity=None, barcode=None, notes=None):
    """تعديل المنتج، تعديل الكمية يخص فرع النادي الحالي فقط"""
    product = load_owned(Product, product_id, message=_('المنتج غير موجود'))
    with write_scope():
        if name is not None:
            if not name.strip():
                raise ValidationError(_('اسم المنتج مطلوب'))
            product.name = name.strip()
        if category_id is not None:
            product.category_id = _check_category(category_id)
        if purchase_price is not None:
            product.purchase_price = non_negative_money(purchase_price, _('سعر الشراء'))
        if sale_price is not None:
            product.sale_price = non_negative_money(sale_price, _('سعر البيع'))
        if quantity is not None:
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
                raise ValidationError(_('الكمية لا يمكن أن تكون سالبة'))
            product.set_stock(gym.type, quantity)
        if barcode is not None:
            barcode = barcode.strip() or generate_barcode()
            if _barcode_exists(barcode, exclude_id=product.id):
                raise ValidationError(_('الباركود مستخدم بالفعل'))
            product.barcode = barcode
        if notes is not None:
            product.notes = notes
    return product


def delete_product(product_id):
    product = load_owned(Product, product_id, message=_('المنتج غير موجود'))

    # التحقق من وجود فواتير أو مشتريات مرتبطة بالمنتج
    has_sales = InvoiceItem.query.filter_by(product_id=product.id).count() > 0
    has_purchases = PurchaseItem.query.filter_by(product_id=product.id).count() > 0
    has_internal = InternalSale.query.filter_by(product_id=product.id).count() > 0

    if has_sales:
        raise ReferentialIntegrityError(_('لا يمكن حذف هذا المنتج لأنه مرتبط بفواتير'))
    if has_purchases:
        raise ReferentialIntegrityError(_('لا يمكن حذف هذا المنتج لأنه مرتبط بمشتريات'))
    if has_internal:
        raise ReferentialIntegrityError(_('لا يمكن حذف هذا المنتج لأنه مرتبط بمبيعات داخلية'))
    with write_scope() as session:
        session.delete(product)


def find_by_barcode(barcode):
    return Product.query.filter_by(barcode=barcode).first()


def product_row(product, branch):
    return {
        'id': product.id,
        'barcode': product.barcode,
        'name': product.name,
        'category_id': product.category_id,
        'category_name': product.category.name if product.category else None,
        'purchase_price': product.purchase_price,
        'sale_price': product.sale_price,
        'margin': margin(product.sale_price, product.purchase_price),
        'quantity': product.get_stock(branch),
        'is_low_stock': is_low_stock(product, branch),
        'stock_status': get_stock_status(product, branch),
        'notes': product.notes,
    }


def list_products(gym, search=None, available_only=False):
    """
    المنتجات مع كمية فرع النادي الحالي.
    available_only: المنتجات المتوفرة فقط (قائمة البيع)
    """
    column = getattr(Product, Product.quantity_column(gym.type))
    q = Product.query.outerjoin(Category)
    if available_only:
        q = q.filter(column > 0)
    if search and search.strip():
        like = f'%{search.strip()}%'
        q = q.filter(db.or_(Product.name.like(like), Product.barcode.like(like),
                            Category.name.like(like)))
    products = q.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return [product_row(p, gym.type) for p in products]


def low_stock_products(gym):
    column = getattr(Product, Product.quantity_column(gym.type))
    products = Product.query.filter(db.func.coalesce(column, 0) < LOW_STOCK_THRESHOLD) \
                            .order_by(column.asc()).all()
    return [product_row(p, gym.type) for p in products]
