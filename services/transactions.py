"""
تسجيل فواتير البيع والمشتريات والمبيعات الداخلية.

الفاتورة وأصنافها وتعديلات المخزون تُكتب في نطاق واحد (write_scope):
إذا فشل أي صنف لا يُحفظ شيء على الإطلاق.
"""

from flask import current_app
from flask_babel import gettext as _

from models.internal_sale import PRICE_TYPES, InternalSale
from models.invoice import Invoice, InvoiceItem
from models.product import Product
from models.purchase import Purchase, PurchaseItem
from services.errors import ValidationError
from services.gateway import write_scope
from services.gyms import load_owned
from services.inventory import apply_internal_sale, apply_purchase, apply_sale
from services.money import ZERO, invoice_totals, line_total, non_negative_money
from services.money import quantity as to_quantity
from services.references import generate_reference

INVOICE_PREFIX = 'INV'


def _lock_product(product_id):
    product = None
    if product_id not in (None, ''):
        product = Product.query.filter_by(id=product_id).with_for_update().first()
    if product is None:
        raise ValidationError(_('المنتج غير موجود (ID: %(id)s)', id=product_id))
    return product


def _invoice_number_exists(number):
    return Invoice.query.filter_by(invoice_number=number).count() > 0


def _resolve_lines(items, price_key, default_price, price_label):
    """تحويل أصناف الإدخال إلى (المنتج، الكمية، السعر)"""
    if not items:
        raise ValidationError(_('السلة فارغة'))
    lines = []
    for item in items:
        product = _lock_product(item.get('product_id'))
        qty = to_quantity(item.get('quantity'))
        price = item.get(price_key)
        if price is None:
            price = default_price(product)
        lines.append((product, qty, non_negative_money(price, price_label)))
    return lines


def create_invoice(gym, user_id, items, discount=0, paid_amount=None, is_credit=False,
                   customer_name=None, customer_phone=None):
    """
    فاتورة بيع.
    items: [{'product_id': .., 'quantity': .., 'unit_price': ..}]
    بدون unit_price يستخدم سعر البيع الحالي للمنتج.
    """
    # قفل المنتجات يتم داخل النطاق حتى يُلغى مع أي خطأ في المدخلات
    with write_scope() as session:
        lines = _resolve_lines(items, 'unit_price', lambda p: p.sale_price, _('سعر الوحدة'))
        discount = non_negative_money(discount, _('الخصم'))
        subtotal, total = invoice_totals([(qty, price) for product, qty, price in lines], discount)
        if total < 0:
            raise ValidationError(_('الخصم أكبر من إجمالي الفاتورة'))
        if paid_amount is None:
            paid_amount = ZERO if is_credit else total
        paid_amount = non_negative_money(paid_amount, _('المبلغ المدفوع'))

        invoice = Invoice(
            invoice_number=generate_reference(INVOICE_PREFIX, exists=_invoice_number_exists),
            customer_name=(customer_name or '').strip() or None,
            customer_phone=(customer_phone or '').strip() or None,
            subtotal=subtotal,
            discount=discount,
            total=total,
            paid_amount=paid_amount,
            is_credit=bool(is_credit),
            gym_id=gym.id,
            user_id=user_id,
        )
        session.add(invoice)
        for product, qty, unit_price in lines:
            apply_sale(product, gym.type, qty)
            invoice.items.append(InvoiceItem(
                product_id=product.id,
                quantity=qty,
                unit_price=unit_price,
                total_price=line_total(qty, unit_price),
            ))
    current_app.logger.info('Invoice %s recorded: total %s, %s items, gym %s',
                            invoice.invoice_number, invoice.total, len(lines), gym.id)
    return invoice


def create_purchase(gym, user_id, items, supplier_name=None):
    """
    فاتورة شراء تزيد مخزون الفرع.
    items: [{'product_id': .., 'quantity': .., 'unit_cost': ..}]
    """
    with write_scope() as session:
        lines = _resolve_lines(items, 'unit_cost', lambda p: p.purchase_price, _('تكلفة الوحدة'))
        purchase = Purchase(
            supplier_name=(supplier_name or '').strip() or None,
            total_amount=sum((line_total(qty, cost) for product, qty, cost in lines), ZERO),
            gym_id=gym.id,
            user_id=user_id,
        )
        session.add(purchase)
        for product, qty, unit_cost in lines:
            apply_purchase(product, gym.type, qty, unit_cost)
            purchase.items.append(PurchaseItem(
                product_id=product.id,
                quantity=qty,
                unit_cost=unit_cost,
                total_cost=line_total(qty, unit_cost),
            ))
    current_app.logger.info('Purchase %s recorded: total %s, gym %s',
                            purchase.id, purchase.total_amount, gym.id)
    return purchase


def resolve_internal_price(product, price_type, unit_price=None):
    if price_type not in PRICE_TYPES:
        raise ValidationError(_('نوع السعر غير معروف'))
    if price_type == 'purchase':
        return non_negative_money(product.purchase_price, _('سعر الشراء'))
    if unit_price in (None, ''):
        raise ValidationError(_('يرجى إدخال السعر اليدوي'))
    return non_negative_money(unit_price, _('السعر اليدوي'))


def create_internal_sale(gym, user_id, admin_name, product_id, quantity,
                         price_type='purchase', unit_price=None):
    """بيع داخلي للإدارة بسعر الشراء أو بسعر يدوي"""
    if not admin_name or not admin_name.strip():
        raise ValidationError(_('اسم المسؤول مطلوب'))

    with write_scope() as session:
        product = _lock_product(product_id)
        qty = to_quantity(quantity)
        price = resolve_internal_price(product, price_type, unit_price)
        apply_internal_sale(product, gym.type, qty)
        sale = InternalSale(
            admin_name=admin_name.strip(),
            product_id=product.id,
            quantity=qty,
            price_type=price_type,
            unit_price=price,
            total_price=line_total(qty, price),
            gym_id=gym.id,
            user_id=user_id,
        )
        session.add(sale)
    current_app.logger.info('Internal sale %s recorded for %s', sale.id, sale.admin_name)
    return sale


# ---------- السجلات ----------

def list_invoices(gym):
    invoices = Invoice.query.filter_by(gym_id=gym.id) \
                            .order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()
    return [{
        'id': i.id,
        'invoice_number': i.invoice_number,
        'customer_name': i.customer_name,
        'customer_phone': i.customer_phone,
        'subtotal': i.subtotal,
        'discount': i.discount,
        'total': i.total,
        'paid_amount': i.paid_amount,
        'is_credit': i.is_credit,
        'user_name': i.user.full_name if i.user else None,
        'items_count': len(i.items),
        'created_at': i.created_at,
    } for i in invoices]


def get_invoice(gym, invoice_id):
    invoice = load_owned(Invoice, invoice_id, gym, _('الفاتورة غير موجودة'))
    return {
        'id': invoice.id,
        'invoice_number': invoice.invoice_number,
        'customer_name': invoice.customer_name,
        'subtotal': invoice.subtotal,
        'discount': invoice.discount,
        'total': invoice.total,
        'paid_amount': invoice.paid_amount,
        'is_credit': invoice.is_credit,
        'created_at': invoice.created_at,
        'items': [{
            'product_id': item.product_id,
            'product_name': item.product.name if item.product else None,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'total_price': item.total_price,
        } for item in invoice.items],
    }


def list_purchases(gym):
    purchases = Purchase.query.filter_by(gym_id=gym.id) \
                              .order_by(Purchase.created_at.desc(), Purchase.id.desc()).all()
    return [{
        'id': p.id,
        'supplier_name': p.supplier_name,
        'total_amount': p.total_amount,
        'user_name': p.user.full_name if p.user else None,
        'items': [{
            'product_id': item.product_id,
            'product_name': item.product.name if item.product else None,
            'quantity': item.quantity,
            'unit_cost': item.unit_cost,
            'total_cost': item.total_cost,
        } for item in p.items],
        'created_at': p.created_at,
    } for p in purchases]


def list_internal_sales(gym):
    sales = InternalSale.query.filter_by(gym_id=gym.id) \
                              .order_by(InternalSale.created_at.desc(), InternalSale.id.desc()).all()
    return [{
        'id': s.id,
        'admin_name': s.admin_name,
        'product_id': s.product_id,
        'product_name': s.product.name if s.product else None,
        'quantity': s.quantity,
        'price_type': s.price_type,
        'unit_price': s.unit_price,
        'total_price': s.total_price,
        'created_at': s.created_at,
    } for s in sales]
