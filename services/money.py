from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from flask_babel import gettext as _

from services.errors import ValidationError

TWOPLACES = Decimal('0.01')
ZERO = Decimal('0.00')


def D(value, field='المبلغ'):
    """تحويل قيمة إلى Decimal، القيم غير الرقمية ترفض"""
    if value is None or value == '':
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(_('%(field)s يجب أن يكون رقماً', field=field))
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(_('%(field)s يجب أن يكون رقماً', field=field)) from None
    if not result.is_finite():
        raise ValidationError(_('%(field)s يجب أن يكون رقماً', field=field))
    return result


def money(value):
    return D(value).quantize(TWOPLACES, ROUND_HALF_UP)


def non_negative_money(value, field='المبلغ'):
    amount = D(value, field).quantize(TWOPLACES, ROUND_HALF_UP)
    if amount < 0:
        raise ValidationError(_('%(field)s لا يمكن أن يكون سالباً', field=field))
    return amount


def quantity(value, field='الكمية'):
    """كمية صحيحة موجبة"""
    if isinstance(value, bool):
        raise ValidationError(_('%(field)s غير صحيحة', field=field))
    try:
        qty = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(_('%(field)s غير صحيحة', field=field)) from None
    if not qty.is_finite() or qty != qty.to_integral_value():
        raise ValidationError(_('%(field)s يجب أن تكون عدداً صحيحاً', field=field))
    if qty <= 0:
        raise ValidationError(_('%(field)s يجب أن تكون أكبر من صفر', field=field))
    return int(qty)


def line_total(qty, unit_price):
    return money(D(qty) * D(unit_price))


def invoice_totals(lines, discount=0):
    """
    حساب إجمالي الفاتورة.
    lines: قائمة (الكمية، سعر الوحدة)
    يرجع (subtotal, total) حيث total = subtotal - discount
    """
    subtotal = sum((line_total(qty, price) for qty, price in lines), ZERO)
    total = money(subtotal - D(discount))
    return money(subtotal), total


def margin(sale_price, purchase_price):
    """هامش الربح للوحدة"""
    return money(D(sale_price) - D(purchase_price))


def line_profit(total_price, qty, purchase_price):
    return money(D(total_price) - D(qty) * D(purchase_price))
