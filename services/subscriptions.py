"""
دورة حياة الاشتراك.

الدوال الأولى (add_months حتى renew) دوال حسابية لا تلمس قاعدة البيانات.
باقي الدوال تحفظ النتائج عبر write_scope.

حالة المشترك (status) ليست مصدر الحقيقة: تُحسب من تاريخ النهاية
والجلسات المتبقية ونوع الاشتراك، وتُخزن فقط لتسهيل الفلترة.
"""

from datetime import date, timedelta

from flask import current_app
from flask_babel import gettext as _

from models import db
from models.subscription import SUBSCRIPTION_KINDS, SUBSCRIBER_STATUSES, Subscriber, SubscriptionType
from services.errors import ReferentialIntegrityError, ValidationError
from services.gateway import write_scope
from services.gyms import load_owned
from services.money import non_negative_money

# صلاحية اشتراك الجلسات ثلاثة أشهر مهما كان عدد الجلسات
SESSION_VALIDITY_MONTHS = 3
EXPIRING_WINDOW_DAYS = 7


def add_months(start, months):
    """
    إضافة أشهر مع إبقاء اليوم داخل حدود الشهر (31 يناير + شهر = 28/29 فبراير)
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    # آخر يوم في الشهر الهدف
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    day = min(start.day, last_day.day)
    return date(y, m, day)


def compute_end_date(start_date, subscription_type):
    if subscription_type.type == 'monthly':
        months = subscription_type.duration_months
        if not months or months <= 0:
            raise ValidationError(_('مدة الاشتراك الشهري يجب أن تكون أكبر من صفر'))
    elif subscription_type.type == 'session':
        months = SESSION_VALIDITY_MONTHS
    else:
        raise ValidationError(_('نوع اشتراك غير معروف'))
    return add_months(start_date, months)


def compute_remaining_sessions(subscription_type):
    if subscription_type.is_session_based():
        return subscription_type.session_count
    return None


def derive_status(kind, remaining_sessions, end_date, today):
    # نفاد الجلسات يسبق فحص التاريخ
    if kind == 'session' and (remaining_sessions or 0) <= 0:
        return 'expired'
    if kind == 'monthly' and today > end_date:
        return 'expired'
    if 0 <= (end_date - today).days <= EXPIRING_WINDOW_DAYS:
        return 'expiring'
    return 'active'


def subscriber_status(subscriber, today=None):
    return derive_status(subscriber.kind, subscriber.remaining_sessions,
                         subscriber.end_date, today or date.today())


def refresh_status(subscriber, today=None):
    subscriber.status = subscriber_status(subscriber, today)
    return subscriber.status


def use_session(subscriber):
    """خصم جلسة واحدة، ويرفض إذا لم يكن الاشتراك بالجلسات أو نفدت الجلسات"""
    if subscriber.kind != 'session':
        raise ValidationError(_('هذا الاشتراك ليس اشتراك جلسات'))
    if (subscriber.remaining_sessions or 0) <= 0:
        raise ValidationError(_('لا توجد جلسات متبقية'))
    subscriber.remaining_sessions -= 1
    return subscriber.remaining_sessions


def renew(subscriber, subscription_type, today=None):
    """بداية فترة جديدة من اليوم، المبلغ المدفوع لا يتغير هنا"""
    today = today or date.today()
    subscriber.subscription_type = subscription_type
    subscriber.start_date = today
    subscriber.end_date = compute_end_date(today, subscription_type)
    subscriber.remaining_sessions = compute_remaining_sessions(subscription_type)
    subscriber.status = 'active'
    return subscriber


# ---------- أنواع الاشتراكات ----------

def _validate_type_fields(kind, duration_months, session_count):
    if kind not in SUBSCRIPTION_KINDS:
        raise ValidationError(_('نوع اشتراك غير معروف'))
    if kind == 'monthly':
        if not isinstance(duration_months, int) or duration_months <= 0:
            raise ValidationError(_('مدة الاشتراك الشهري يجب أن تكون أكبر من صفر'))
        session_count = None
    else:
        if not isinstance(session_count, int) or session_count <= 0:
            raise ValidationError(_('عدد الجلسات يجب أن يكون أكبر من صفر'))
    return duration_months, session_count


def _has_subscribers(subscription_type):
    return Subscriber.query.filter_by(subscription_type_id=subscription_type.id).count() > 0


def create_subscription_type(gym, name, kind, price, duration_months=None, session_count=None):
    if not name or not name.strip():
        raise ValidationError(_('اسم الاشتراك مطلوب'))
    duration_months, session_count = _validate_type_fields(kind, duration_months, session_count)
    subscription_type = SubscriptionType(
        name=name.strip(),
        type=kind,
        duration_months=duration_months,
        session_count=session_count,
        price=non_negative_money(price, _('السعر')),
        gym_id=gym.id,
        is_active=True,
    )
    with write_scope() as session:
        session.add(subscription_type)
    return subscription_type


def update_subscription_type(gym, type_id, name=None, kind=None, price=None,
                             duration_months=None, session_count=None):
    """تغيير النوع (شهري/جلسات) مسموح فقط إذا لم يكن هناك مشتركون عليه"""
    subscription_type = load_owned(SubscriptionType, type_id, gym, _('نوع الاشتراك غير موجود'))
    if kind and kind != subscription_type.kind and _has_subscribers(subscription_type):
        raise ValidationError(_('لا يمكن تغيير نوع الاشتراك لوجود مشتركين مرتبطين به'))
    kind = kind or subscription_type.kind
    if duration_months is None:
        duration_months = subscription_type.duration_months
    if session_count is None:
        session_count = subscription_type.session_count
    duration_months, session_count = _validate_type_fields(kind, duration_months, session_count)
    with write_scope():
        if name is not None:
            if not name.strip():
                raise ValidationError(_('اسم الاشتراك مطلوب'))
            subscription_type.name = name.strip()
        if price is not None:
            subscription_type.price = non_negative_money(price, _('السعر'))
        subscription_type.type = kind
        subscription_type.duration_months = duration_months
        subscription_type.session_count = session_count
    return subscription_type


def set_subscription_type_active(gym, type_id, active):
    subscription_type = load_owned(SubscriptionType, type_id, gym, _('نوع الاشتراك غير موجود'))
    with write_scope():
        subscription_type.is_active = bool(active)
    return subscription_type


def delete_subscription_type(gym, type_id):
    subscription_type = load_owned(SubscriptionType, type_id, gym, _('نوع الاشتراك غير موجود'))
    if _has_subscribers(subscription_type):
        raise ReferentialIntegrityError(_('لا يمكن حذف نوع الاشتراك لوجود مشتركين مرتبطين به'))
    with write_scope() as session:
        session.delete(subscription_type)


def list_subscription_types(gym, active_only=False):
    q = SubscriptionType.query.filter_by(gym_id=gym.id)
    if active_only:
        q = q.filter_by(is_active=True)
    return q.order_by(SubscriptionType.name).all()


# ---------- المشتركون ----------

def _active_type(gym, type_id):
    subscription_type = load_owned(SubscriptionType, type_id, gym, _('يرجى اختيار نوع اشتراك صحيح'))
    if not subscription_type.is_active:
        raise ValidationError(_('نوع الاشتراك غير مفعل'))
    return subscription_type


def create_subscriber(gym, full_name, phone, subscription_type_id, start_date=None,
                      price_paid=None, today=None):
    if not full_name or not full_name.strip():
        raise ValidationError(_('اسم المشترك مطلوب'))
    subscription_type = _active_type(gym, subscription_type_id)
    start_date = start_date or today or date.today()
    if price_paid is None:
        price_paid = subscription_type.price
    subscriber = Subscriber(
        full_name=full_name.strip(),
        phone=(phone or '').strip() or None,
        subscription_type=subscription_type,
        start_date=start_date,
        end_date=compute_end_date(start_date, subscription_type),
        price_paid=non_negative_money(price_paid, _('المبلغ المدفوع')),
        remaining_sessions=compute_remaining_sessions(subscription_type),
        gym_id=gym.id,
    )
    refresh_status(subscriber, today)
    with write_scope() as session:
        session.add(subscriber)
    current_app.logger.info('Subscriber %s created in gym %s', subscriber.id, gym.id)
    return subscriber


def get_subscriber(gym, subscriber_id, today=None):
    subscriber = load_owned(Subscriber, subscriber_id, gym, _('المشترك غير موجود'))
    if subscriber.status != subscriber_status(subscriber, today):
        with write_scope():
            refresh_status(subscriber, today)
    return subscriber


def update_subscriber(gym, subscriber_id, full_name=None, phone=None, price_paid=None,
                      start_date=None, today=None):
    """تعديل بيانات المشترك، تغيير تاريخ البداية يعيد حساب تاريخ النهاية"""
    subscriber = load_owned(Subscriber, subscriber_id, gym, _('المشترك غير موجود'))
    with write_scope():
        if full_name is not None:
            if not full_name.strip():
                raise ValidationError(_('اسم المشترك مطلوب'))
            subscriber.full_name = full_name.strip()
        if phone is not None:
            subscriber.phone = phone.strip() or None
        if price_paid is not None:
            subscriber.price_paid = non_negative_money(price_paid, _('المبلغ المدفوع'))
        if start_date is not None:
            subscriber.start_date = start_date
            subscriber.end_date = compute_end_date(start_date, subscriber.subscription_type)
        refresh_status(subscriber, today)
    return subscriber


def delete_subscriber(gym, subscriber_id):
    subscriber = load_owned(Subscriber, subscriber_id, gym, _('المشترك غير موجود'))
    with write_scope() as session:
        session.delete(subscriber)


def record_session_use(gym, subscriber_id, today=None):
    subscriber = load_owned(Subscriber, subscriber_id, gym, _('المشترك غير موجود'))
    with write_scope():
        use_session(subscriber)
        refresh_status(subscriber, today)
    current_app.logger.info('Session used by subscriber %s, %s left',
                            subscriber.id, subscriber.remaining_sessions)
    return subscriber


def renew_subscriber(gym, subscriber_id, subscription_type_id=None, today=None, price_paid=None):
    """
    تجديد الاشتراك بنفس النوع أو بنوع جديد.
    price_paid يُحدث فقط إذا قرر المستدعي تسجيل دفعة جديدة.
    """
    subscriber = load_owned(Subscriber, subscriber_id, gym, _('المشترك غير موجود'))
    subscription_type = _active_type(gym, subscription_type_id or subscriber.subscription_type_id)
    with write_scope():
        renew(subscriber, subscription_type, today)
        if price_paid is not None:
            subscriber.price_paid = non_negative_money(price_paid, _('المبلغ المدفوع'))
    current_app.logger.info('Subscriber %s renewed until %s', subscriber.id, subscriber.end_date)
    return subscriber


def refresh_statuses(gym, today=None):
    """إعادة حساب حالة كل المشتركين وحفظ ما تغير، يرجع عدد التغييرات"""
    changed = 0
    with write_scope():
        for subscriber in Subscriber.query.filter_by(gym_id=gym.id).all():
            status = subscriber_status(subscriber, today)
            if subscriber.status != status:
                subscriber.status = status
                changed += 1
    return changed


def list_subscribers(gym, status=None, search=None, today=None):
    if status is not None and status not in SUBSCRIBER_STATUSES:
        raise ValidationError(_('حالة غير معروفة'))
    refresh_statuses(gym, today)
    q = Subscriber.query.filter_by(gym_id=gym.id)
    if status:
        q = q.filter(Subscriber.status == status)
    if search and search.strip():
        like = f'%{search.strip()}%'
        q = q.filter(db.or_(Subscriber.full_name.like(like), Subscriber.phone.like(like)))
    result = []
    for s in q.order_by(Subscriber.end_date.asc()).all():
        result.append({
            'id': s.id,
            'full_name': s.full_name,
            'phone': s.phone,
            'subscription_type_id': s.subscription_type_id,
            'subscription_name': s.subscription_type.name if s.subscription_type else None,
            'kind': s.kind,
            'start_date': s.start_date,
            'end_date': s.end_date,
            'price_paid': s.price_paid,
            'remaining_sessions': s.remaining_sessions,
            'status': s.status,
        })
    return result
