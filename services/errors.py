"""
أخطاء النظام.

كل خطأ له رمز ثابت (code) يمكن للواجهة الاعتماد عليه بدلاً من نص الرسالة.
جميع الأخطاء خاصة بالعملية الواحدة ويمكن للمستخدم إعادة المحاولة.
"""

from flask_babel import gettext as _


class GymLedgerError(Exception):
    code = 'GYM_LEDGER_ERROR'

    def __init__(self, message=None):
        self.message = message or _('حدث خطأ غير متوقع')
        super().__init__(self.message)


class ValidationError(GymLedgerError):
    """مدخلات غير صحيحة: كمية غير موجبة، قائمة أصناف فارغة، اختيار ناقص"""
    code = 'VALIDATION_ERROR'


class InsufficientStockError(GymLedgerError):
    """البيع سيجعل كمية الفرع سالبة"""
    code = 'INSUFFICIENT_STOCK'

    def __init__(self, product_id, branch, available, requested, product_name=None):
        self.product_id = product_id
        self.branch = branch
        self.available = available
        self.requested = requested
        super().__init__(_(
            'الكمية المتوفرة من المنتج %(name)s (%(available)s) أقل من الكمية المطلوبة (%(requested)s)',
            name=product_name or product_id, available=available, requested=requested,
        ))


class ReferentialIntegrityError(GymLedgerError):
    """لا يمكن الحذف لوجود سجلات مرتبطة"""
    code = 'REFERENTIAL_INTEGRITY'


class DataAccessError(GymLedgerError):
    """فشل في الوصول لقاعدة البيانات"""
    code = 'DATA_ACCESS_ERROR'

    def __init__(self, message=None):
        super().__init__(message or _('تعذر الوصول إلى قاعدة البيانات، حاول مرة أخرى'))


class AuthenticationError(GymLedgerError):
    code = 'AUTHENTICATION_ERROR'
