import random
import time

from flask_babel import gettext as _

from services.errors import DataAccessError

MAX_ATTEMPTS = 20


def _token(prefix=None):
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = str(random.randint(0, 999)).zfill(3)
    if prefix:
        return f'{prefix}-{timestamp}-{suffix}'
    return f'{timestamp}{suffix}'


def generate_reference(prefix=None, exists=None):
    """
    رقم مرجعي: {prefix}-{آخر 8 أرقام من الوقت بالمللي ثانية}-{3 أرقام عشوائية}
    بدون prefix يكون رقماً فقط (يستخدم للباركود).
    exists: دالة تتحقق من وجود الرقم مسبقاً، ويعاد التوليد عند التكرار.
    """
    token = _token(prefix)
    attempts = 1
    while exists is not None and exists(token):
        if attempts >= MAX_ATTEMPTS:
            raise DataAccessError(_('تعذر توليد رقم مرجعي غير مكرر، حاول مرة أخرى'))
        token = _token(prefix)
        attempts += 1
    return token
