from flask_babel import gettext as _

from models import db
from models.gym import Gym
from services.errors import ValidationError
from services.gateway import write_scope


def get_gym(gym_id):
    gym = db.session.get(Gym, gym_id) if gym_id else None
    if gym is None:
        raise ValidationError(_('النادي غير موجود'))
    return gym


def list_gyms():
    return Gym.query.order_by(Gym.name).all()


def load_owned(model, obj_id, gym=None, message=None):
    """
    تحميل سجل بالمعرف، مع التأكد أنه تابع لنفس النادي
    إذا كان للنموذج عمود gym_id
    """
    obj = db.session.get(model, obj_id) if obj_id is not None else None
    if obj is None or (gym is not None and getattr(obj, 'gym_id', gym.id) != gym.id):
        raise ValidationError(message or _('السجل غير موجود'))
    return obj


def get_settings(gym):
    return gym.get_settings()


def update_settings(gym, **values):
    """دمج القيم الجديدة مع الإعدادات الحالية"""
    with write_scope():
        settings = gym.get_settings()
        settings.update(values)
        gym.set_settings(settings)
    return settings
