from flask import current_app
from flask_babel import gettext as _
from flask_login import current_user, login_user, logout_user

from models.gym import Gym
from models.user import User
from services.errors import AuthenticationError, ValidationError
from services.gateway import run, write_scope
from services.gyms import get_gym, load_owned

MIN_PASSWORD_LENGTH = 6


def login(username, password):
    """
    التحقق من بيانات الدخول وتسجيل الجلسة.
    يرجع {'success': True, 'user': {...}} أو {'success': False, 'message': ...}
    """
    user = User.query.join(Gym).filter(
        User.username == (username or '').strip(),
        User.is_active.is_(True),
    ).first()
    if user is None:
        current_app.logger.info('Login failed for %s: user not found', username)
        return {'success': False, 'message': _('المستخدم غير موجود')}
    if not user.check_password(password or ''):
        current_app.logger.info('Login failed for %s: wrong password', username)
        return {'success': False, 'message': _('كلمة المرور غير صحيحة')}
    login_user(user)
    current_app.logger.info('User %s logged in to gym %s', user.username, user.gym_id)
    return {'success': True, 'user': user.to_session()}


def logout():
    logout_user()


def current_session():
    if current_user.is_authenticated:
        return current_user.to_session()
    return None


def current_gym():
    """نادي المستخدم الحالي، كل العمليات تتم في نطاقه"""
    if not current_user.is_authenticated:
        raise AuthenticationError(_('يجب تسجيل الدخول أولاً'))
    return current_user.gym


# ---------- إدارة المستخدمين ----------

def _check_password(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(_('كلمة المرور يجب أن تكون %(n)s أحرف على الأقل', n=MIN_PASSWORD_LENGTH))


def _check_username(username, exclude_id=None):
    if not username or not username.strip():
        raise ValidationError(_('اسم المستخدم مطلوب'))
    q = User.query.filter(User.username == username.strip())
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    if q.count() > 0:
        raise ValidationError(_('اسم المستخدم مستخدم بالفعل'))
    return username.strip()


def create_user(username, password, full_name, gym_id, role='admin', is_active=True):
    username = _check_username(username)
    _check_password(password)
    if not full_name or not full_name.strip():
        raise ValidationError(_('الاسم الكامل مطلوب'))
    gym = get_gym(gym_id)
    user = User(
        username=username,
        full_name=full_name.strip(),
        role=role or 'admin',
        gym_id=gym.id,
        is_active=bool(is_active),
    )
    user.set_password(password)
    with write_scope() as session:
        session.add(user)
    return user


def update_user(user_id, username=None, full_name=None, role=None, gym_id=None,
                is_active=None, password=None):
    """كلمة المرور تتغير فقط إذا تم إدخالها"""
    user = load_owned(User, user_id, message=_('المستخدم غير موجود'))
    with write_scope():
        if username is not None:
            user.username = _check_username(username, exclude_id=user.id)
        if full_name is not None:
            if not full_name.strip():
                raise ValidationError(_('الاسم الكامل مطلوب'))
            user.full_name = full_name.strip()
        if role is not None:
            user.role = role
        if gym_id is not None:
            user.gym_id = get_gym(gym_id).id
        if is_active is not None:
            user.is_active = bool(is_active)
        if password:
            _check_password(password)
            user.set_password(password)
    return user


def delete_user(user_id, acting_user_id):
    if user_id == acting_user_id:
        raise ValidationError(_('لا يمكنك حذف حسابك الخاص'))
    user = load_owned(User, user_id, message=_('المستخدم غير موجود'))
    with write_scope() as session:
        session.delete(user)


def set_user_active(user_id, active, acting_user_id):
    if user_id == acting_user_id:
        raise ValidationError(_('لا يمكنك تعطيل حسابك الخاص'))
    result = run('UPDATE users SET is_active = :active WHERE id = :id',
                 {'active': bool(active), 'id': user_id})
    if result.affected_count == 0:
        raise ValidationError(_('المستخدم غير موجود'))
    return result


def list_users():
    users = User.query.outerjoin(Gym).order_by(User.created_at.desc(), User.id.desc()).all()
    return [{
        'id': u.id,
        'username': u.username,
        'full_name': u.full_name,
        'role': u.role,
        'gym_id': u.gym_id,
        'gym_name': u.gym.name if u.gym else None,
        'gym_type': u.gym.type if u.gym else None,
        'is_active': u.is_active,
        'created_at': u.created_at,
    } for u in users]
