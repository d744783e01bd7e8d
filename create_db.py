from decimal import Decimal

from app import create_app
from models import db
from models.category import Category
from models.gym import Gym
from models.subscription import SubscriptionType
from models.user import User

DEFAULT_PASSWORD = 'admin123'

GYMS = [
    {'name': 'نادي الرجال الرياضي', 'type': 'male'},
    {'name': 'نادي السيدات الرياضي', 'type': 'female'},
]

ADMINS = {
    'male': ('admin_male', 'مدير نادي الرجال'),
    'female': ('admin_female', 'مديرة نادي السيدات'),
}

CATEGORIES = [
    ('مكملات غذائية', 'البروتين والفيتامينات'),
    ('معدات رياضية', 'أدوات التمرين والملابس'),
    ('مشروبات', 'مشروبات الطاقة والماء'),
    ('وجبات خفيفة', 'وجبات صحية خفيفة'),
]

# (الاسم، النوع، المدة بالأشهر، عدد الجلسات، السعر)
SUBSCRIPTION_TYPES = {
    'male': [
        ('اشتراك شهري', 'monthly', 1, None, Decimal('3000')),
        ('اشتراك ثلاثة أشهر', 'monthly', 3, None, Decimal('8000')),
        ('15 جلسة', 'session', 3, 15, Decimal('4500')),
    ],
    'female': [
        ('اشتراك شهري', 'monthly', 1, None, Decimal('2500')),
        ('اشتراك ثلاثة أشهر', 'monthly', 3, None, Decimal('7000')),
        ('12 جلسة', 'session', 3, 12, Decimal('3600')),
    ],
}


def seed_defaults():
    """إضافة البيانات الافتراضية، لا تكرر ما هو موجود"""
    for values in GYMS:
        gym = Gym.query.filter_by(type=values['type']).first()
        if gym is None:
            gym = Gym(name=values['name'], type=values['type'], settings='{}')
            db.session.add(gym)
            db.session.flush()

        username, full_name = ADMINS[gym.type]
        if User.query.filter_by(username=username).first() is None:
            admin = User(username=username, full_name=full_name, role='admin', gym_id=gym.id)
            admin.set_password(DEFAULT_PASSWORD)
            db.session.add(admin)

        for name, kind, months, sessions, price in SUBSCRIPTION_TYPES[gym.type]:
            if SubscriptionType.query.filter_by(gym_id=gym.id, name=name).first() is None:
                db.session.add(SubscriptionType(
                    name=name, type=kind, duration_months=months,
                    session_count=sessions, price=price, gym_id=gym.id,
                ))

    for name, description in CATEGORIES:
        if Category.query.filter_by(name=name).first() is None:
            db.session.add(Category(name=name, description=description))

    db.session.commit()


def create_database():
    app = create_app()
    with app.app_context():
        db.create_all()
        print("تم إنشاء جداول قاعدة البيانات")

        seed_defaults()
        print("تم إضافة البيانات الافتراضية")
        print("بيانات تسجيل الدخول:")
        for username, _ in ADMINS.values():
            print(f"اسم المستخدم: {username}")
        print(f"كلمة المرور: {DEFAULT_PASSWORD}")


if __name__ == '__main__':
    create_database()
