from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from models import db

# نموذج المستخدم
class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.Text, unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    full_name = db.Column(db.Text, nullable=False)
    role = db.Column(db.Text, default='admin')
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)  # النادي المرتبط به
    is_active = db.Column(db.Boolean, default=True)  # حالة الحساب
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    # العلاقات
    gym = db.relationship('Gym', backref='users')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_session(self):
        """بيانات الجلسة التي تحتاجها واجهة المستخدم"""
        return {
            'id': self.id,
            'username': self.username,
            'full_name': self.full_name,
            'role': self.role,
            'gym_id': self.gym_id,
            'gym_name': self.gym.name if self.gym else None,
            'gym_type': self.gym.type if self.gym else None,
        }
