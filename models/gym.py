import json
from models import db

GYM_TYPES = ('male', 'female')

# نموذج النادي (فرع الرجال أو فرع السيدات)
class Gym(db.Model):
    __tablename__ = 'gyms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, nullable=False)
    type = db.Column(db.Text, db.CheckConstraint("type IN ('male', 'female')"), nullable=False)
    logo = db.Column(db.Text, nullable=True)
    settings = db.Column(db.Text, default='{}')
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    def __repr__(self):
        return f'<Gym {self.name} ({self.type})>'

    def get_settings(self):
        """إعدادات النادي كقاموس"""
        if not self.settings:
            return {}
        return json.loads(self.settings)

    def set_settings(self, values):
        self.settings = json.dumps(values, ensure_ascii=False)
