from models import db

SUBSCRIPTION_KINDS = ('monthly', 'session')
SUBSCRIBER_STATUSES = ('active', 'expiring', 'expired')

# نموذج نوع الاشتراك (قالب: شهري أو بالجلسات)
class SubscriptionType(db.Model):
    __tablename__ = 'subscription_types'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, nullable=False)
    type = db.Column(db.Text, db.CheckConstraint("type IN ('monthly', 'session')"), nullable=False)
    duration_months = db.Column(db.Integer, nullable=True)
    session_count = db.Column(db.Integer, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    gym = db.relationship('Gym', backref='subscription_types')

    def __repr__(self):
        return f'<SubscriptionType {self.name} ({self.type})>'

    @property
    def kind(self):
        return self.type

    def is_session_based(self):
        return self.type == 'session'


# نموذج المشترك
class Subscriber(db.Model):
    __tablename__ = 'subscribers'
    __table_args__ = (
        db.Index('idx_subscribers_gym_status', 'gym_id', 'status'),
    )
    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.Text, nullable=False)
    phone = db.Column(db.Text, nullable=True)
    subscription_type_id = db.Column(db.Integer, db.ForeignKey('subscription_types.id'), nullable=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    price_paid = db.Column(db.Numeric(10, 2), nullable=False)
    remaining_sessions = db.Column(db.Integer, nullable=True)
    # حالة محسوبة تُخزن فقط للفلترة، ويعاد حسابها عند كل قراءة
    status = db.Column(db.Text, default='active')
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    subscription_type = db.relationship('SubscriptionType')
    gym = db.relationship('Gym', backref='subscribers')

    def __repr__(self):
        return f'<Subscriber {self.full_name}>'

    @property
    def kind(self):
        return self.subscription_type.kind if self.subscription_type else None
