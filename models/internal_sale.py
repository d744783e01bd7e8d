from models import db

PRICE_TYPES = ('purchase', 'manual')

# البيع الداخلي (القائمة البيضاء): بيع للإدارة بسعر الشراء أو بسعر يدوي
class InternalSale(db.Model):
    __tablename__ = 'internal_sales'
    id = db.Column(db.Integer, primary_key=True)
    admin_name = db.Column(db.Text, nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'))
    quantity = db.Column(db.Integer, nullable=False)
    price_type = db.Column(db.Text, db.CheckConstraint("price_type IN ('purchase', 'manual')"), nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    product = db.relationship('Product')
    gym = db.relationship('Gym')
    user = db.relationship('User')
