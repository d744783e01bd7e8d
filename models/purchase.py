from models import db

# فاتورة شراء (إدخال مخزون)
class Purchase(db.Model):
    __tablename__ = 'purchases'
    __table_args__ = (
        db.Index('idx_purchases_gym_date', 'gym_id', 'created_at'),
    )
    id = db.Column(db.Integer, primary_key=True)
    supplier_name = db.Column(db.Text, nullable=True)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    gym = db.relationship('Gym')
    user = db.relationship('User')
    items = db.relationship('PurchaseItem', backref='purchase', cascade='all, delete-orphan')


class PurchaseItem(db.Model):
    __tablename__ = 'purchase_items'
    id = db.Column(db.Integer, primary_key=True)
    purchase_id = db.Column(db.Integer, db.ForeignKey('purchases.id', ondelete='CASCADE'))
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'))
    quantity = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(db.Numeric(10, 2), nullable=False)
    total_cost = db.Column(db.Numeric(10, 2), nullable=False)

    product = db.relationship('Product')
