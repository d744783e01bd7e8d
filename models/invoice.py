from models import db

# فاتورة بيع
class Invoice(db.Model):
    __tablename__ = 'invoices'
    __table_args__ = (
        db.Index('idx_invoices_gym_date', 'gym_id', 'created_at'),
    )
    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.Text, unique=True, nullable=False)
    customer_name = db.Column(db.Text, nullable=True)
    customer_phone = db.Column(db.Text, nullable=True)
    subtotal = db.Column(db.Numeric(10, 2), nullable=False)
    discount = db.Column(db.Numeric(10, 2), default=0)
    total = db.Column(db.Numeric(10, 2), nullable=False)
    paid_amount = db.Column(db.Numeric(10, 2), default=0)
    is_credit = db.Column(db.Boolean, default=False)  # بيع آجل
    gym_id = db.Column(db.Integer, db.ForeignKey('gyms.id'), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    # علاقات
    gym = db.relationship('Gym')
    user = db.relationship('User')
    items = db.relationship('InvoiceItem', backref='invoice', cascade='all, delete-orphan')


class InvoiceItem(db.Model):
    __tablename__ = 'invoice_items'
    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.Integer, db.ForeignKey('invoices.id', ondelete='CASCADE'))
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'))
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    # علاقات
    product = db.relationship('Product')
