from models import db
from flask_babel import gettext as _
from services.errors import ValidationError

# عمود الكمية الخاص بكل فرع
BRANCH_QUANTITY_COLUMNS = {
    'male': 'male_gym_quantity',
    'female': 'female_gym_quantity',
}

# نموذج المنتج (كتالوج مشترك وكمية منفصلة لكل فرع)
class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.Integer, primary_key=True)
    barcode = db.Column(db.Text, unique=True, nullable=True, index=True)
    name = db.Column(db.Text, nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)
    purchase_price = db.Column(db.Numeric(10, 2), default=0)
    sale_price = db.Column(db.Numeric(10, 2), default=0)
    male_gym_quantity = db.Column(db.Integer, default=0)
    female_gym_quantity = db.Column(db.Integer, default=0)
    image_path = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    category = db.relationship('Category')

    def __repr__(self):
        return f'<Product {self.name}>'

    @staticmethod
    def quantity_column(branch):
        try:
            return BRANCH_QUANTITY_COLUMNS[branch]
        except KeyError:
            raise ValidationError(_('فرع غير معروف: %(branch)s', branch=branch)) from None

    def get_stock(self, branch):
        """كمية المنتج في فرع معين"""
        return getattr(self, self.quantity_column(branch)) or 0

    def set_stock(self, branch, quantity):
        setattr(self, self.quantity_column(branch), quantity)

    def adjust_stock(self, branch, delta):
        """تعديل كمية فرع واحد فقط، كمية الفرع الآخر لا تتغير"""
        new_quantity = self.get_stock(branch) + delta
        self.set_stock(branch, new_quantity)
        return new_quantity
