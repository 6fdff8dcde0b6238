from datetime import datetime

from arriendos.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    name = db.Column(db.String(150), nullable=False)
    code = db.Column(db.String(50), nullable=False, unique=True)
    brand = db.Column(db.String(100), nullable=True)

    # priceTotal ~= priceNet + priceIva (IVA 19%), no se re-valida al leer
    price_net = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    price_iva = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    price_total = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    price_warranty = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    rented = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)

    rents = db.relationship("Rent", back_populates="product", lazy="select", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} code={self.code} rented={self.rented}>"
