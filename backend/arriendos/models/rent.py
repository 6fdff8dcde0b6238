from datetime import datetime

from arriendos.extensions import db


class Rent(db.Model):
    __tablename__ = "rents"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    # Sin cascada: borrar un cliente/producto referenciado no está protegido aquí
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id"),
        nullable=False,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id"),
        nullable=False,
    )

    quantity = db.Column(db.Integer, nullable=False, default=1)
    delivery_date = db.Column(db.String(40), nullable=True)

    # Opcional al crear, obligatorio al finalizar
    payment_method = db.Column(db.String(50), nullable=True)

    warranty_value = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    warranty_type = db.Column(db.String(50), nullable=True)

    is_finished = db.Column(db.Boolean, nullable=False, default=False, index=True)
    is_paid = db.Column(db.Boolean, nullable=False, default=False)

    # Se completan al finalizar
    total_days = db.Column(db.Numeric(10, 2), nullable=True)
    total_price = db.Column(db.Numeric(12, 2), nullable=True)
    observations = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Campos de presentación (code, productName, clientRut, clientName) salen de estos joins
    client = db.relationship("Client", back_populates="rents", lazy="joined")
    product = db.relationship("Product", back_populates="rents", lazy="joined")

    def __repr__(self) -> str:
        return f"<Rent id={self.id} product={self.product_id} finished={self.is_finished}>"
