from datetime import datetime

from arriendos.extensions import db


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    name = db.Column(db.String(150), nullable=False)
    company_name = db.Column(db.String(150), nullable=True)
    company_document = db.Column(db.String(100), nullable=True)

    # RUT: llave de negocio, sin restricción unique (ver resolución por RUT)
    rut = db.Column(db.String(20), nullable=True, index=True)

    phone_number = db.Column(db.String(30), nullable=True)
    address = db.Column(db.String(255), nullable=True)

    # Compatibilidad con el frontend: fechas guardadas como texto ISO
    creation_date = db.Column(db.String(30), nullable=True)
    frequent_client = db.Column(db.String(10), nullable=True)
    created = db.Column(db.String(40), nullable=True)
    photo_file_name = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    rents = db.relationship("Rent", back_populates="client", lazy="select", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Client id={self.id} rut={self.rut}>"
