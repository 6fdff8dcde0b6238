from arriendos.extensions import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    username = db.Column(db.String(100), unique=True, nullable=False)
    # Hash bcrypt; las filas antiguas pueden tener texto plano (LEGACY_PLAINTEXT_PASSWORDS)
    password = db.Column(db.String(255), nullable=False)

    name = db.Column(db.String(150), nullable=True)
    role = db.Column(db.String(50), nullable=False, default="user")
    membership_paid = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"
