from .base import db, Model


class Element(Model):
    """A discovered element. Rows are inserted once and never updated."""

    __tablename__ = "elements"
    name = db.Column(db.String(256), primary_key=True)
    icon = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {"name": self.name, "icon": self.icon}

    def __repr__(self) -> str:
        return f"<Element {self.name!r} {self.icon!r}>"
