import enum

from .base import db, Model


class PairResolution(enum.Enum):
    """Terminal states of a cached pair. An unseen pair has no row at all."""

    WITH_RESULT = "with_result"
    WITHOUT_RESULT = "without_result"


class Pair(Model):
    __tablename__ = "pairs"
    # left <= right under the canonical ordering
    left = db.Column(db.String(256), primary_key=True)
    right = db.Column(db.String(256), primary_key=True)
    result = db.Column(db.String(256), db.ForeignKey("elements.name"), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    element = db.relationship("Element", lazy="joined")

    @property
    def resolution(self) -> PairResolution:
        if self.result is None:
            return PairResolution.WITHOUT_RESULT
        return PairResolution.WITH_RESULT

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "right": self.right,
            "result": self.result,
            "icon": self.element.icon if self.element else None,
            "resolution": self.resolution.value,
        }

    def __repr__(self) -> str:
        return f"<Pair {self.left!r}+{self.right!r} -> {self.result!r}>"
