from .base import db, Model, metadata
from .elements import Element
from .pairs import Pair, PairResolution

__all__ = ["db", "Model", "metadata", "Element", "Pair", "PairResolution"]
