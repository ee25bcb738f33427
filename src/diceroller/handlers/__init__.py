from .dice import DiceHandler, parse_sides, roll_die, iso_timestamp
from .index import index, INDEX_PAGE

__all__ = [
    "DiceHandler",
    "parse_sides",
    "roll_die",
    "iso_timestamp",
    "index",
    "INDEX_PAGE",
]
