# Models package (re-export feature modules for stable imports)
from .storage.kv_entry import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
