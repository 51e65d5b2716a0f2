"""
Generic value tree used to prune null-only branches out of account update payloads.
"""

from enum import Enum
from typing import Any


class NodeKind(Enum):
    """Variant of a decoded JSON value."""
    NULL = "null"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> NodeKind:
    """Return the variant a decoded JSON value belongs to."""
    if value is None:
        return NodeKind.NULL
    if isinstance(value, dict):
        return NodeKind.MAPPING
    if isinstance(value, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def prune(value: Any) -> Any:
    """
    Recursively drop null entries, bottom-up.
    
    A mapping or sequence whose entries all prune to None (including an empty
    one) prunes to None itself, so the caller removes it as well. Sequence
    entries that prune to None are dropped and the remaining ones keep their
    relative order.
    
    Args:
        value: Decoded JSON value
        
    Returns:
        Pruned copy of the value, or None
    """
    kind = classify(value)
    
    if kind is NodeKind.NULL:
        return None
    
    if kind is NodeKind.SCALAR:
        return value
    
    if kind is NodeKind.SEQUENCE:
        items = [pruned for pruned in (prune(item) for item in value) if pruned is not None]
        return items or None
    
    entries = {}
    for key, item in value.items():
        pruned = prune(item)
        if pruned is not None:
            entries[key] = pruned
    return entries or None
