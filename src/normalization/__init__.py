"""
Normalization module for account update transactions.
"""

from .normalizer import (
    TransactionNormalizer,
    NormalizedNode,
    NormalizedTransaction,
    build_forest
)
from .tree import NodeKind, classify, prune

__all__ = [
    'TransactionNormalizer',
    'NormalizedNode',
    'NormalizedTransaction',
    'build_forest',
    'NodeKind',
    'classify',
    'prune'
]
