"""
Visualization module for account update transaction graphs.
"""

from .transaction_graph import TransactionGraphRenderer
from .output import TransactionVisualizer, ViewerResult, WaitResult, open_image, wait_for_file

__all__ = [
    'TransactionGraphRenderer',
    'TransactionVisualizer',
    'ViewerResult',
    'WaitResult',
    'open_image',
    'wait_for_file'
]
