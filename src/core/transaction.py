"""
Transaction sources and raw account update parsing for zkApp transactions.
"""

import json
import logging
from typing import Dict, Any, List, Optional, Protocol
from dataclasses import dataclass, field
from pathlib import Path


logger = logging.getLogger(__name__)


class MalformedTransactionError(ValueError):
    """Raised when a transaction is missing fields every account update must carry."""


class TransactionSource(Protocol):
    """Anything that can serialize itself to the SDK's transaction JSON."""

    def to_json(self) -> str:
        ...


class JsonTransaction:
    """
    Transaction source backed by a JSON string or a JSON file exported by the SDK.
    """
    
    def __init__(self, text: Optional[str] = None, path: Optional[str] = None):
        """
        Initialize the transaction source.
        
        Args:
            text: Raw transaction JSON
            path: Path to a file containing the transaction JSON
        """
        if (text is None) == (path is None):
            raise ValueError("Exactly one of text or path must be given")
        self.text = text
        self.path = Path(path) if path is not None else None
    
    @classmethod
    def from_file(cls, path: str) -> 'JsonTransaction':
        return cls(path=path)
    
    def to_json(self) -> str:
        if self.path is not None:
            return self.path.read_text(encoding='utf-8')
        return self.text


@dataclass
class RawAccountUpdate:
    """Data class for one entry of the flat account update list."""
    idx: int
    call_depth: int
    body: Dict[str, Any]
    authorization: Dict[str, Any] = field(default_factory=dict)


REQUIRED_BODY_FIELDS = [
    'publicKey',
    'tokenId',
    'balanceChange',
    'update',
    'preconditions',
    'mayUseToken',
    'events',
    'actions',
    'authorizationKind',
    'callDepth',
]


def parse_account_updates(txn: TransactionSource) -> List[RawAccountUpdate]:
    """
    Deserialize a transaction into its flat, pre-ordered account update list.
    
    Args:
        txn: Transaction source exposing to_json()
        
    Returns:
        List of RawAccountUpdate in original order
        
    Raises:
        json.JSONDecodeError: If the serialized transaction is not valid JSON
        MalformedTransactionError: If an account update lacks required fields
    """
    data = json.loads(txn.to_json())
    
    if not isinstance(data, dict) or not isinstance(data.get('accountUpdates'), list):
        raise MalformedTransactionError("Transaction JSON has no accountUpdates list")
    
    updates = []
    for idx, au in enumerate(data['accountUpdates']):
        if not isinstance(au, dict) or not isinstance(au.get('body'), dict):
            raise MalformedTransactionError(f"Account update {idx} has no body")
        
        body = au['body']
        missing = [name for name in REQUIRED_BODY_FIELDS if name not in body]
        if missing:
            raise MalformedTransactionError(
                f"Account update {idx} is missing body fields: {', '.join(missing)}"
            )
        
        try:
            call_depth = int(body['callDepth'])
        except (TypeError, ValueError) as e:
            raise MalformedTransactionError(
                f"Account update {idx} has invalid callDepth {body['callDepth']!r}"
            ) from e
        
        updates.append(RawAccountUpdate(
            idx=idx,
            call_depth=call_depth,
            body=body,
            authorization=au.get('authorization') or {}
        ))
    
    logger.debug(f"Parsed {len(updates)} account updates")
    return updates
