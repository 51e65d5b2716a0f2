"""
Transaction normalizer: turns the SDK's flat, depth-annotated account update list
into a readable forest of account update nodes.
"""

import copy
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List, Optional, Iterator
from dataclasses import dataclass, field
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_CONFIG, DEFAULT_TOKEN_ID, DEFAULT_TOKEN_LABEL
from core.transaction import (
    MalformedTransactionError, RawAccountUpdate, TransactionSource, parse_account_updates
)
from normalization.tree import prune


Legend = Dict[str, str]


@dataclass
class NormalizedNode:
    """A single account update, abbreviated for display."""
    idx: int
    public_key: str
    token_id: str
    balance_change: str
    update: Any
    authorization: str
    call_depth: int = 0
    may_use_token: Optional[Dict[str, bool]] = None
    extras: Dict[str, Any] = field(default_factory=dict)
    children: List['NormalizedNode'] = field(default_factory=list)
    
    def to_dict(self, include_children: bool = True, include_idx: bool = True) -> Dict[str, Any]:
        """
        Convert the node to a plain dictionary using the SDK's field names.
        
        Args:
            include_children: Whether to include the nested children list
            include_idx: Whether to include the original list position
            
        Returns:
            Dictionary representation of the node
        """
        content: Dict[str, Any] = {}
        if include_idx:
            content['idx'] = self.idx
        content['publicKey'] = self.public_key
        content['tokenId'] = self.token_id
        content['balanceChange'] = self.balance_change
        content['update'] = self.update
        content['authorization'] = self.authorization
        if self.may_use_token is not None:
            content['mayUseToken'] = self.may_use_token
        content.update(self.extras)
        if include_children:
            content['children'] = [
                child.to_dict(include_children=True, include_idx=include_idx)
                for child in self.children
            ]
        return content


@dataclass
class NormalizedTransaction:
    """Normalized forest for one transaction."""
    name: str
    legend: Legend
    account_updates: List[NormalizedNode]
    
    def iter_preorder(self) -> Iterator[NormalizedNode]:
        """Yield every node in depth-first pre-order."""
        stack = list(reversed(self.account_updates))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'legend': dict(self.legend),
            'accountUpdates': [node.to_dict() for node in self.account_updates],
        }


def redact(value: str, keep: int = 6) -> str:
    """Abbreviate a long value to an ellipsis plus its last characters."""
    return '...' + str(value)[-keep:]


def seed_legend(legend: Legend) -> Legend:
    """Register the native token id in the caller's legend."""
    legend[DEFAULT_TOKEN_ID] = DEFAULT_TOKEN_LABEL
    return legend


def resolve_label(key: str, legend: Legend, keep: int = 6) -> str:
    """Look a key up in the legend, falling back to its abbreviated form."""
    if key in legend:
        return legend[key]
    return redact(key, keep)


def collapse_app_state(app_state: List[Any]) -> Any:
    """
    Compact an app state array.
    
    Returns "0s" when every slot is zero, a list of [position, value] pairs for
    the non-null slots otherwise, or None when no slot is set.
    """
    if app_state and all(slot is not None and str(slot) == '0' for slot in app_state):
        return '0s'
    
    pairs = [[position, slot] for position, slot in enumerate(app_state) if slot is not None]
    return pairs or None


def format_balance_change(balance_change: Dict[str, Any], scale: int = 1_000_000_000) -> str:
    """
    Render a sign/magnitude balance change as a signed decimal in whole tokens.
    
    Args:
        balance_change: {'sgn': 'Positive' | 'Negative', 'magnitude': int or str}
        scale: Number of base units per whole token
        
    Returns:
        Signed decimal string, e.g. "+5" or "-0.5"
    """
    sign = '+' if balance_change['sgn'] == 'Positive' else '-'
    amount = (Decimal(str(balance_change['magnitude'])) / Decimal(scale)).normalize()
    return sign + format(amount, 'f')


def authorization_kind(authorization: Dict[str, Any]) -> str:
    """Pick the credential that authorizes an update: proof, then signature."""
    if authorization.get('proof') is not None:
        return 'proof'
    if authorization.get('signature') is not None:
        return 'signature'
    return 'none'


class TransactionNormalizer:
    """
    Normalizes account update transactions for display.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the normalizer.
        
        Args:
            config: Loaded configuration. If None, uses the built-in defaults
        """
        config = config or DEFAULT_CONFIG
        normalization = {**DEFAULT_CONFIG['normalization'], **config.get('normalization', {})}
        
        self.redact_keep = int(normalization['redact_keep'])
        self.scale = int(normalization['nanomina_per_mina'])
        self.include_body_extras = bool(normalization['include_body_extras'])
        self.default_legend: Legend = dict(config.get('legend') or {})
        self.logger = logging.getLogger(__name__)
    
    def normalize(self, txn: TransactionSource, name: str, legend: Legend) -> NormalizedTransaction:
        """
        Normalize a transaction into a forest of account update nodes.
        
        The legend is mutated: the native token id is registered in it. Callers
        sharing one legend across transactions must not normalize concurrently.
        
        Args:
            txn: Transaction source exposing to_json()
            name: Title for the transaction
            legend: Mapping from base58 keys to display labels
            
        Returns:
            NormalizedTransaction holding the top-level nodes
        """
        seed_legend(legend)
        lookup = {**self.default_legend, **legend}
        
        raw_updates = parse_account_updates(txn)
        nodes = [self.normalize_account_update(au, lookup) for au in raw_updates]
        roots = build_forest(nodes)
        
        self.logger.info(
            f"Normalized transaction '{name}': {len(nodes)} account updates, {len(roots)} top-level"
        )
        return NormalizedTransaction(name=name, legend=legend, account_updates=roots)
    
    def normalize_account_update(self, au: RawAccountUpdate, legend: Legend) -> NormalizedNode:
        """
        Redact, compact and label a single raw account update.
        
        Args:
            au: Raw account update
            legend: Mapping used to label public keys and token ids
            
        Returns:
            NormalizedNode without children
        """
        try:
            return self._normalize(au, legend)
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise MalformedTransactionError(
                f"Account update {au.idx} is malformed: {e!r}"
            ) from e
    
    def _normalize(self, au: RawAccountUpdate, legend: Legend) -> NormalizedNode:
        body = au.body
        keep = self.redact_keep
        
        authorization = dict(au.authorization)
        if authorization.get('proof') is not None:
            authorization['proof'] = redact(authorization['proof'], keep)
        if authorization.get('signature') is not None:
            authorization['signature'] = redact(authorization['signature'], keep)
        
        authorization_kind_body = copy.deepcopy(body['authorizationKind'])
        if authorization_kind_body.get('verificationKeyHash') is not None:
            authorization_kind_body['verificationKeyHash'] = redact(
                authorization_kind_body['verificationKeyHash'], keep
            )
        
        update = copy.deepcopy(body['update'])
        if update is not None:
            verification_key = update.get('verificationKey')
            if verification_key is not None:
                verification_key['data'] = redact(verification_key['data'], keep)
                verification_key['hash'] = redact(verification_key['hash'], keep)
            
            if update.get('appState') is not None:
                app_state = collapse_app_state(update['appState'])
                if app_state is None:
                    del update['appState']
                else:
                    update['appState'] = app_state
        
        may_use_token = body['mayUseToken']
        if not may_use_token['parentsOwnToken'] and not may_use_token['inheritFromParent']:
            may_use_token = None
        
        extras: Dict[str, Any] = {}
        if self.include_body_extras:
            preconditions = prune(body['preconditions'])
            if preconditions is not None:
                extras['preconditions'] = preconditions
            if body['events']:
                extras['events'] = body['events']
            if body['actions']:
                extras['actions'] = body['actions']
            credentials = prune(authorization)
            if credentials is not None:
                extras['credentials'] = credentials
            authorization_kind_body = prune(authorization_kind_body)
            if authorization_kind_body is not None:
                extras['authorizationKind'] = authorization_kind_body
        
        return NormalizedNode(
            idx=au.idx,
            public_key=resolve_label(body['publicKey'], legend, keep),
            token_id=resolve_label(body['tokenId'], legend, keep),
            balance_change=format_balance_change(body['balanceChange'], self.scale),
            update=prune(update),
            authorization=authorization_kind(authorization),
            call_depth=au.call_depth,
            may_use_token=dict(may_use_token) if may_use_token is not None else None,
            extras=extras,
        )


def build_forest(nodes: List[NormalizedNode]) -> List[NormalizedNode]:
    """
    Rebuild parent/child nesting from a pre-order list annotated with call depths.
    
    Each node becomes a child of the nearest preceding node with a strictly
    smaller depth that is still on the ancestor stack; nodes with no such
    ancestor are returned as roots. Sibling order is preserved.
    
    Args:
        nodes: Nodes in original flat-list order, children lists empty
        
    Returns:
        List of top-level nodes
    """
    roots: List[NormalizedNode] = []
    stack: List[NormalizedNode] = []
    
    for node in nodes:
        while stack and stack[-1].call_depth >= node.call_depth:
            stack.pop()
        
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        
        stack.append(node)
    
    return roots
