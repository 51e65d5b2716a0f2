"""
Shared fixtures for building SDK-shaped transactions.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import DEFAULT_TOKEN_ID
from core.transaction import JsonTransaction


DEPLOYER = 'B62qiTKpEPjGTSHZrtM8uXiKgn8So916pLmNJKDhKeyBQL9TDb3nvBG'
ZKAPP = 'B62qrfcNhPR4HfQgGQEVpKHTFhZxzDWwNxTgJ6M2usN3KTJHu5cY9C3'
OTHER = 'B62qkZvnMnTTNh2tfLiWG3xKb5bQQeKv9eWkCbbsz1bTvLBNxmvqyru'

VK_HASH = '3392518251768960475377392625298437850623664973002200885669375116181514017494'


def make_account_update(public_key=DEPLOYER, call_depth=0, sgn='Positive', magnitude='0',
                        proof=None, signature=None, app_state=None, verification_key=None,
                        parents_own_token=False, inherit_from_parent=False,
                        events=None, actions=None, token_id=DEFAULT_TOKEN_ID):
    """Build one account update the way the SDK serializes it."""
    return {
        'body': {
            'publicKey': public_key,
            'tokenId': token_id,
            'update': {
                'appState': app_state if app_state is not None else [None] * 8,
                'delegate': None,
                'verificationKey': verification_key,
                'permissions': None,
                'zkappUri': None,
                'tokenSymbol': None,
                'timing': None,
                'votingFor': None,
            },
            'balanceChange': {'magnitude': magnitude, 'sgn': sgn},
            'incrementNonce': False,
            'events': events or [],
            'actions': actions or [],
            'callData': '0',
            'callDepth': call_depth,
            'preconditions': {
                'network': {
                    'snarkedLedgerHash': None,
                    'blockchainLength': None,
                    'globalSlotSinceGenesis': None,
                },
                'account': {
                    'balance': None,
                    'nonce': None,
                    'state': [None] * 8,
                    'isNew': None,
                },
                'validWhile': None,
            },
            'useFullCommitment': False,
            'implicitAccountCreationFee': False,
            'mayUseToken': {
                'parentsOwnToken': parents_own_token,
                'inheritFromParent': inherit_from_parent,
            },
            'authorizationKind': {
                'isSigned': signature is not None,
                'isProved': proof is not None,
                'verificationKeyHash': VK_HASH,
            },
        },
        'authorization': {'proof': proof, 'signature': signature},
    }


def make_transaction(account_updates):
    """Wrap account updates in a transaction source."""
    return JsonTransaction(text=json.dumps({
        'feePayer': {
            'body': {'publicKey': DEPLOYER, 'fee': '0', 'validUntil': None, 'nonce': '1'},
            'authorization': '7mX...',
        },
        'accountUpdates': account_updates,
        'memo': 'E4YM2vTHhWEg66xpj52JErHUBU4pZ1yageL4TVDDpTTSsv8mK6YaH',
    }))


@pytest.fixture
def legend():
    return {DEPLOYER: 'deployer', ZKAPP: 'zkApp'}


@pytest.fixture
def deploy_transaction():
    """A fee-funded deploy: the deployer pays, the zkApp gets its key and state."""
    return make_transaction([
        make_account_update(
            public_key=DEPLOYER, sgn='Negative', magnitude='1000000000',
            signature='7mXFbws8zFVHDngRcRgUAs9gvWcJ4ZDmXrjXozyhhNyM1KrR2XsBzSQGDSR4ghD5Dip13iFrnweGKB5mguDmDLhk1h87etB8'
        ),
        make_account_update(
            public_key=ZKAPP, call_depth=0,
            signature='7mXWmS2uE6Np1TREYdHWvYPfbvVMjuhU4x1QyBqvXbNLTBgj4BpJGQkoHvDTAkBwdqHfJtNaHTQsGrAWHPkYkHTJnr7kHaWi',
            app_state=['0'] * 8,
            verification_key={
                'data': 'AAAxHIvaXF+vRQm+3RRCmL1ijLbAAZcIXBVjf3EmM3ZTCzUiU8aBp3qVKJgPvfRbkgAiQfbvJlEVNsmhuFQtGmIZ',
                'hash': '9223732487143837218763487643876487619287365819283761928376519287654',
            },
        ),
    ])
