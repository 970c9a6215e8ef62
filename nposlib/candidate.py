'''Election participants: validator candidates and nominators.

Both are identified by an opaque account id (any non-empty string, usually
an SS58 address) and carry a stake, an unsigned 128-bit integer amount in
the smallest unit of the chain's currency. Construction checks the
structure of the entity and raises :class:`nposlib.error.InvalidData` if it
is malformed; consistency between entities (such as nominator targets
referencing existing candidates) is checked by :mod:`nposlib.validate`.
'''

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

import nposlib.util
from nposlib.error import InvalidData
from nposlib.persist import simple_serialization


@simple_serialization
@dataclasses.dataclass
class ValidatorCandidate:
    '''An account standing for election into the validator committee.

    :param account_id: Unique identifier of the candidate.
    :param stake: Self-stake bonded by the candidate.
    '''
    account_id: str
    stake: int = 0

    def __post_init__(self):
        nposlib.util.check_account_id(self.account_id, 'candidate account id')
        nposlib.util.check_stake(
            self.stake, f'stake of candidate {self.account_id}'
        )


@simple_serialization
@dataclasses.dataclass
class Nominator:
    '''An account backing a set of candidates with its stake.

    The targets form an ordered set: the order is kept as given but each
    candidate can only be listed once.

    :param account_id: Unique identifier of the nominator.
    :param stake: Stake the nominator is willing to distribute among the
        elected candidates it approves of.
    :param targets: Account ids of the approved candidates.
    :param metadata: Arbitrary data attached by the data source; not used
        in the election.
    '''
    account_id: str
    stake: int = 0
    targets: List[str] = dataclasses.field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        nposlib.util.check_account_id(self.account_id, 'nominator account id')
        nposlib.util.check_stake(
            self.stake, f'stake of nominator {self.account_id}'
        )
        if isinstance(self.targets, str):
            raise InvalidData(
                f'targets of nominator {self.account_id} must be a sequence'
                ' of account ids, not a string'
            )
        self.targets = list(self.targets)
        for target in self.targets:
            nposlib.util.check_account_id(
                target, f'target of nominator {self.account_id}'
            )
        repeated = nposlib.util.duplicates(self.targets)
        if repeated:
            raise InvalidData(
                f'nominator {self.account_id} lists targets more than once:'
                f' {repeated}'
            )

    def add_target(self, candidate_id: str) -> bool:
        '''Approve a candidate unless it is approved already.

        :returns: True if the target was added.
        '''
        if candidate_id in self.targets:
            return False
        self.targets.append(candidate_id)
        return True

    def remove_target(self, candidate_id: str) -> bool:
        '''Withdraw approval of a candidate if it is approved.

        :returns: True if the target was removed.
        '''
        if candidate_id not in self.targets:
            return False
        self.targets.remove(candidate_id)
        return True
