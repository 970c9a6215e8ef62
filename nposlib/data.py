'''Election snapshots: the candidates and nominators of a single election.'''

from __future__ import annotations

import copy
import enum
import dataclasses
from typing import List, Optional

from nposlib.candidate import ValidatorCandidate, Nominator
from nposlib.error import ValidationError
from nposlib.persist import simple_serialization


class DataSource(enum.Enum):
    '''Where a snapshot of election data was obtained from.'''
    RPC = 'rpc'
    JSON = 'json'
    SYNTHETIC = 'synthetic'


@simple_serialization
@dataclasses.dataclass
class ElectionData:
    '''A static snapshot of election candidates and nominators.

    The snapshot is not checked on construction so that a data source can
    assemble it piecewise; run :func:`nposlib.validate.validate` to check
    its integrity. The :meth:`add_candidate` and :meth:`add_nominator`
    methods refuse duplicate account ids right away.

    :param candidates: Validator candidates standing for election.
    :param nominators: Nominators backing the candidates.
    :param source: Where the snapshot came from, for provenance only.
    '''
    candidates: List[ValidatorCandidate] = dataclasses.field(
        default_factory=list
    )
    nominators: List[Nominator] = dataclasses.field(default_factory=list)
    source: Optional[DataSource] = None

    def __post_init__(self):
        self.candidates = list(self.candidates)
        self.nominators = list(self.nominators)
        if self.source is not None:
            self.source = DataSource(self.source)

    def add_candidate(self, candidate: ValidatorCandidate) -> ElectionData:
        if self.candidate(candidate.account_id) is not None:
            raise ValidationError(
                f'duplicate candidate account id: {candidate.account_id}',
                field='candidates',
            )
        self.candidates.append(candidate)
        return self

    def add_nominator(self, nominator: Nominator) -> ElectionData:
        if self.nominator(nominator.account_id) is not None:
            raise ValidationError(
                f'duplicate nominator account id: {nominator.account_id}',
                field='nominators',
            )
        self.nominators.append(nominator)
        return self

    def candidate(self, account_id: str) -> Optional[ValidatorCandidate]:
        '''Return the candidate with the given account id, if present.'''
        for candidate in self.candidates:
            if candidate.account_id == account_id:
                return candidate
        return None

    def nominator(self, account_id: str) -> Optional[Nominator]:
        '''Return the nominator with the given account id, if present.'''
        for nominator in self.nominators:
            if nominator.account_id == account_id:
                return nominator
        return None

    def candidate_ids(self) -> List[str]:
        return [candidate.account_id for candidate in self.candidates]

    def total_nominator_stake(self) -> int:
        return sum(nominator.stake for nominator in self.nominators)

    def copy(self) -> ElectionData:
        '''Return a deep copy sharing no mutable state with this snapshot.'''
        return copy.deepcopy(self)
