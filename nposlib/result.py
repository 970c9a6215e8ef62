'''Election outcomes: the elected committee and how stake backs it.'''

from __future__ import annotations

import dataclasses
import datetime
from fractions import Fraction
from typing import Any, List, Optional

from nposlib.config import AlgorithmType
from nposlib.data import DataSource
from nposlib.persist import simple_serialization


@simple_serialization
@dataclasses.dataclass
class StakeAllocation:
    '''Stake a nominator assigns to one of the validators it elected.

    :param nominator_id: Account id of the backing nominator.
    :param validator_id: Account id of the backed elected validator.
    :param amount: Assigned stake, in the smallest currency unit.
    :param proportion: Exact share of the nominator's stake the amount
        represents.
    '''
    nominator_id: str
    validator_id: str
    amount: int
    proportion: Fraction


@simple_serialization
@dataclasses.dataclass
class SelectedValidator:
    '''An elected committee member.

    :param account_id: Account id of the validator.
    :param total_backing_stake: Sum of nominator stake assigned to it.
    :param nominator_count: Number of nominators backing it.
    :param rank: Position in the election order, starting at 1.
    :param self_stake: The validator's own stake.
    :param score: The load at which the validator was elected (lower is
        better).
    '''
    account_id: str
    total_backing_stake: int
    nominator_count: int
    rank: int
    self_stake: int = 0
    score: Optional[Fraction] = None


@simple_serialization
@dataclasses.dataclass
class ExecutionMetadata:
    '''Provenance of an election result.

    :param block_number: Block the election data was taken at.
    :param execution_timestamp: RFC 3339 UTC time of the run.
    :param data_source: Where the election data came from.
    '''
    block_number: Optional[int] = None
    execution_timestamp: Optional[str] = None
    data_source: Optional[DataSource] = None

    @classmethod
    def now(cls,
            block_number: Optional[int] = None,
            data_source: Optional[DataSource] = None,
            ) -> ExecutionMetadata:
        timestamp = datetime.datetime.now(datetime.timezone.utc)
        return cls(
            block_number=block_number,
            execution_timestamp=timestamp.isoformat(),
            data_source=data_source,
        )


@simple_serialization
@dataclasses.dataclass
class ElectionResult:
    '''The outcome of an election run.

    :param selected_validators: The elected committee ordered by rank.
    :param stake_distribution: One entry per nominator-validator backing
        edge, ordered by validator rank and then nominator id.
    :param total_stake: Total nominator stake distributed to the committee.
    :param algorithm_used: The algorithm that produced the result.
    :param execution_metadata: Provenance of the run.
    :param diagnostics: Explanation of the result attached after the fact,
        if requested.
    '''
    selected_validators: List[SelectedValidator]
    stake_distribution: List[StakeAllocation]
    total_stake: int
    algorithm_used: AlgorithmType
    execution_metadata: ExecutionMetadata = dataclasses.field(
        default_factory=ExecutionMetadata
    )
    diagnostics: Optional[Any] = None

    def __post_init__(self):
        self.algorithm_used = AlgorithmType.from_name(self.algorithm_used)

    def validator_count(self) -> int:
        return len(self.selected_validators)

    def selected_ids(self) -> List[str]:
        '''Return account ids of the elected validators, by rank.'''
        return [val.account_id for val in self.selected_validators]

    def backing_of(self, validator_id: str) -> int:
        '''Return the total stake assigned to the given validator.'''
        return sum(
            alloc.amount for alloc in self.stake_distribution
            if alloc.validator_id == validator_id
        )

    def allocations_of(self, nominator_id: str) -> List[StakeAllocation]:
        return [
            alloc for alloc in self.stake_distribution
            if alloc.nominator_id == nominator_id
        ]

    def with_diagnostics(self, diagnostics: Any) -> ElectionResult:
        '''Return a copy of the result with diagnostics attached.'''
        return dataclasses.replace(self, diagnostics=diagnostics)

    def same_outcome(self, other: ElectionResult) -> bool:
        '''Compare two results disregarding run time and diagnostics.'''
        return (
            self.selected_validators == other.selected_validators
            and self.stake_distribution == other.stake_distribution
            and self.total_stake == other.total_stake
            and self.algorithm_used == other.algorithm_used
            and self.execution_metadata.block_number
            == other.execution_metadata.block_number
            and self.execution_metadata.data_source
            == other.execution_metadata.data_source
        )
