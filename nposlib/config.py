'''Election configuration and what-if overrides.

An :class:`ElectionConfiguration` names the algorithm to run and the
requested committee size. It may carry :class:`ElectionOverrides` that the
engine applies to a copy of the election data before running the algorithm,
to explore what-if scenarios (changed stakes, added or withdrawn approvals)
without touching the original snapshot.
'''

from __future__ import annotations

import enum
import dataclasses
from typing import Dict, List, Optional, Union

import nposlib.util
from nposlib.error import ValidationError, InvalidData
from nposlib.persist import simple_serialization


class AlgorithmType(enum.Enum):
    '''The closed set of election algorithms known to Nposlib.'''
    SEQUENTIAL_PHRAGMEN = 'sequential-phragmen'
    PARALLEL_PHRAGMEN = 'parallel-phragmen'
    MULTI_PHASE = 'multi-phase'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: Union[str, AlgorithmType]) -> AlgorithmType:
        '''Return the algorithm type by its value or member name.

        Both ``'sequential-phragmen'`` and ``'SEQUENTIAL_PHRAGMEN'`` are
        accepted; underscores and hyphens are interchangeable and case is
        ignored.

        :raises ValidationError: If no such algorithm exists.
        '''
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = name.strip().lower().replace('_', '-')
            for member in cls:
                if member.value == key:
                    return member
        raise ValidationError(
            f'unknown algorithm: {name!r}, available: '
            + ', '.join(member.value for member in cls),
            field='algorithm',
        )


class EdgeAction(enum.Enum):
    '''What to do with a nominator-to-candidate approval edge.'''
    ADD = 'add'
    REMOVE = 'remove'
    MODIFY = 'modify'


@simple_serialization
@dataclasses.dataclass
class EdgeModification:
    '''A single change to the approval edges of a nominator.

    :param nominator_id: Account id of the nominator to change.
    :param candidate_id: Account id of the candidate the edge leads to.
    :param action: Whether to add, remove or modify (remove and re-add)
        the edge.
    '''
    nominator_id: str
    candidate_id: str
    action: EdgeAction

    def __post_init__(self):
        nposlib.util.check_account_id(self.nominator_id, 'edge nominator id')
        nposlib.util.check_account_id(self.candidate_id, 'edge candidate id')
        try:
            self.action = EdgeAction(self.action)
        except ValueError as e:
            raise InvalidData(f'unknown edge action: {self.action!r}') from e


@simple_serialization
@dataclasses.dataclass
class ElectionOverrides:
    '''Modifications applied to a working copy of the election data.

    Edge modifications are applied in list order, after the stake overrides.

    :param candidate_stakes: Replacement self-stakes by candidate id.
    :param nominator_stakes: Replacement stakes by nominator id.
    :param voting_edges: Approval edge modifications.
    '''
    candidate_stakes: Dict[str, int] = dataclasses.field(default_factory=dict)
    nominator_stakes: Dict[str, int] = dataclasses.field(default_factory=dict)
    voting_edges: List[EdgeModification] = dataclasses.field(
        default_factory=list
    )

    def __post_init__(self):
        for account_id, stake in self.candidate_stakes.items():
            nposlib.util.check_stake(stake, f'override stake of {account_id}')
        for account_id, stake in self.nominator_stakes.items():
            nposlib.util.check_stake(stake, f'override stake of {account_id}')
        self.voting_edges = list(self.voting_edges)

    def is_empty(self) -> bool:
        return not (
            self.candidate_stakes or self.nominator_stakes or self.voting_edges
        )


@simple_serialization
@dataclasses.dataclass
class ElectionConfiguration:
    '''Parameters of a single election run.

    :param algorithm: The algorithm to elect the committee with. Names
        accepted by :meth:`AlgorithmType.from_name` are converted.
    :param active_set_size: Requested committee size. The engine reduces
        it to the number of candidates if there are fewer.
    :param overrides: What-if modifications of the election data.
    :param block_number: Block the data was taken at; for provenance only.
    '''
    algorithm: AlgorithmType = AlgorithmType.SEQUENTIAL_PHRAGMEN
    active_set_size: int = 1
    overrides: Optional[ElectionOverrides] = None
    block_number: Optional[int] = None

    def __post_init__(self):
        self.algorithm = AlgorithmType.from_name(self.algorithm)
        if (isinstance(self.active_set_size, bool)
                or not isinstance(self.active_set_size, int)
                or self.active_set_size < 1):
            raise ValidationError(
                'active set size must be a positive integer, got'
                f' {self.active_set_size!r}',
                field='active_set_size',
            )
        if self.block_number is not None and (
            isinstance(self.block_number, bool)
            or not isinstance(self.block_number, int)
            or self.block_number < 0
        ):
            raise ValidationError(
                'block number must be a non-negative integer, got'
                f' {self.block_number!r}',
                field='block_number',
            )
