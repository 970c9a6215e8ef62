import sys
import os
import random
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import nposlib.evaluate.phragmen
from nposlib.candidate import ValidatorCandidate, Nominator
from nposlib.component.equalize import StakeEqualizer
from nposlib.config import AlgorithmType
from nposlib.data import ElectionData, DataSource
from nposlib.error import AlgorithmError, InsufficientCandidates, \
    ValidationError

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import synthetic

UNEQUALIZED = nposlib.evaluate.phragmen.SequentialPhragmen(equalizer=None)
DEFAULT = nposlib.evaluate.phragmen.SequentialPhragmen()

ALICE = '5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY'
BOB = '5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty'
CHARLIE = '5FLSigC9HGRKVhB9F7BqHjXJxZJxZJxZJxZJxZJxZJxZJxZJxZ'
DAVE = '5GNJqTPyNqANBkUVMN1LPPrxXnFouWXoe2wNSmmEoLctxiZY'


@pytest.fixture
def small_data():
    # approval stakes: A 40, B 30, C 20
    return ElectionData(
        [ValidatorCandidate(c, 1000) for c in 'ABC'],
        [
            Nominator('n1', 10, ['A', 'B']),
            Nominator('n2', 20, ['B', 'C']),
            Nominator('n3', 30, ['A']),
        ],
    )


def edge_amounts(result):
    return {
        (alloc.nominator_id, alloc.validator_id): alloc.amount
        for alloc in result.stake_distribution
    }


def test_single_nominator_three_candidates():
    data = ElectionData(
        [
            ValidatorCandidate(ALICE, 1_000_000_000),
            ValidatorCandidate(BOB, 2_000_000_000),
            ValidatorCandidate(CHARLIE, 3_000_000_000),
        ],
        [Nominator(DAVE, 10_000_000_000, [ALICE, BOB, CHARLIE])],
    )
    result = DEFAULT.evaluate(data, 3)
    # all tied at every round, so elected in account id order
    assert result.selected_ids() == [BOB, CHARLIE, ALICE]
    assert [val.rank for val in result.selected_validators] == [1, 2, 3]
    assert result.total_stake == 10_000_000_000
    assert edge_amounts(result) == {
        (DAVE, BOB): 3_333_333_334,
        (DAVE, CHARLIE): 3_333_333_333,
        (DAVE, ALICE): 3_333_333_333,
    }
    assert sum(edge_amounts(result).values()) == 10_000_000_000
    assert result.selected_validators[2].self_stake == 1_000_000_000
    assert result.algorithm_used is AlgorithmType.SEQUENTIAL_PHRAGMEN


def test_rounds_and_loads(small_data):
    result = UNEQUALIZED.evaluate(small_data, 2)
    assert result.selected_ids() == ['A', 'B']
    assert [val.score for val in result.selected_validators] == [
        Fraction(1, 40), Fraction(1, 24)
    ]
    assert edge_amounts(result) == {
        ('n1', 'A'): 6,
        ('n3', 'A'): 30,
        ('n1', 'B'): 4,
        ('n2', 'B'): 20,
    }
    assert [
        (alloc.validator_id, alloc.nominator_id)
        for alloc in result.stake_distribution
    ] == [('A', 'n1'), ('A', 'n3'), ('B', 'n1'), ('B', 'n2')]
    assert [alloc.proportion for alloc in result.allocations_of('n1')] == [
        Fraction(3, 5), Fraction(2, 5)
    ]
    assert result.total_stake == 60
    assert [val.total_backing_stake for val in result.selected_validators] \
        == [36, 24]
    assert [val.nominator_count for val in result.selected_validators] \
        == [2, 2]


def test_equalization_keeps_winners(small_data):
    result = DEFAULT.evaluate(small_data, 2)
    assert result.selected_ids() == ['A', 'B']
    assert edge_amounts(result) == {
        ('n1', 'A'): 0,
        ('n3', 'A'): 30,
        ('n1', 'B'): 10,
        ('n2', 'B'): 20,
    }
    assert result.backing_of('A') == result.backing_of('B') == 30
    assert result.total_stake == 60


def test_unelected_targets_get_nothing(small_data):
    result = UNEQUALIZED.evaluate(small_data, 1)
    assert result.selected_ids() == ['A']
    assert result.allocations_of('n2') == []
    assert edge_amounts(result) == {('n1', 'A'): 10, ('n3', 'A'): 30}
    assert result.total_stake == 40


def test_full_committee(small_data):
    result = DEFAULT.evaluate(small_data, 3)
    assert result.selected_ids() == ['A', 'B', 'C']
    for nominator in small_data.nominators:
        allocations = result.allocations_of(nominator.account_id)
        assert sum(alloc.amount for alloc in allocations) == nominator.stake
        assert sum(alloc.proportion for alloc in allocations) == 1


def test_tie_lowest_id():
    data = ElectionData(
        [ValidatorCandidate('B', 0), ValidatorCandidate('A', 0)],
        [Nominator('n2', 50, ['B']), Nominator('n1', 50, ['A'])],
    )
    assert DEFAULT.evaluate(data, 1).selected_ids() == ['A']


def test_higher_support_wins():
    data = ElectionData(
        [ValidatorCandidate('A', 0), ValidatorCandidate('B', 0)],
        [Nominator('n1', 50, ['A']), Nominator('n2', 51, ['B'])],
    )
    assert DEFAULT.evaluate(data, 1).selected_ids() == ['B']


def test_insufficient_support():
    data = ElectionData(
        [ValidatorCandidate(c, 10) for c in 'ABC'],
        [Nominator('n1', 100, ['A'])],
    )
    with pytest.raises(AlgorithmError) as excinfo:
        DEFAULT.evaluate(data, 2)
    assert excinfo.value.algorithm is AlgorithmType.SEQUENTIAL_PHRAGMEN


def test_zero_stake_support_not_counted():
    data = ElectionData(
        [ValidatorCandidate('A', 0), ValidatorCandidate('B', 0)],
        [Nominator('n1', 0, ['A']), Nominator('n2', 10, ['B'])],
    )
    assert DEFAULT.evaluate(data, 1).selected_ids() == ['B']
    with pytest.raises(AlgorithmError):
        DEFAULT.evaluate(data, 2)


def test_zero_stake_nominator_weights():
    data = ElectionData(
        [ValidatorCandidate('A', 0), ValidatorCandidate('B', 0)],
        [
            Nominator('n0', 0, ['A', 'B']),
            Nominator('n1', 10, ['A']),
            Nominator('n2', 10, ['B']),
        ],
    )
    result = DEFAULT.evaluate(data, 2)
    assert result.selected_ids() == ['A', 'B']
    zero_allocs = result.allocations_of('n0')
    assert [alloc.amount for alloc in zero_allocs] == [0, 0]
    assert sum(alloc.proportion for alloc in zero_allocs) == 1
    assert result.total_stake == 20


def test_nominator_without_targets_excluded():
    data = ElectionData(
        [ValidatorCandidate('A', 0)],
        [Nominator('n1', 10, ['A']), Nominator('n2', 99, [])],
    )
    result = DEFAULT.evaluate(data, 1)
    assert result.total_stake == 10
    assert result.allocations_of('n2') == []


def test_unknown_targets_ignored():
    data = ElectionData(
        [ValidatorCandidate('A', 0)],
        [Nominator('n1', 10, ['X', 'A'])],
    )
    result = DEFAULT.evaluate(data, 1)
    assert edge_amounts(result) == {('n1', 'A'): 10}


def test_too_many_seats(small_data):
    with pytest.raises(InsufficientCandidates) as excinfo:
        DEFAULT.evaluate(small_data, 4)
    assert excinfo.value.requested == 4
    assert excinfo.value.available == 3


def test_no_seats(small_data):
    with pytest.raises(ValidationError):
        DEFAULT.evaluate(small_data, 0)


@pytest.mark.parametrize('candidates, nominators', [
    ([], [Nominator('n1', 10, [])]),
    ([ValidatorCandidate('A', 0)], []),
])
def test_empty_data(candidates, nominators):
    with pytest.raises(ValidationError):
        DEFAULT.evaluate(ElectionData(candidates, nominators), 1)


def test_metadata(small_data):
    small_data.source = DataSource.SYNTHETIC
    result = DEFAULT.evaluate(small_data, 1, block_number=10000000)
    assert result.execution_metadata.block_number == 10000000
    assert result.execution_metadata.data_source is DataSource.SYNTHETIC
    assert result.execution_metadata.execution_timestamp.endswith('+00:00')


def test_input_not_modified(small_data):
    original = small_data.copy()
    DEFAULT.evaluate(small_data, 3)
    assert small_data == original


def test_input_order_irrelevant():
    data = synthetic.generate_election_data(30, 200)
    result = DEFAULT.evaluate(data, 12)
    rng = random.Random(42)
    shuffled = data.copy()
    rng.shuffle(shuffled.candidates)
    rng.shuffle(shuffled.nominators)
    for nominator in shuffled.nominators:
        rng.shuffle(nominator.targets)
    assert DEFAULT.evaluate(shuffled, 12).same_outcome(result)


def test_synthetic_properties():
    data = synthetic.generate_election_data(40, 300)
    result = DEFAULT.evaluate(data, 20)
    unequalized = UNEQUALIZED.evaluate(data, 20)
    assert result.selected_ids() == unequalized.selected_ids()
    assert len(set(result.selected_ids())) == 20
    scores = [val.score for val in result.selected_validators]
    assert scores == sorted(scores)
    elected = set(result.selected_ids())
    distributed = 0
    for nominator in data.nominators:
        allocations = result.allocations_of(nominator.account_id)
        if elected.isdisjoint(nominator.targets):
            assert allocations == []
            continue
        assert {alloc.validator_id for alloc in allocations} \
            == elected.intersection(nominator.targets)
        assert sum(alloc.amount for alloc in allocations) == nominator.stake
        assert sum(alloc.proportion for alloc in allocations) == 1
        assert all(
            0 <= alloc.amount <= nominator.stake for alloc in allocations
        )
        distributed += nominator.stake
    assert result.total_stake == distributed
    assert sum(
        val.total_backing_stake for val in result.selected_validators
    ) == distributed


def test_equalization_narrows_spread():
    data = synthetic.generate_election_data(40, 300)
    equalized = nposlib.evaluate.phragmen.SequentialPhragmen(
        equalizer=StakeEqualizer(max_iterations=64)
    ).evaluate(data, 20)
    unequalized = UNEQUALIZED.evaluate(data, 20)

    def spread(result):
        backings = [
            val.total_backing_stake for val in result.selected_validators
        ]
        return max(backings) - min(backings)

    assert spread(equalized) <= spread(unequalized)
