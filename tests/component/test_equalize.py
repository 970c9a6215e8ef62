import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import nposlib.util
from nposlib.component.equalize import StakeEqualizer


def nominator_totals(assignments):
    return {nom: sum(edges.values()) for nom, edges in assignments.items()}


def test_balances_shared_voter():
    assignments = {
        'n1': {'A': 6, 'B': 4},
        'n2': {'B': 20},
        'n3': {'A': 30},
    }
    n_passes = StakeEqualizer().equalize(assignments, ['A', 'B'])
    assert n_passes == 1
    assert assignments == {
        'n1': {'A': 0, 'B': 10},
        'n2': {'B': 20},
        'n3': {'A': 30},
    }


def test_limited_by_edge_amount():
    assignments = {
        'n1': {'A': 2, 'B': 0},
        'n2': {'A': 50},
        'n3': {'B': 10},
    }
    StakeEqualizer().equalize(assignments, ['A', 'B'])
    assert assignments['n1'] == {'A': 0, 'B': 2}
    assert nominator_totals(assignments) == {'n1': 2, 'n2': 50, 'n3': 10}


def test_no_shared_voter():
    assignments = {
        'n1': {'A': 100},
        'n2': {'B': 10},
    }
    assert StakeEqualizer().equalize(assignments, ['A', 'B']) == 0
    assert assignments == {'n1': {'A': 100}, 'n2': {'B': 10}}


def test_tolerance():
    assignments = {'n1': {'A': 55, 'B': 45}}
    assert StakeEqualizer(tolerance=11).equalize(assignments, ['A', 'B']) == 0
    assert assignments == {'n1': {'A': 55, 'B': 45}}
    assert StakeEqualizer(tolerance=10).equalize(assignments, ['A', 'B']) == 1
    assert assignments == {'n1': {'A': 50, 'B': 50}}


def test_balanced_with_zero_tolerance():
    assignments = {'n1': {'A': 50, 'B': 50}}
    assert StakeEqualizer(tolerance=0).equalize(assignments, ['A', 'B']) == 0
    assert assignments == {'n1': {'A': 50, 'B': 50}}


def test_iteration_cap():
    assignments = {
        'n1': {'A': 40, 'B': 0, 'C': 0},
        'n2': {'B': 10, 'C': 0},
    }
    assert StakeEqualizer(max_iterations=0).equalize(
        assignments, ['A', 'B', 'C']
    ) == 0
    assert StakeEqualizer(max_iterations=1).equalize(
        assignments, ['A', 'B', 'C']
    ) == 1
    # the highest (A) gives half the spread to the lowest (C) through n1
    assert assignments['n1'] == {'A': 20, 'B': 0, 'C': 20}


def test_unbacked_validator_counts_as_zero():
    assignments = {'n1': {'A': 10}}
    assert StakeEqualizer().equalize(assignments, ['A', 'B']) == 0
    assert assignments == {'n1': {'A': 10}}


def test_spread_does_not_grow():
    assignments = {
        'n1': {'A': 30, 'B': 10, 'C': 5},
        'n2': {'A': 25, 'C': 0},
        'n3': {'B': 12, 'C': 3},
        'n4': {'A': 9, 'B': 1},
    }
    totals_before = nominator_totals(assignments)
    backing = nposlib.util.column_totals(assignments)
    spread_before = max(backing.values()) - min(backing.values())
    StakeEqualizer().equalize(assignments, ['A', 'B', 'C'])
    backing = nposlib.util.column_totals(assignments)
    assert max(backing.values()) - min(backing.values()) <= spread_before
    assert nominator_totals(assignments) == totals_before
    assert all(
        amount >= 0 for edges in assignments.values()
        for amount in edges.values()
    )


def test_single_validator():
    assignments = {'n1': {'A': 10}}
    assert StakeEqualizer().equalize(assignments, ['A']) == 0


@pytest.mark.parametrize('kwargs', [
    {'max_iterations': -1}, {'tolerance': -1},
])
def test_invalid_params(kwargs):
    with pytest.raises(ValueError):
        StakeEqualizer(**kwargs)
