'''Rebalancing of stake among an elected committee.

After a committee is elected, the stake of each nominator is spread over the
validators it elected. This spread is not unique, and a flatter backing of
the committee is preferable (the least backed validator is the cheapest to
attack). The equalizer moves stake from the most backed validator to the
least backed one through nominators that back both. It never changes who is
elected and never changes how much stake any nominator distributes in
total.
'''

import logging
from typing import Dict, List

import nposlib.util
from nposlib.persist import simple_serialization

logger = logging.getLogger(__name__)

Assignments = Dict[str, Dict[str, int]]
'''Stake amounts by nominator id and then validator id.'''


@simple_serialization
class StakeEqualizer:
    '''Reduce the spread between the highest and lowest backed validator.

    In each pass, the validators with the highest and lowest total backing
    are found (ties go to the lowest account id for the minimum and the
    highest account id for the maximum). Nominators backing both are
    visited in account id order and their stake is moved from the highest
    to the lowest backed validator until half the spread has been moved.
    Passes stop when the spread falls below the tolerance or reaches zero,
    when no stake could be moved or after the pass cap.

    :param max_iterations: Maximum number of passes.
    :param tolerance: Spread of backing (in currency units) below which
        the committee is considered balanced. A zero spread is always
        balanced.
    '''
    def __init__(self, max_iterations: int = 16, tolerance: int = 0):
        if max_iterations < 0:
            raise ValueError(f'negative pass cap: {max_iterations}')
        if tolerance < 0:
            raise ValueError(f'negative tolerance: {tolerance}')
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def equalize(self,
                 assignments: Assignments,
                 elected: List[str],
                 ) -> int:
        '''Rebalance the assignments in place.

        :param assignments: Stake amounts by nominator and validator. Only
            existing edges are changed; no edge is added or removed.
        :param elected: Account ids of the elected validators. Validators
            with no backing at all take part with zero backing.
        :returns: Number of passes that moved stake.
        '''
        if len(elected) < 2:
            return 0
        n_moved_passes = 0
        for pass_i in range(self.max_iterations):
            backing = dict.fromkeys(elected, 0)
            backing.update({
                val_id: amount
                for val_id, amount in nposlib.util.column_totals(
                    assignments
                ).items()
                if val_id in backing
            })
            ranked = nposlib.util.sorted_by_value(backing)
            lowest, low_backing = ranked[0]
            highest, high_backing = ranked[-1]
            spread = high_backing - low_backing
            if spread == 0 or spread < self.tolerance:
                logger.debug('backing spread %d balanced', spread)
                break
            moved = self._move(assignments, highest, lowest, spread // 2)
            if not moved:
                logger.debug('no stake movable from %s to %s',
                             highest, lowest)
                break
            logger.debug('pass %d: moved %d from %s to %s',
                         pass_i + 1, moved, highest, lowest)
            n_moved_passes += 1
        return n_moved_passes

    @staticmethod
    def _move(assignments: Assignments,
              source: str,
              target: str,
              budget: int,
              ) -> int:
        moved = 0
        for nominator_id in sorted(assignments):
            if moved >= budget:
                break
            edges = assignments[nominator_id]
            if source in edges and target in edges and edges[source] > 0:
                amount = min(edges[source], budget - moved)
                edges[source] -= amount
                edges[target] += amount
                moved += amount
        return moved
