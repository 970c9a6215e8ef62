'''Sequential Phragmén election of validator committees.

Phragmén's method elects candidates one by one, treating each seat as a
unit of load that the voters backing it must carry in proportion to their
stake. [#wphr]_ In every round, the candidate whose election would leave its
backers with the lowest maximum load is elected:

    score(c) = (1 + sum(load[v] * stake[v])) / sum(stake[v])

summed over the voters *v* approving of *c*. The backers of the winner then
carry a load equal to its score. When the committee is complete, each
voter's stake is split among the validators it elected in proportion to the
load increments it took on for each of them.

Loads are kept as fixed-point integers scaled by :data:`LOAD_SCALE`, scores
are compared exactly as fractions and stake is split exactly in whole units,
so the result does not depend on the platform or on the order of candidates
and nominators in the input. Ties in score go to the lowest account id.

.. [#wphr] "Phragmen's voting rules", Wikipedia.
    https://en.wikipedia.org/wiki/Phragmen%27s_voting_rules
'''

import math
import logging
import collections
from fractions import Fraction
from typing import List, Dict, Tuple, Optional

import nposlib.component.apportion
import nposlib.evaluate.core
from nposlib.component.equalize import StakeEqualizer
from nposlib.config import AlgorithmType
from nposlib.data import ElectionData
from nposlib.error import AlgorithmError, InsufficientCandidates, \
    ValidationError
from nposlib.persist import simple_serialization
from nposlib.result import ElectionResult, ExecutionMetadata, \
    SelectedValidator, StakeAllocation

LOAD_SCALE: int = 10 ** 60
'''Fixed-point denominator of loads; exceeds any possible sum of stakes.'''

DEFAULT_EQUALIZER = StakeEqualizer()

logger = logging.getLogger(__name__)

Voter = collections.namedtuple('Voter', ['account_id', 'stake', 'targets'])


@simple_serialization
class SequentialPhragmen(nposlib.evaluate.core.ElectionAlgorithm):
    '''Elect a committee by sequential Phragmén, then balance its backing.

    :param equalizer: Rebalances the stake distribution after the election
        without changing who is elected. None leaves the distribution as
        derived from the loads.
    '''
    algorithm_type = AlgorithmType.SEQUENTIAL_PHRAGMEN

    def __init__(self,
                 equalizer: Optional[StakeEqualizer] = DEFAULT_EQUALIZER,
                 ):
        self.equalizer = equalizer

    def evaluate(self,
                 data: ElectionData,
                 n_seats: int,
                 block_number: Optional[int] = None,
                 ) -> ElectionResult:
        '''Elect n_seats validators by sequential Phragmén.

        :param data: Election data. Targets that are not candidates are
            ignored; nominators without any candidate targets take no part.
        :param n_seats: Number of validators to elect.
        :param block_number: Provenance tag copied into the result metadata.
        :raises ValidationError: If there are no candidates or no
            nominators, or no seats are requested.
        :raises InsufficientCandidates: If there are fewer candidates than
            seats.
        :raises AlgorithmError: If fewer than n_seats candidates have any
            backing stake.
        '''
        candidate_ids = data.candidate_ids()
        if not candidate_ids or not data.nominators:
            raise ValidationError(
                'cannot run election with zero candidates or voters'
            )
        if n_seats < 1:
            raise ValidationError(f'cannot elect {n_seats} validators',
                                  field='active_set_size')
        if n_seats > len(candidate_ids):
            raise InsufficientCandidates(n_seats, len(candidate_ids))
        voters = self._collect_voters(data)
        elected, scores, loads, edge_loads = self._elect(
            voters, candidate_ids, n_seats
        )
        assignments, weights = self._distribute(voters, loads, edge_loads)
        if self.equalizer is not None:
            self.equalizer.equalize(assignments, elected)
        stakes = {voter.account_id: voter.stake for voter in voters}
        return ElectionResult(
            selected_validators=self._selected(
                data, elected, scores, assignments
            ),
            stake_distribution=self._allocations(
                elected, assignments, weights, stakes
            ),
            total_stake=sum(stakes[nom_id] for nom_id in assignments),
            algorithm_used=self.algorithm_type,
            execution_metadata=ExecutionMetadata.now(
                block_number=block_number,
                data_source=data.source,
            ),
        )

    @staticmethod
    def _collect_voters(data: ElectionData) -> List[Voter]:
        known = frozenset(data.candidate_ids())
        voters = []
        for nominator in sorted(data.nominators, key=lambda n: n.account_id):
            targets = tuple(t for t in nominator.targets if t in known)
            if targets:
                voters.append(Voter(nominator.account_id, nominator.stake,
                                    targets))
            else:
                logger.debug('nominator %s has no candidate targets,'
                             ' excluded', nominator.account_id)
        return voters

    def _elect(self,
               voters: List[Voter],
               candidate_ids: List[str],
               n_seats: int,
               ) -> Tuple[List[str], Dict[str, Fraction],
                          List[int], List[Dict[str, int]]]:
        '''Run the election rounds.

        :returns: A 4-tuple of the elected candidate ids in election order,
            their exact winning scores, the final fixed-point load of every
            voter and the load increments of every voter by the elected
            candidate that caused them.
        '''
        supporters = {cand_id: [] for cand_id in candidate_ids}
        for voter_i, voter in enumerate(voters):
            for target in voter.targets:
                supporters[target].append(voter_i)
        approval = {
            cand_id: sum(voters[voter_i].stake for voter_i in backers)
            for cand_id, backers in supporters.items()
        }
        remaining = sorted(
            cand_id for cand_id in candidate_ids if approval[cand_id] > 0
        )
        loads = [0] * len(voters)
        edge_loads = [{} for voter in voters]
        elected = []
        scores = {}
        for round_i in range(n_seats):
            if not remaining:
                raise AlgorithmError(
                    f'only {len(elected)} candidates have any backing stake,'
                    f' cannot elect {n_seats}',
                    self.algorithm_type,
                )
            round_scores = {
                cand_id: Fraction(
                    LOAD_SCALE + sum(
                        loads[voter_i] * voters[voter_i].stake
                        for voter_i in supporters[cand_id]
                    ),
                    approval[cand_id]
                )
                for cand_id in remaining
            }
            winner = min(remaining, key=lambda c: (round_scores[c], c))
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug('round %d scores: %s', round_i + 1, {
                    cand_id: float(score / LOAD_SCALE)
                    for cand_id, score in round_scores.items()
                })
            logger.info('round %d: electing %s (backed by %d)',
                        round_i + 1, winner, approval[winner])
            winner_load = math.floor(round_scores[winner])
            for voter_i in supporters[winner]:
                edge_loads[voter_i][winner] = winner_load - loads[voter_i]
                loads[voter_i] = winner_load
            elected.append(winner)
            scores[winner] = round_scores[winner] / LOAD_SCALE
            remaining.remove(winner)
        return elected, scores, loads, edge_loads

    @staticmethod
    def _distribute(voters: List[Voter],
                    loads: List[int],
                    edge_loads: List[Dict[str, int]],
                    ) -> Tuple[
                        Dict[str, Dict[str, int]],
                        Dict[str, Dict[str, Fraction]]
                    ]:
        '''Split voter stakes by the load each elected candidate caused.

        :returns: A 2-tuple of integer amounts and exact weights, both by
            voter id and elected candidate id. Voters backing no elected
            candidate are absent.
        '''
        assignments = {}
        weights = {}
        for voter_i, voter in enumerate(voters):
            if not edge_loads[voter_i]:
                continue
            voter_weights = {
                cand_id: Fraction(edge_load, loads[voter_i])
                for cand_id, edge_load in edge_loads[voter_i].items()
            }
            weights[voter.account_id] = voter_weights
            assignments[voter.account_id] = (
                nposlib.component.apportion.split_stake(
                    voter.stake, voter_weights
                )
            )
        return assignments, weights

    @staticmethod
    def _selected(data: ElectionData,
                  elected: List[str],
                  scores: Dict[str, Fraction],
                  assignments: Dict[str, Dict[str, int]],
                  ) -> List[SelectedValidator]:
        selected = []
        for rank, cand_id in enumerate(elected, start=1):
            amounts = [
                edges[cand_id] for edges in assignments.values()
                if cand_id in edges
            ]
            selected.append(SelectedValidator(
                account_id=cand_id,
                total_backing_stake=sum(amounts),
                nominator_count=len(amounts),
                rank=rank,
                self_stake=data.candidate(cand_id).stake,
                score=scores[cand_id],
            ))
        return selected

    @staticmethod
    def _allocations(elected: List[str],
                     assignments: Dict[str, Dict[str, int]],
                     weights: Dict[str, Dict[str, Fraction]],
                     stakes: Dict[str, int],
                     ) -> List[StakeAllocation]:
        allocations = []
        for cand_id in elected:
            for nom_id in sorted(assignments):
                if cand_id not in assignments[nom_id]:
                    continue
                amount = assignments[nom_id][cand_id]
                if stakes[nom_id]:
                    proportion = Fraction(amount, stakes[nom_id])
                else:
                    proportion = weights[nom_id][cand_id]
                allocations.append(StakeAllocation(
                    nominator_id=nom_id,
                    validator_id=cand_id,
                    amount=amount,
                    proportion=proportion,
                ))
        return allocations
