'''What-if modifications of election data.

Overrides are always applied to a copy: :func:`apply_overrides` returns
a new :class:`ElectionData` and leaves its input untouched.
:func:`apply_overrides_in_place` does the actual work on a copy the caller
owns.

Overrides naming an account that is not in the data are skipped and logged;
they are not an error.
'''

import logging

from nposlib.config import ElectionOverrides, EdgeAction
from nposlib.data import ElectionData

logger = logging.getLogger(__name__)


def apply_overrides(data: ElectionData,
                    overrides: ElectionOverrides,
                    ) -> ElectionData:
    '''Return a copy of the election data with the overrides applied.

    :param data: Original election data; not modified.
    :param overrides: Modifications to apply.
    '''
    modified = data.copy()
    apply_overrides_in_place(modified, overrides)
    return modified


def apply_overrides_in_place(data: ElectionData,
                             overrides: ElectionOverrides,
                             ) -> None:
    '''Apply the overrides to a working copy of election data.

    Candidate stakes are replaced first, then nominator stakes, then the
    approval edges are modified one by one in the order given. Adding an
    edge that exists and removing one that does not are no-ops. Modifying
    an edge removes it and adds it back at the end of the targets.

    :param data: Election data to modify.
    :param overrides: Modifications to apply.
    '''
    for account_id, stake in overrides.candidate_stakes.items():
        candidate = data.candidate(account_id)
        if candidate is None:
            logger.info('ignoring stake override of unknown candidate %s',
                        account_id)
        else:
            logger.debug('candidate %s stake %d -> %d',
                         account_id, candidate.stake, stake)
            candidate.stake = stake
    for account_id, stake in overrides.nominator_stakes.items():
        nominator = data.nominator(account_id)
        if nominator is None:
            logger.info('ignoring stake override of unknown nominator %s',
                        account_id)
        else:
            logger.debug('nominator %s stake %d -> %d',
                         account_id, nominator.stake, stake)
            nominator.stake = stake
    for edge in overrides.voting_edges:
        nominator = data.nominator(edge.nominator_id)
        if nominator is None:
            logger.info('ignoring edge override of unknown nominator %s',
                        edge.nominator_id)
            continue
        if edge.action is EdgeAction.ADD:
            nominator.add_target(edge.candidate_id)
        elif edge.action is EdgeAction.REMOVE:
            nominator.remove_target(edge.candidate_id)
        elif edge.action is EdgeAction.MODIFY:
            nominator.remove_target(edge.candidate_id)
            nominator.add_target(edge.candidate_id)
        else:
            raise ValueError(f'unknown edge action: {edge.action!r}')
        logger.debug('%s edge %s -> %s', edge.action.value,
                     edge.nominator_id, edge.candidate_id)
