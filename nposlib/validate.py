'''Integrity checks for election data, configurations and results.

The checks raise :class:`nposlib.error.ValidationError` naming the field
that failed and, where there is one, the offending account id. They have no
side effects and are run by the engine before any data is copied, modified
or passed to an algorithm.
'''

import nposlib.util
from nposlib.config import ElectionConfiguration
from nposlib.data import ElectionData
from nposlib.result import ElectionResult
from nposlib.error import ValidationError


def validate(data: ElectionData) -> None:
    '''Check that the election data is structurally consistent.

    Nominators without any targets are valid; they simply take no part in
    the election.

    :param data: Election data to check.
    :raises ValidationError: If there are no candidates or no nominators,
        if any account id is used twice among candidates or among
        nominators, if a nominator lists a target twice, or if a nominator
        targets an account that is not a candidate.
    '''
    if not data.candidates:
        raise ValidationError('no candidates in election data',
                              field='candidates')
    if not data.nominators:
        raise ValidationError('no nominators in election data',
                              field='nominators')
    candidate_ids = data.candidate_ids()
    repeated = nposlib.util.duplicates(candidate_ids)
    if repeated:
        raise ValidationError(
            f'duplicate candidate account ids: {repeated}',
            field='candidates',
        )
    repeated = nposlib.util.duplicates(
        nominator.account_id for nominator in data.nominators
    )
    if repeated:
        raise ValidationError(
            f'duplicate nominator account ids: {repeated}',
            field='nominators',
        )
    known = frozenset(candidate_ids)
    for nominator in data.nominators:
        repeated = nposlib.util.duplicates(nominator.targets)
        if repeated:
            raise ValidationError(
                f'nominator {nominator.account_id} lists targets more than'
                f' once: {repeated}',
                field='targets',
            )
        unknown = [target for target in nominator.targets
                   if target not in known]
        if unknown:
            raise ValidationError(
                f'nominator {nominator.account_id} targets unknown'
                f' candidates: {unknown}',
                field='targets',
            )


def validate_configuration(config: ElectionConfiguration) -> None:
    '''Check a configuration that might have been changed after creation.

    :raises ValidationError: If the active set size is not a positive
        integer.
    '''
    size = config.active_set_size
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ValidationError(
            f'active set size must be a positive integer, got {size!r}',
            field='active_set_size',
        )


def validate_result(result: ElectionResult, n_seats: int) -> None:
    '''Check that an algorithm produced a consistent result.

    A failure here signals an algorithm bug rather than bad input.

    :param result: The result to check.
    :param n_seats: The committee size the algorithm was asked for.
    :raises ValidationError: If the committee has a different size, if
        a validator is elected twice, or if the distributed stake does not
        add up to the declared total.
    '''
    n_selected = len(result.selected_validators)
    if n_selected != n_seats:
        raise ValidationError(
            f'result has {n_selected} validators but expected {n_seats}',
            field='selected_validators',
        )
    repeated = nposlib.util.duplicates(result.selected_ids())
    if repeated:
        raise ValidationError(
            f'validators elected more than once: {repeated}',
            field='selected_validators',
        )
    total_allocated = sum(
        alloc.amount for alloc in result.stake_distribution
    )
    if total_allocated != result.total_stake:
        raise ValidationError(
            f'stake distribution total {total_allocated} does not match'
            f' total stake {result.total_stake}',
            field='stake_distribution',
        )
