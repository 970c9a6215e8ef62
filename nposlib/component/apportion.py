'''Exact division of a stake into integer parts.

A nominator's stake is split among the validators it backs according to
exact fractional weights. Since the parts must be whole currency units and
must add up to the stake exactly, the shares are rounded by the largest
remainder method, the same way seats are rounded in largest-remainder
proportional systems.
'''

import math
from fractions import Fraction
from typing import Dict


def split_stake(stake: int, weights: Dict[str, Fraction]) -> Dict[str, int]:
    '''Split a stake into integer parts proportional to the weights.

    Every part first gets the floor of its exact share. The units left over
    go one each to the parts with the largest fractional remainders; equal
    remainders are resolved in favour of the lowest key.

    :param stake: Integer amount to split.
    :param weights: Non-negative exact weights by key. They need not sum to
        one; only their ratios matter.
    :returns: Integer parts by key, summing exactly to the stake. All keys
        of the weights are present.
    :raises ValueError: If the weights are negative or all zero.
    '''
    if not weights:
        raise ValueError('cannot split stake among no parts')
    if any(weight < 0 for weight in weights.values()):
        raise ValueError(f'negative split weights: {weights}')
    total_weight = sum(weights.values())
    if total_weight == 0:
        raise ValueError('cannot split stake by all-zero weights')
    shares = {
        key: Fraction(stake) * weight / total_weight
        for key, weight in weights.items()
    }
    parts = {key: math.floor(share) for key, share in shares.items()}
    n_leftover = stake - sum(parts.values())
    by_remainder = sorted(
        sorted(shares),
        key=lambda key: shares[key] - parts[key],
        reverse=True,
    )
    for key in by_remainder[:n_leftover]:
        parts[key] += 1
    return parts
