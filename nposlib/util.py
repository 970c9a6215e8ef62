'''Various utility functions for other modules of Nposlib.

There should normally be no need to use these functions directly.
'''

import operator
import collections
from typing import Any, List, Tuple, Dict, Iterable, Hashable
from numbers import Number

from nposlib.error import InvalidData

MAX_STAKE: int = 2 ** 128 - 1
'''Largest stake representable by the on-chain balance type.'''


def check_stake(value: Any, what: str = 'stake') -> int:
    '''Return the stake if it is an unsigned 128-bit integer.

    :raises InvalidData: If the value is not an integer or out of range.
    '''
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidData(f'{what} must be an integer, got {value!r}')
    if value < 0 or value > MAX_STAKE:
        raise InvalidData(f'{what} out of the unsigned 128-bit range: {value}')
    return value


def check_account_id(value: Any, what: str = 'account id') -> str:
    '''Return the account id if it is a non-empty string.

    :raises InvalidData: If the value is not a non-empty string.
    '''
    if not isinstance(value, str) or not value:
        raise InvalidData(f'{what} must be a non-empty string, got {value!r}')
    return value


def duplicates(items: Iterable[Hashable]) -> List[Hashable]:
    '''Return items occurring more than once, in order of first repetition.'''
    seen = set()
    repeated = []
    for item in items:
        if item in seen:
            if item not in repeated:
                repeated.append(item)
        else:
            seen.add(item)
    return repeated


def add_dict_to_dict(dict1: Dict[Any, Number],
                     dict2: Dict[Any, Number],
                     ) -> None:
    for key, addition in dict2.items():
        dict1[key] = dict1.get(key, 0) + addition


def column_totals(nested: Dict[Any, Dict[Any, Number]]) -> Dict[Any, Number]:
    '''Sum the inner dictionaries of a nested mapping by their keys.'''
    totals = collections.defaultdict(int)
    for inner in nested.values():
        add_dict_to_dict(totals, inner)
    return dict(totals)


def sorted_by_value(d: Dict[Any, Number]) -> List[Tuple[Any, Number]]:
    '''Return items sorted by value, ties ordered by ascending key.'''
    by_key = sorted(d.items(), key=operator.itemgetter(0))
    return sorted(by_key, key=operator.itemgetter(1))
