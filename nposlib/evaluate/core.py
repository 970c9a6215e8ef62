'''General election algorithm machinery.'''

import abc
from typing import Optional

from nposlib.config import AlgorithmType
from nposlib.data import ElectionData
from nposlib.error import AlgorithmError
from nposlib.persist import simple_serialization
from nposlib.result import ElectionResult


class ElectionAlgorithm(metaclass=abc.ABCMeta):
    '''Elect a committee of validators and distribute nominator stake.

    A root abstract base class for all algorithms.
    '''
    algorithm_type: AlgorithmType = NotImplemented

    @abc.abstractmethod
    def evaluate(self,
                 data: ElectionData,
                 n_seats: int,
                 block_number: Optional[int] = None,
                 ) -> ElectionResult:
        '''Elect n_seats validators.

        :param data: Election data. Not modified.
        :param n_seats: Number of validators to elect.
        :param block_number: Provenance tag copied into the result metadata.
        :returns: The committee ordered by rank with the stake distribution.
        '''
        raise NotImplementedError


@simple_serialization
class UnsupportedAlgorithm(ElectionAlgorithm):
    '''A placeholder for a known algorithm without an implementation.

    :param algorithm_type: The algorithm this placeholder stands for.
    '''
    def __init__(self, algorithm_type: AlgorithmType):
        self.algorithm_type = AlgorithmType.from_name(algorithm_type)

    def evaluate(self,
                 data: ElectionData,
                 n_seats: int,
                 block_number: Optional[int] = None,
                 ) -> ElectionResult:
        raise AlgorithmError(
            f'{self.algorithm_type} is not implemented', self.algorithm_type
        )
