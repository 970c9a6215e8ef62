'''The election engine, the main entry point of Nposlib.

The engine runs one election per call:

1.  validates the configuration and the election data,
2.  reduces the committee size to the number of candidates if needed
    (issuing an :class:`nposlib.error.ActiveSetSizeAdjusted` warning),
3.  applies the configured overrides to a copy of the data,
4.  runs the configured algorithm,
5.  checks the result for consistency,
6.  optionally attaches diagnostics from an external generator.

The engine keeps no state between calls and never modifies its inputs, so
one instance can serve any number of concurrent callers.
'''

import logging
import warnings
from typing import Any, Callable, Dict, Optional

import nposlib.validate
from nposlib.config import AlgorithmType, ElectionConfiguration
from nposlib.data import ElectionData
from nposlib.error import ActiveSetSizeAdjusted
from nposlib.evaluate.core import ElectionAlgorithm, UnsupportedAlgorithm
from nposlib.evaluate.phragmen import SequentialPhragmen
from nposlib.override import apply_overrides
from nposlib.result import ElectionResult

logger = logging.getLogger(__name__)

DiagnosticsGenerator = Callable[[ElectionResult, ElectionData], Any]

DEFAULT_ALGORITHMS: Dict[AlgorithmType, ElectionAlgorithm] = {
    AlgorithmType.SEQUENTIAL_PHRAGMEN: SequentialPhragmen(),
    AlgorithmType.PARALLEL_PHRAGMEN: UnsupportedAlgorithm(
        AlgorithmType.PARALLEL_PHRAGMEN
    ),
    AlgorithmType.MULTI_PHASE: UnsupportedAlgorithm(AlgorithmType.MULTI_PHASE),
}


class ElectionEngine:
    '''Run elections with validation, overrides and result checks.

    :param algorithms: Algorithm objects replacing the defaults for some
        algorithm types, e.g. a :class:`SequentialPhragmen` with a different
        equalizer.
    :param diagnostics: A callable explaining a result; called with the
        result and the (overridden) election data when diagnostics are
        requested. Its failures are logged and do not fail the election.
    '''
    def __init__(self,
                 algorithms: Optional[
                     Dict[AlgorithmType, ElectionAlgorithm]
                 ] = None,
                 diagnostics: Optional[DiagnosticsGenerator] = None,
                 ):
        self.algorithms = DEFAULT_ALGORITHMS.copy()
        if algorithms:
            self.algorithms.update({
                AlgorithmType.from_name(algo_type): algorithm
                for algo_type, algorithm in algorithms.items()
            })
        self.diagnostics = diagnostics

    def execute(self,
                config: ElectionConfiguration,
                data: ElectionData,
                diagnostics: bool = False,
                ) -> ElectionResult:
        '''Run an election.

        :param config: Algorithm, committee size and overrides to use.
        :param data: Election data. Not modified.
        :param diagnostics: Whether to attach diagnostics to the result.
        :returns: The election result.
        :raises ValidationError: If the configuration or data is invalid
            (also after the overrides are applied), or if the algorithm
            produced an inconsistent result.
        :raises AlgorithmError: If the algorithm cannot elect a full
            committee.
        '''
        nposlib.validate.validate_configuration(config)
        nposlib.validate.validate(data)
        n_seats = self.effective_active_set_size(config, data)
        if config.overrides is not None and not config.overrides.is_empty():
            working_data = apply_overrides(data, config.overrides)
            nposlib.validate.validate(working_data)
        else:
            working_data = data.copy()
        algorithm = self.algorithms[config.algorithm]
        logger.info('electing %d validators from %d candidates by %s,'
                    ' nominators staking %d in total',
                    n_seats, len(working_data.candidates), config.algorithm,
                    working_data.total_nominator_stake())
        result = algorithm.evaluate(
            working_data, n_seats, block_number=config.block_number
        )
        nposlib.validate.validate_result(result, n_seats)
        if diagnostics:
            result = self._attach_diagnostics(result, working_data)
        return result

    @staticmethod
    def effective_active_set_size(config: ElectionConfiguration,
                                  data: ElectionData,
                                  ) -> int:
        '''Return the committee size reduced to the number of candidates.

        Warns with :class:`ActiveSetSizeAdjusted` if a reduction occurs.
        '''
        n_candidates = len(data.candidates)
        if config.active_set_size > n_candidates:
            message = (
                f'requested {config.active_set_size} validators but only'
                f' {n_candidates} candidates available, using {n_candidates}'
            )
            logger.info(message)
            warnings.warn(message, ActiveSetSizeAdjusted)
            return n_candidates
        return config.active_set_size

    def _attach_diagnostics(self,
                            result: ElectionResult,
                            data: ElectionData,
                            ) -> ElectionResult:
        if self.diagnostics is None:
            logger.warning('diagnostics requested but no generator set')
            return result
        try:
            report = self.diagnostics(result, data)
        except Exception as e:
            logger.warning('failed to generate diagnostics: %s', e,
                           exc_info=True)
            return result
        return result.with_diagnostics(report)
