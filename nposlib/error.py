'''Errors and warnings raised by Nposlib.

All failures of the core derive from :class:`ElectionError`, so callers can
catch a single class. Each subclass keeps its constructor arguments as
attributes to pinpoint the offending field, account or algorithm.
'''

from typing import Any, Optional


class ElectionError(Exception):
    '''An election could not be run or produced an inconsistent result.'''
    pass


class ValidationError(ElectionError):
    '''Election input or output failed a consistency check.

    Always recoverable by the caller by fixing the input and retrying.

    :param message: Description of the failed check.
    :param field: Name of the field that failed the check, if known.
    '''
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        text = f'validation error: {message}'
        if field is not None:
            text += f' (field: {field})'
        super().__init__(text)


class AlgorithmError(ElectionError):
    '''An election algorithm could not produce a valid committee.

    :param message: Description of the failure.
    :param algorithm: The algorithm type that failed.
    '''
    def __init__(self, message: str, algorithm: Any):
        self.message = message
        self.algorithm = algorithm
        super().__init__(
            f'algorithm error: {message} (algorithm: {algorithm})'
        )


class InsufficientCandidates(ElectionError):
    '''More committee seats were requested than there are candidates.

    :param requested: Number of seats requested.
    :param available: Number of candidates available.
    '''
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f'insufficient candidates: requested {requested},'
            f' available {available}'
        )


class InvalidData(ElectionError):
    '''An election entity is structurally malformed.

    E.g. a negative stake or a nominator listing the same target twice.

    :param message: Description of the malformation.
    '''
    def __init__(self, message: str):
        self.message = message
        super().__init__(f'invalid data: {message}')


class ActiveSetSizeAdjusted(UserWarning):
    '''The requested committee size was reduced to the candidate count.'''
    pass
