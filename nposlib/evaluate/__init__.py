'''Elect validator committees.

Every algorithm object provides the :class:`core.ElectionAlgorithm`
interface: it takes validated election data and a committee size and
returns an :class:`nposlib.result.ElectionResult`. The algorithms do not
validate their input beyond what they need to run safely; use
:func:`nposlib.validate.validate` or run them through
:class:`nposlib.engine.ElectionEngine`.

The set of algorithms is closed and enumerated by
:class:`nposlib.config.AlgorithmType`. Only Sequential Phragmén
(:class:`phragmen.SequentialPhragmen`) is implemented; the other types are
served by :class:`core.UnsupportedAlgorithm`.
'''

from nposlib.evaluate.core import *    # noqa
