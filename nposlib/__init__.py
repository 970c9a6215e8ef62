"""Nposlib - offline validator elections for Nominated Proof-of-Stake.

Given a snapshot of validator candidates and of nominators who stake tokens
and approve subsets of the candidates, Nposlib elects a committee of
a bounded size and apportions each nominator's stake among the elected
validators it approves of. Identical inputs always give identical results,
down to the last unit of stake.

The building blocks are:

-   The data model: candidates and nominators (``candidate`` module),
    election snapshots (``data``), configuration and what-if overrides
    (``config``) and results (``result``).
-   Integrity checks of data, configuration and results in the
    ``validate`` module, and the override application in ``override``.
-   The election algorithms in the :mod:`evaluate` subpackage, currently
    sequential Phragmén, with the exact stake division and backing
    equalization components in :mod:`component`.
-   The :class:`ElectionEngine` in the ``engine`` module, which combines
    all of the above and is the usual entry point.

All objects can be converted to JSON-ready dictionaries and back without
loss by the ``persist`` module.
"""
