'''Building blocks of the election algorithms.

The components here do not elect anybody themselves; they divide stake
exactly (:mod:`apportion`) and rebalance the backing of an elected committee
(:mod:`equalize`).
'''
