import random
import time


class RandomSource:
    '''Byte generator for the Cxkk instruction.  Reseeded from the wall clock on reset.'''

    def __init__(self, seed=None):
        self._rng = random.Random()
        self.reseed(seed)

    def reseed(self, seed=None):
        if seed is None:
            seed = time.time_ns()
        self._rng.seed(seed)

    def next_byte(self):
        return self._rng.randrange(0, 256)
