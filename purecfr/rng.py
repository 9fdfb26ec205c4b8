"""MT19937 Mersenne Twister random number generator."""

from __future__ import annotations

from typing import Iterable

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_WORD_MASK = 0xFFFFFFFF
_MAG01 = (0, _MATRIX_A)

_ARRAY_INIT_SEED = 19650218


class MersenneTwister:
    """A 32-bit Mersenne Twister with its own independent state."""

    def __init__(self, seed: int) -> None:
        self._mt = [0] * _N
        self._mti = _N
        self._seed(seed)

    def _seed(self, seed: int) -> None:
        mt = self._mt
        mt[0] = seed & _WORD_MASK
        for i in range(1, _N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & _WORD_MASK
        self._mti = _N

    @classmethod
    def from_array(cls, key: Iterable[int]) -> MersenneTwister:
        """Seed a generator from a sequence of 32-bit integers."""
        init_key = [k & _WORD_MASK for k in key]
        if not init_key:
            raise ValueError("seed key must hold at least one integer")
        gen = cls(_ARRAY_INIT_SEED)
        mt = gen._mt
        i, j = 1, 0
        for _ in range(max(_N, len(init_key))):
            prev = mt[i - 1]
            mt[i] = (
                (mt[i] ^ ((prev ^ (prev >> 30)) * 1664525)) + init_key[j] + j
            ) & _WORD_MASK
            i += 1
            j += 1
            if i >= _N:
                mt[0] = mt[_N - 1]
                i = 1
            if j >= len(init_key):
                j = 0
        for _ in range(_N - 1):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * 1566083941)) - i) & _WORD_MASK
            i += 1
            if i >= _N:
                mt[0] = mt[_N - 1]
                i = 1
        # most significant bit set: the initial array is never all zero
        mt[0] |= 0x80000000
        return gen

    def _generate(self) -> None:
        mt = self._mt
        for kk in range(_N - _M):
            y = (mt[kk] & _UPPER_MASK) | (mt[kk + 1] & _LOWER_MASK)
            mt[kk] = mt[kk + _M] ^ (y >> 1) ^ _MAG01[y & 1]
        for kk in range(_N - _M, _N - 1):
            y = (mt[kk] & _UPPER_MASK) | (mt[kk + 1] & _LOWER_MASK)
            mt[kk] = mt[kk + (_M - _N)] ^ (y >> 1) ^ _MAG01[y & 1]
        y = (mt[_N - 1] & _UPPER_MASK) | (mt[0] & _LOWER_MASK)
        mt[_N - 1] = mt[_M - 1] ^ (y >> 1) ^ _MAG01[y & 1]
        self._mti = 0

    def genrand_int32(self) -> int:
        """A random integer in [0, 0xffffffff]."""
        if self._mti >= _N:
            self._generate()
        y = self._mt[self._mti]
        self._mti += 1

        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _WORD_MASK

    def genrand_int31(self) -> int:
        """A random integer in [0, 0x7fffffff]."""
        return self.genrand_int32() >> 1

    def genrand_real1(self) -> float:
        """A random float in [0, 1]."""
        return self.genrand_int32() * (1.0 / 4294967295.0)

    def genrand_real2(self) -> float:
        """A random float in [0, 1)."""
        return self.genrand_int32() * (1.0 / 4294967296.0)

    def genrand_real3(self) -> float:
        """A random float in (0, 1)."""
        return (float(self.genrand_int32()) + 0.5) * (1.0 / 4294967296.0)

    def genrand_res53(self) -> float:
        """A random float in [0, 1) with 53-bit resolution."""
        a = self.genrand_int32() >> 5
        b = self.genrand_int32() >> 6
        return (a * 67108864.0 + b) * (1.0 / 9007199254740992.0)