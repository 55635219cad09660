"""Cache of frequency-domain interpolation kernels.

Building a kernel costs one FFT of the padded length, and consecutive searches
usually share the same mini-spectrum length, so kernels are memoized by
`(padded_length, numbetween, half_width)`. The cache is an explicit object:
callers that search from several threads either pass one cache per worker or
share one (access is serialized; heterogeneous keys then evict each other).
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from fftsearch.compute.responses import gen_r_response, place_complex_kernel
from fftsearch.errors import SearchResourceError

logger = logging.getLogger(__name__)


class KernelKey(NamedTuple):
    padded_length: int
    numbetween: int
    half_width: int


def build_kernel(padded_length: int, numbetween: int, half_width: int) -> NDArray[np.complex128]:
    """Build the forward-transformed interpolation kernel for one key."""
    if half_width < 1:
        raise ValueError(f"half_width must be >= 1 (got {half_width})")
    numkern = 2 * int(numbetween) * int(half_width)
    response = gen_r_response(0.0, int(numbetween), numkern)
    try:
        placed = place_complex_kernel(response, int(padded_length))
    except MemoryError as exc:
        raise SearchResourceError("interpolation kernel", padded_length) from exc
    kernel = np.fft.fft(placed)
    kernel.flags.writeable = False
    return kernel


class KernelCache:
    """LRU cache of interpolation kernels (single slot by default).

    A single slot reproduces the classic "rebuild whenever the key changes"
    behavior; a larger `max_entries` keeps kernels for several lengths alive.
    Returned arrays are read-only.
    """

    DEFAULT_MAX_ENTRIES = 1

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1 (got {max_entries})")
        self._max_entries = int(max_entries)
        self._kernels: OrderedDict[KernelKey, NDArray[np.complex128]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._kernels)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._kernels

    def keys(self) -> list[KernelKey]:
        with self._lock:
            return list(self._kernels)

    def clear(self) -> None:
        with self._lock:
            self._kernels.clear()

    def get_kernel(
        self, padded_length: int, numbetween: int, half_width: int
    ) -> NDArray[np.complex128]:
        """Return the kernel for this key, building (and evicting) if needed."""
        key = KernelKey(int(padded_length), int(numbetween), int(half_width))
        with self._lock:
            kernel = self._kernels.get(key)
            if kernel is not None:
                self._kernels.move_to_end(key)
                self.hits += 1
                return kernel

            self.misses += 1
            logger.debug(
                "Building interpolation kernel: padded_length=%d numbetween=%d half_width=%d",
                key.padded_length,
                key.numbetween,
                key.half_width,
            )
            kernel = build_kernel(*key)
            while len(self._kernels) >= self._max_entries:
                evicted, _ = self._kernels.popitem(last=False)
                logger.debug("Evicted interpolation kernel %s", evicted)
            self._kernels[key] = kernel
            return kernel


_local = threading.local()


def default_kernel_cache() -> KernelCache:
    """Per-thread default cache used when a search is not given one."""
    cache = getattr(_local, "cache", None)
    if cache is None:
        cache = KernelCache()
        _local.cache = cache
    return cache
