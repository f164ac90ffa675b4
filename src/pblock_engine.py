from typing import List, Tuple

import numpy as np
from numba import njit

from data_structures import PBlockRun


@njit
def _pblock_kernel(quals, two_p, out, run_starts):
    """
    Greedy left-to-right P-Block pass (Canovas et al., 2014).

    WARNING: This function is JIT-compiled with @njit. Keep it to plain loops
    over numpy arrays.

    Writes each run's representative into out and each run's start into
    run_starts. Returns: number of runs
    """
    n = quals.shape[0]
    min_val = quals[0]
    max_val = quals[0]
    start = 0
    n_runs = 0

    for pos in range(1, n):
        val = quals[pos]
        if val >= min_val and val <= max_val:
            continue
        if val > max_val and val - min_val <= two_p:
            max_val = val
            continue
        if val < min_val and max_val - val <= two_p:
            min_val = val
            continue

        representative = (min_val + max_val) // 2
        for i in range(start, pos):
            out[i] = representative
        run_starts[n_runs] = start
        n_runs += 1

        start = pos
        min_val = val
        max_val = val

    representative = (min_val + max_val) // 2
    for i in range(start, n):
        out[i] = representative
    run_starts[n_runs] = start
    n_runs += 1
    return n_runs


def _partition(quals, two_p: int) -> Tuple[np.ndarray, np.ndarray]:
    if two_p < 0:
        raise ValueError(f"two_p must be a non-negative integer, got {two_p}")

    quals = np.ascontiguousarray(quals, dtype=np.int64)
    if quals.ndim != 1:
        raise ValueError("P-Block works on one-dimensional quality arrays")
    # Empty input is the identity transform
    if quals.size == 0:
        return quals.copy(), np.zeros(0, dtype=np.int64)

    # No run can spread wider than the whole array, so larger thresholds are equivalent
    two_p = min(two_p, int(quals.max() - quals.min()))

    out = np.empty_like(quals)
    run_starts = np.empty(quals.size, dtype=np.int64)
    n_runs = _pblock_kernel(quals, np.int64(two_p), out, run_starts)
    return out, run_starts[:n_runs]


def pblock(quals, two_p: int) -> np.ndarray:
    """
    Replace every maximal run whose spread stays within two_p by the floor
    midpoint of the run's min and max.
    Returns: np.ndarray (int64) of the same length as quals
    """
    out, _ = _partition(quals, two_p)
    return out


def pblock_runs(quals, two_p: int) -> List[PBlockRun]:
    """Return the runs chosen by the greedy pass, in order."""
    out, run_starts = _partition(quals, two_p)
    ends = list(run_starts[1:]) + [out.size]
    return [
        PBlockRun(start=int(s), end=int(e), representative=int(out[s]))
        for s, e in zip(run_starts, ends)
    ]
