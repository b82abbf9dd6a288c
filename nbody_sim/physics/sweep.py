"""Parallel sweep over all bodies on a fixed-size worker pool.

A sweep evaluates and integrates every body against one snapshot (the store's
``current`` buffer) and writes each body's new state into its own row of the
``next`` buffer. Rows are disjoint, so no locking is needed. The buffers are
swapped only after every worker has finished; if any worker fails, or the
result is not finite, the sweep is discarded and the previous state stays
current.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np

from nbody_sim.errors import ConfigurationError, NumericalInstabilityError
from nbody_sim.physics.bodies import BodyStore
from nbody_sim.physics.integrators.base import Integrator

logger = logging.getLogger(__name__)


def partition(n_bodies: int, n_chunks: int) -> List[range]:
    """Split 0..n_bodies-1 into at most n_chunks contiguous, non-empty ranges."""
    n_chunks = max(1, min(n_chunks, n_bodies))
    base, extra = divmod(n_bodies, n_chunks)
    chunks = []
    start = 0
    for k in range(n_chunks):
        stop = start + base + (1 if k < extra else 0)
        chunks.append(range(start, stop))
        start = stop
    return chunks


class SweepExecutor:
    """Runs sweeps on a ThreadPoolExecutor with a fixed number of workers.

    NumPy releases the GIL inside its kernels, which is where the per-body
    work happens. With ``workers == 1`` the sweep runs inline on the calling
    thread and no pool is created.
    """

    def __init__(self, workers: int = 1, check_finite: bool = True):
        if workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        self.workers = workers
        self.check_finite = check_finite
        self._pool: Optional[ThreadPoolExecutor] = None
        if workers > 1:
            self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="nbody-sweep")
        self.sweep_count = 0

    def sweep(self, store: BodyStore, integrator: Integrator, dt: float):
        """Advance every body by one timestep.

        Raises:
            NumericalInstabilityError: If check_finite is on and the new state has NaN/Inf
            Exception: Whatever a worker raised; the sweep is abandoned
        """
        chunks = partition(store.n_bodies, self.workers)
        if self._pool is None or len(chunks) == 1:
            for chunk in chunks:
                integrator.integrate_range(chunk, store, dt)
        else:
            futures = [
                self._pool.submit(integrator.integrate_range, chunk, store, dt)
                for chunk in chunks
            ]
            # Wait for all before raising so no worker is still writing into ``next``
            errors = [f.exception() for f in futures]
            for err in errors:
                if err is not None:
                    raise err

        if self.check_finite:
            self._check_finite(store)

        store.swap()
        self.sweep_count += 1

    def _check_finite(self, store: BodyStore):
        nxt = store.next
        for name in ("positions", "velocities", "accelerations"):
            arr = getattr(nxt, name)
            finite = np.isfinite(arr).all(axis=1)
            if not finite.all():
                bad = np.flatnonzero(~finite)
                logger.error("Sweep %d produced non-finite %s for bodies %s", self.sweep_count, name, bad[:10].tolist())
                raise NumericalInstabilityError(
                    f"Non-finite {name} after sweep {self.sweep_count} (bodies {bad[:10].tolist()})"
                )

    def close(self):
        """Shut down the worker pool."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
