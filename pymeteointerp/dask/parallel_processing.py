"""
Parallel processing utilities for Dask-based interpolation of time series.

Time slices of a station series are independent of each other, so each slice
is wrapped in a ``dask.delayed`` task and the tasks are computed together on
a local Dask scheduler.
"""
from typing import Any, Callable, Dict, List, Optional

import dask
import numpy as np
from dask.delayed import delayed


VALID_SCHEDULERS = ('threads', 'processes', 'synchronous', 'sync', 'single-threaded')


class ParallelProcessor:
    """
    A utility class for parallel processing of interpolation slices using Dask.
    """

    def __init__(self, scheduler: str = "threads", num_workers: Optional[int] = None):
        """
        Initialize the parallel processor.

        Parameters
        ----------
        scheduler : str, optional
            Local Dask scheduler: 'threads' (default), 'processes' or 'synchronous'
        num_workers : int, optional
            Number of workers for the threaded or process pool. If None, Dask
            picks the number of CPUs.
        """
        if scheduler not in VALID_SCHEDULERS:
            raise ValueError(f"Scheduler must be one of {list(VALID_SCHEDULERS)}, got '{scheduler}'")
        if num_workers is not None and num_workers <= 0:
            raise ValueError(f"num_workers must be positive, got {num_workers}")
        self.scheduler = scheduler
        self.num_workers = num_workers

    def _compute_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {'scheduler': self.scheduler}
        # Worker count only applies to pool-based schedulers
        if self.num_workers is not None and self.scheduler in ('threads', 'processes'):
            kwargs['num_workers'] = self.num_workers
        return kwargs

    def map_slices(
        self,
        slice_function: Callable[[int], np.ndarray],
        n_slices: int
    ) -> List[np.ndarray]:
        """
        Evaluate ``slice_function`` for every slice index in parallel.

        Parameters
        ----------
        slice_function : callable
            Function taking a slice index and returning that slice's result.
            With the 'processes' scheduler it must be picklable.
        n_slices : int
            Number of slices

        Returns
        -------
        list of np.ndarray
            Results ordered by slice index
        """
        if n_slices == 0:
            return []
        tasks = [delayed(slice_function)(index) for index in range(n_slices)]
        return list(dask.compute(*tasks, **self._compute_kwargs()))

    def interpolate_slices(
        self,
        slice_function: Callable[[int], np.ndarray],
        n_slices: int,
        n_targets: int
    ) -> np.ndarray:
        """
        Evaluate every slice and stack the results column-wise.

        Returns
        -------
        np.ndarray
            Array of shape (n_targets, n_slices)
        """
        columns = self.map_slices(slice_function, n_slices)
        if not columns:
            return np.empty((n_targets, 0))
        return np.column_stack(columns)
