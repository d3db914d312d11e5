# threaded_runner.py - drive independent chains from a small thread pool

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Hashable, Iterable, List


def run_parallel(tasks: Iterable[Callable], max_workers: int = 4) -> List:
    """
    Run zero-argument callables in a thread pool.
    Results come back in submission order; the first exception raised by a
    task propagates to the caller.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as ex:
        futs = [ex.submit(t) for t in tasks]
        return [f.result() for f in futs]


def run_keyed(jobs: Dict[Hashable, Callable], max_workers: int = 4) -> Dict[Hashable, object]:
    """Like run_parallel, but keeps each result next to the key it was submitted under."""
    keys = list(jobs)
    results = run_parallel([jobs[k] for k in keys], max_workers=max_workers)
    return dict(zip(keys, results))
