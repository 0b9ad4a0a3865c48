# demandcv/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Iterable, Sequence

from demandcv.pipeline.parallel.types import ParallelKind
from demandcv import logs


class ParallelExecutor:
    """
    ParallelExecutor

    - thin ProcessPoolExecutor wrapper
    - results are returned in input order, whatever the completion order
    - the first failing item aborts the run (pending items are cancelled)
    - handler and items must be picklable when workers > 1
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[Any],
            handler: Callable[[Any], Any],
            max_workers: int | None = None,
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.info("[ParallelExecutor] no items to process")
            return []

        workers = ParallelExecutor._resolve_workers(items, max_workers)

        logs.info(
            f"[ParallelExecutor] start "
            f"kind={kind.value} total={len(items)} workers={workers}"
        )

        if workers == 1:
            return ParallelExecutor._run_sequential(items, handler)
        return ParallelExecutor._run_parallel(items, handler, workers)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: Sequence[Any], max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return max(1, min(cpu, len(items)))
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_sequential(
            items: list[Any],
            handler: Callable[[Any], Any],
    ) -> list[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list[Any],
            handler: Callable[[Any], Any],
            workers: int,
    ) -> list[Any]:
        results: list[Any] = [None] * len(items)

        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(handler, item): pos
                for pos, item in enumerate(items)
            }
            try:
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
            except Exception:
                for fut in futures:
                    fut.cancel()
                raise

        return results
