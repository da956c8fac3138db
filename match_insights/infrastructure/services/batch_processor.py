import logging
import concurrent.futures
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar
import multiprocessing

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

EXECUTOR_KINDS = ("thread", "process")


@dataclass
class TaskOutcome(Generic[R]):
    """Result of one task: either a value or the exception it raised."""
    index: int
    value: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchProcessor:
    """
    Service to run independent per-item tasks, sequentially or in parallel.

    Outcomes always come back in input order, and a task that raises never
    affects the others.
    """

    def __init__(self, max_workers: Optional[int] = 1, executor_kind: str = "thread"):
        if executor_kind not in EXECUTOR_KINDS:
            raise ValueError(f"Unknown executor kind '{executor_kind}', expected one of {EXECUTOR_KINDS}")
        # None means one worker per CPU
        self.max_workers = max_workers if max_workers is not None else multiprocessing.cpu_count()
        self.executor_kind = executor_kind
        logger.info(f"BatchProcessor initialized with {self.max_workers} {executor_kind} workers")

    def _create_executor(self) -> concurrent.futures.Executor:
        if self.executor_kind == "process":
            return concurrent.futures.ProcessPoolExecutor(max_workers=self.max_workers)
        return concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers)

    def run(self, task: Callable[[T], R], items: Sequence[T]) -> List[TaskOutcome[R]]:
        """
        Apply task to every item.

        Args:
            task: Callable run once per item (must pickle for process pools)
            items: Inputs

        Returns:
            One TaskOutcome per item, in input order
        """
        items = list(items)
        if not items:
            return []

        if self.max_workers <= 1 or len(items) == 1:
            return [self._run_inline(task, i, item) for i, item in enumerate(items)]

        outcomes: List[Optional[TaskOutcome[R]]] = [None] * len(items)
        with self._create_executor() as executor:
            futures = {executor.submit(task, item): i for i, item in enumerate(items)}
            for future in concurrent.futures.as_completed(futures):
                i = futures[future]
                try:
                    outcomes[i] = TaskOutcome(i, value=future.result())
                except Exception as e:
                    outcomes[i] = TaskOutcome(i, error=e)
        return outcomes

    @staticmethod
    def _run_inline(task: Callable[[T], R], index: int, item: T) -> TaskOutcome[R]:
        try:
            return TaskOutcome(index, value=task(item))
        except Exception as e:
            return TaskOutcome(index, error=e)
