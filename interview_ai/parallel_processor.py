import concurrent.futures
from typing import Any, Callable, Dict, List, Sequence, Tuple
import logging
import time

logger = logging.getLogger(__name__)

class ParallelProcessor:
    """Run independent per-item work on a thread pool, keeping input order."""

    def __init__(self, max_workers: int = 3):
        """Initialize with maximum number of worker threads."""
        self.max_workers = max_workers

    def map_ordered(self, items: Sequence[Any], process_func: Callable[[Any], Any]) -> Tuple[List[Any], Dict[str, Any]]:
        """
        Process items in parallel.

        Args:
            items: Items to process
            process_func: Function to process each item; exceptions propagate

        Returns:
            Tuple of (results in the same order as items, statistics dict)
        """
        start_time = time.time()
        results: List[Any] = [None] * len(items)

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {executor.submit(process_func, item): i for i, item in enumerate(items)}

            # Collect as they finish, store by position
            for future in concurrent.futures.as_completed(future_to_index):
                index = future_to_index[future]
                results[index] = future.result()
                logger.debug(f"Finished item {index + 1}/{len(items)}")

        stats = {
            'total_items': len(items),
            'processing_time': time.time() - start_time
        }
        logger.info(f"Processed {stats['total_items']} items in {stats['processing_time']:.2f}s")

        return results, stats
