"""
Workload partitioning for stage workers.

Each worker of a stage owns one contiguous index range. Ranges are disjoint
by construction, so workers never need a shared counter or lock to assign
primary keys.
"""


def partition(total: int, workers: int) -> list[range]:
    """
    Split `total` items across `workers` contiguous, gap-free ranges.

    When total >= workers every range holds total // workers items and the
    final range also absorbs the remainder. When total < workers the first
    `total` workers receive one item each and the rest receive empty ranges.

    Args:
        total: Number of items in the stage
        workers: Pool width

    Returns:
        Exactly `workers` ranges, sorted, whose union is range(total)

    Raises:
        ValueError: If workers <= 0 or total < 0

    Examples:
        >>> partition(10, 3)
        [range(0, 3), range(3, 6), range(6, 10)]
        >>> partition(2, 4)
        [range(0, 1), range(1, 2), range(2, 2), range(2, 2)]
    """
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")
    if total < 0:
        raise ValueError(f"total must be non-negative, got {total}")

    if total < workers:
        return [range(min(i, total), min(i + 1, total)) for i in range(workers)]

    chunk = total // workers
    ranges = []
    for worker_id in range(workers):
        start = worker_id * chunk
        end = total if worker_id == workers - 1 else start + chunk
        ranges.append(range(start, end))
    return ranges
