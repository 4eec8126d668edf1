"""Basic usage examples for StyleProgress."""

from styleprogress import Stage
from styleprogress import create_standard_progress_manager
from styleprogress.core import ProgressSnapshot
from styleprogress.core import ProgressTracker
from styleprogress.core import format_time


def example_single_tracker():
    """Example: Track one unit of work with a callback."""
    def on_update(snapshot: ProgressSnapshot) -> None:
        print(f"{snapshot.id}: {snapshot.percentage:.1f}% - {snapshot.message}")

    tracker = ProgressTracker("fetch", total_steps=3, on_update=on_update)
    for i, repo in enumerate(["api", "web", "cli"], start=1):
        tracker.update_progress(i, f"Fetched {repo}")


def example_weighted_manager():
    """Example: Combine trackers on differently weighted stages."""
    manager = create_standard_progress_manager()

    fetch = manager.create_tracker("fetch", 4)
    fetch.set_stage(Stage.FETCHING_REPOSITORIES)
    fetch.update_progress(4, "All repositories fetched")

    analyze = manager.create_tracker("analyze", 20)
    analyze.set_stage(Stage.ANALYZING_CODE)
    analyze.update_progress(5, "Analyzing files")

    print(f"Overall: {manager.get_global_progress():.1f}%")
    for summary in manager.get_operations_summary():
        print(f"  {summary.id} [{summary.stage}] {summary.percentage:.0f}% "
              f"(~{format_time(summary.estimated_time_remaining)} left)")


def example_batch():
    """Example: A batch that cleans up its trackers once finished."""
    manager = create_standard_progress_manager()
    batch = manager.create_batch_operation("profile", [
        {"id": "fetch", "name": "Fetching repositories", "weight": 20, "total_steps": 2},
        {"id": "analyze", "name": "Analyzing code", "weight": 50, "total_steps": 4},
    ])

    batch.get_operation("fetch").update_progress(2, "Fetched")
    batch.complete_operation("fetch")
    batch.get_operation("analyze").update_progress(2, "Half analyzed")
    print(f"Batch: {batch.get_batch_progress():.1f}%")

    batch.get_operation("analyze").complete()
    batch.complete_operation("analyze")
    print(f"Complete: {batch.is_complete()}, live trackers: {len(manager.get_active_trackers())}")


if __name__ == '__main__':
    print("StyleProgress Examples")
    print("=" * 50)
    example_single_tracker()
    example_weighted_manager()
    example_batch()
