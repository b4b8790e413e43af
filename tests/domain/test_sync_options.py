from __future__ import annotations

import pytest

from catalogsync.config import SyncConfig
from catalogsync.domain.diff import AbsentValuePolicy
from catalogsync.domain.model import Draft
from catalogsync.domain.sync import SyncOptions, SyncOptionsBuilder, SyncStatistics


def test_defaults() -> None:
    options = SyncOptions()

    assert options.batch_size == 50
    assert options.cache_size == 100_000
    assert options.lookup_page_size == 500
    assert options.parallelism == 5
    assert options.absent_value_policy is AbsentValuePolicy.SKIP
    assert options.error_callback is None
    assert options.before_create is None


def test_builder_sets_values_fluently() -> None:
    def before_create(draft: Draft) -> Draft:
        return draft

    options = (
        SyncOptionsBuilder()
        .batch_size(10)
        .parallelism(2)
        .cache_size(25)
        .cache_ttl_seconds(60)
        .absent_value_policy(AbsentValuePolicy.WARN)
        .before_create(before_create)
        .build()
    )

    assert options.batch_size == 10
    assert options.parallelism == 2
    assert options.cache_size == 25
    assert options.cache_ttl_seconds == 60
    assert options.absent_value_policy is AbsentValuePolicy.WARN
    assert options.before_create is before_create


def test_builder_starts_from_base_options() -> None:
    base = SyncOptions(batch_size=7)

    options = SyncOptionsBuilder(base).parallelism(1).build()

    assert options.batch_size == 7
    assert options.parallelism == 1
    assert base.parallelism == 5


@pytest.mark.parametrize("name", ["batch_size", "cache_size", "lookup_page_size", "parallelism"])
def test_non_positive_values_are_rejected(name: str) -> None:
    with pytest.raises(ValueError, match=name):
        SyncOptions(**{name: 0})  # pyright: ignore[reportArgumentType]


def test_from_config() -> None:
    options = SyncOptions.from_config(SyncConfig(batch_size=20, parallelism=3))

    assert options.batch_size == 20
    assert options.parallelism == 3


def test_statistics_report_and_unchanged() -> None:
    statistics = SyncStatistics(resource_name="categories", processed=5, created=1, updated=1)
    statistics.failed = 1
    statistics.missing_dependency = 1
    statistics.record_missing_dependency("root", "child")

    assert statistics.unchanged == 1
    assert statistics.missing_dependencies == {"root": {"child"}}
    assert statistics.report_message() == (
        "Summary: 5 categories were processed in total "
        "(1 created, 1 updated, 1 failed to sync and 1 with missing dependencies)."
    )


def test_statistics_timer_accumulates() -> None:
    statistics = SyncStatistics()

    statistics.stop_timer()
    assert statistics.latency_seconds == 0.0
    statistics.start_timer()
    statistics.stop_timer()

    assert statistics.latency_seconds >= 0.0
