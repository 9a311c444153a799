import math
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime

from domains.kanban.errors import EmptyProjectData, FlowMetricsError, MalformedEvent, UnknownStage
from domains.kanban.event_normalizer import EventNormalizer
from domains.kanban.interval_reconstructor import IntervalReconstructor
from domains.kanban.models import ItemTimeline, ProjectSettings, StageSnapshot, WeeklyMetrics
from domains.kanban.project_config import ProjectConfig
from domains.kanban.series_assembler import assemble_series
from domains.kanban.snapshot_sampler import SnapshotSampler
from domains.kanban.stage_aggregator import StageAggregator
from domains.kanban.throughput_counter import ThroughputCounter
from domains.kanban.week_grid import build_week_grid
from utils.logging.logging_manager import LogManager


@dataclass(frozen=True)
class PartitionResult:
    """What one worker hands back for its slice of items."""

    timelines: tuple[ItemTimeline, ...]
    snapshots: tuple[StageSnapshot, ...]
    malformed: tuple[MalformedEvent, ...]


@dataclass
class ProjectReport:
    """Outcome of one configured project: its series, or the error that stopped it."""

    label: str
    name: str
    cfd_states: tuple[str, ...] = ()
    done_states: tuple[str, ...] = ()
    metrics: list[WeeklyMetrics] = field(default_factory=list)
    item_count: int = 0
    skipped_items: int = 0
    warnings: list[FlowMetricsError] = field(default_factory=list)
    error: FlowMetricsError | None = None
    output_file: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_summary(self) -> dict:
        return {
            "label": self.label,
            "name": self.name,
            "succeeded": self.succeeded,
            "weeks": len(self.metrics),
            "items": self.item_count,
            "skipped_items": self.skipped_items,
            "warnings": [str(warning) for warning in self.warnings],
            "error": str(self.error) if self.error else None,
            "output_file": self.output_file,
        }


class FlowMetricsService:
    """Turns per-item move histories into weekly cumulative-flow, age and throughput series.

    Per-item work (normalize, reconstruct, sample) fans out over a thread pool in
    partitions; the cross-item reductions run once every partition is back.
    """

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.max_workers = max_workers
        self.normalizer = EventNormalizer()
        self.reconstructor = IntervalReconstructor()
        self.logger = LogManager.get_instance().get_logger("FlowMetricsService")

    def run(
        self,
        projects: Mapping[str, ProjectConfig],
        items_by_project: Mapping[str, Mapping[str, Iterable]],
        now: datetime | None = None,
        project_errors: Mapping[str, FlowMetricsError] | None = None,
    ) -> list[ProjectReport]:
        """Compute every configured project independently.

        A project-level error (bad horizon, no tracked stages, or one reported by the
        loader in ``project_errors``) is recorded on that project's report; the
        remaining projects are still processed.
        """
        now = now or datetime.now(UTC)
        project_errors = project_errors or {}
        reports = []
        for label, project_config in projects.items():
            self.logger.info(f"Processing: {label}")
            error = project_errors.get(label)
            if error is None:
                try:
                    settings = project_config.to_settings(label)
                    reports.append(self.compute_project(settings, items_by_project.get(label, {}), now))
                    continue
                except FlowMetricsError as e:
                    error = e
            self.logger.error(f"Project {label} skipped: {error}")
            reports.append(ProjectReport(label=label, name=project_config.name or label, error=error))
        return reports

    def compute_project(
        self, settings: ProjectSettings, items: Mapping[str, Iterable], now: datetime
    ) -> ProjectReport:
        """Weekly series of one project.

        Raises:
            InvalidHorizon: If the horizon lies after ``now``.
        """
        grid = build_week_grid(settings.horizon, now, settings.align_weeks)
        sampler = SnapshotSampler(grid, settings.horizon, settings.tracked_states)

        results = self._fan_out(list(items.items()), sampler)

        timelines: list[ItemTimeline] = []
        snapshots: list[StageSnapshot] = []
        malformed: list[MalformedEvent] = []
        for result in results:
            timelines.extend(result.timelines)
            snapshots.extend(result.snapshots)
            malformed.extend(result.malformed)

        report = ProjectReport(
            label=settings.label,
            name=settings.name,
            cfd_states=settings.cfd_states,
            done_states=tuple(sorted(settings.done_states)),
            item_count=len(timelines),
            skipped_items=len(malformed),
        )
        for error in malformed:
            self.logger.warning(f"[{settings.label}] Skipping item: {error}")
        if malformed:
            self.logger.warning(f"[{settings.label}] {len(malformed)} item(s) skipped due to malformed events")

        report.warnings.extend(self._check_data(settings, timelines))

        stage_metrics = StageAggregator(settings.cfd_states).aggregate(grid, snapshots)
        throughput = ThroughputCounter(settings.done_states).count(grid, timelines)
        report.metrics = assemble_series(grid, settings.cfd_states, stage_metrics, throughput)

        self.logger.info(
            f"[{settings.label}] {len(report.metrics)} weeks from {len(timelines)} items "
            f"({len(snapshots)} snapshots)"
        )
        return report

    def _fan_out(self, entries: list[tuple[str, Iterable]], sampler: SnapshotSampler) -> list[PartitionResult]:
        if not entries:
            return []
        workers = min(self.max_workers, len(entries))
        if workers == 1:
            return [self._process_partition(entries, sampler)]

        size = math.ceil(len(entries) / workers)
        partitions = [entries[start : start + size] for start in range(0, len(entries), size)]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._process_partition, partition, sampler) for partition in partitions]
            # Collected in submission order so merged output does not depend on scheduling
            return [future.result() for future in futures]

    def _process_partition(self, entries: list[tuple[str, Iterable]], sampler: SnapshotSampler) -> PartitionResult:
        timelines = []
        snapshots = []
        malformed = []
        for item_id, raw_events in entries:
            try:
                events = self.normalizer.normalize(item_id, raw_events)
            except MalformedEvent as e:
                malformed.append(e)
                continue
            if not events:
                continue
            timeline = self.reconstructor.reconstruct(item_id, events)
            timelines.append(timeline)
            snapshots.extend(sampler.sample(timeline))
        return PartitionResult(tuple(timelines), tuple(snapshots), tuple(malformed))

    def _check_data(self, settings: ProjectSettings, timelines: list[ItemTimeline]) -> list[FlowMetricsError]:
        warnings: list[FlowMetricsError] = []
        if not timelines:
            warnings.append(EmptyProjectData(project=settings.label))
            self.logger.warning(f"[{settings.label}] No items; emitting an all-zero series")
            return warnings

        observed = {event.stage for timeline in timelines for event in timeline.events}
        configured = list(settings.cfd_states) + sorted(settings.done_states - settings.tracked_states)
        for stage in configured:
            if stage not in observed:
                warnings.append(UnknownStage(project=settings.label, stage=stage))
                self.logger.warning(f"[{settings.label}] Configured stage '{stage}' never appears in any event")
        return warnings
