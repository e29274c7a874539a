"""Report Pipeline - thin orchestration for CSV report generation.

Fetches time entries from the entry source, runs the synchronous
aggregation and hands the rows to the report sink. Failures from the
source or the sink propagate to the caller unchanged.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.settings import get_settings
from ..core.time import format_utc_iso8601
from ..observability.loguru_config import get_logger, timing_context
from ..reports.aggregator import aggregate
from ..reports.contracts import SystemClock
from ..reports.export import CsvReportExporter, build_report_filename
from ..reports.modes import ReportMode
from ..reports.window import ReportWindow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config.settings import Settings
    from ..reports.aggregator import ReportRow
    from ..reports.contracts import Clock, EntrySource, ReportSink

__all__ = [
    "ReportPipeline",
    "ReportPipelineConfig",
    "ReportPipelineResult",
    "create_report_pipeline",
]

logger = get_logger("pipeline")


@dataclass
class ReportPipelineConfig:
    """Configuration for report pipeline."""

    reports_dir: Path = Path("reports")
    default_timezone_offset: int = 0
    clamp_negative_durations: bool = False


@dataclass
class ReportPipelineResult:
    """Result of one report run."""

    path: str
    mode: ReportMode
    entries_count: int
    rows_count: int
    duration_ms: float
    trace_id: str
    rows: list[ReportRow] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "mode": self.mode.value,
            "entries_count": self.entries_count,
            "rows_count": self.rows_count,
            "duration_ms": round(self.duration_ms, 3),
            "trace_id": self.trace_id,
        }


class ReportPipeline:
    """Fetch → aggregate → export orchestration for one report request.

    Each call to :meth:`export_report` builds its own window and
    aggregation state; the pipeline object holds only collaborators and
    configuration, so it can serve concurrent requests.

    Example:
        >>> pipeline = create_report_pipeline(load_settings())
        >>> result = asyncio.run(
        ...     pipeline.export_report("team-1", [], [], "2025-10-01T00:00:00Z", "2025-10-31T23:59:59Z")
        ... )
        >>> result.path
        'reports/report_2025-11-01_09-15.csv'
    """

    def __init__(
        self,
        config: ReportPipelineConfig,
        *,
        source: EntrySource,
        sink: ReportSink | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize report pipeline.

        Parameters
        ----------
        config
            Pipeline configuration
        source
            Entry source (e.g. GraphQLEntrySource)
        sink
            Report sink (default: CSV files under ``config.reports_dir``)
        clock
            Clock for filename stamps (default: system UTC clock)
        """
        self.config = config
        self.source = source
        self.sink = sink or CsvReportExporter(config.reports_dir)
        self.clock = clock or SystemClock()

    async def export_report(
        self,
        team_id: str,
        user_emails: Sequence[str],
        project_names: Sequence[str],
        start_date: str,
        end_date: str,
        timezone_offset: int | None = None,
        detailed: bool = True,
    ) -> ReportPipelineResult:
        """Generate a report and export it.

        Parameters
        ----------
        team_id
            Team whose entries are reported
        user_emails
            Restrict to these users (empty = all)
        project_names
            Restrict to these projects (empty = all)
        start_date
            Window start (ISO-8601)
        end_date
            Window end (ISO-8601)
        timezone_offset
            Display offset in minutes east of UTC (default from config)
        detailed
            Detailed report if True, general report otherwise

        Returns
        -------
        ReportPipelineResult
            Written path and run statistics

        Raises
        ------
        ValueError
            If the window dates are not ISO-8601
        MalformedEntryError
            If the source returned an entry without project or user data
        """
        trace_id = str(uuid.uuid4())
        started = time.perf_counter()
        mode = ReportMode.from_flag(detailed)
        offset = self.config.default_timezone_offset if timezone_offset is None else timezone_offset
        window = ReportWindow.from_strings(start_date, end_date, offset)

        logger.info(
            "Report requested",
            trace_id=trace_id,
            team_id=team_id,
            mode=mode.value,
            window_start=format_utc_iso8601(window.start),
            window_end=format_utc_iso8601(window.end),
            timezone_offset=offset,
        )

        try:
            with timing_context("fetch_entries", component="pipeline", trace_id=trace_id) as ctx:
                entries = await self.source.fetch_time_entries(
                    team_id, user_emails, project_names, start_date, end_date
                )
                ctx["entries"] = len(entries)

            with timing_context("aggregate", component="pipeline", trace_id=trace_id) as ctx:
                rows = aggregate(
                    entries,
                    window,
                    mode,
                    clamp_negative=self.config.clamp_negative_durations,
                )
                ctx["rows"] = len(rows)

            with timing_context("export", component="pipeline", trace_id=trace_id):
                filename = build_report_filename(self.clock.now(), offset)
                path = self.sink.export_rows(rows, filename, mode)
        except Exception as exc:
            logger.error(
                "Report failed",
                trace_id=trace_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        result = ReportPipelineResult(
            path=path,
            mode=mode,
            entries_count=len(entries),
            rows_count=len(rows),
            duration_ms=duration_ms,
            trace_id=trace_id,
            rows=rows,
        )

        logger.info("Report completed", **result.to_dict())
        return result


def create_report_pipeline(
    settings: Settings | None = None,
    *,
    source: EntrySource | None = None,
    sink: ReportSink | None = None,
    clock: Clock | None = None,
) -> ReportPipeline:
    """Create a report pipeline from settings.

    Parameters
    ----------
    settings
        Settings to build from (default: the settings loaded by
        :func:`~timereport.config.settings.load_settings`)
    source
        Entry source override (default: GraphQL source from settings)
    sink
        Report sink override
    clock
        Clock override

    Returns
    -------
    ReportPipeline
        Configured pipeline

    Raises
    ------
    ConfigError
        If no settings are given and none have been loaded
    """
    if settings is None:
        settings = get_settings()

    if source is None:
        from ..adapters.graphql import GraphQLEntrySource

        source = GraphQLEntrySource(
            settings.graphql_url,
            admin_secret=settings.graphql_admin_secret,
            timeout=settings.graphql_timeout,
        )

    config = ReportPipelineConfig(
        reports_dir=settings.reports_dir,
        default_timezone_offset=settings.default_timezone_offset,
        clamp_negative_durations=settings.clamp_negative_durations,
    )
    return ReportPipeline(config, source=source, sink=sink, clock=clock)
