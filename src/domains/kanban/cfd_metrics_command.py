import sys
from argparse import ArgumentParser, Namespace
from datetime import UTC, datetime

from config import Config
from domains.kanban import series_codec
from domains.kanban.flow_metrics_service import FlowMetricsService, ProjectReport
from domains.kanban.gnuplot_writer import GnuplotScriptWriter
from domains.kanban.history_loader import INPUT_FORMATS, HistoryLoader
from domains.kanban.project_config import load_metrics_config
from domains.kanban.timestamps import format_timestamp, parse_timestamp
from utils.command.base_command import BaseCommand
from utils.env_loader import ensure_env_loaded
from utils.error.base_custom_error import BaseCustomError
from utils.logging.logging_manager import LogManager
from utils.output_manager import OutputManager


class CfdMetricsCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "cfd-metrics"

    @staticmethod
    def get_description() -> str:
        return "Compute weekly cumulative flow, P90 stage age and throughput per project."

    @staticmethod
    def get_help() -> str:
        return (
            "Reads item move histories, samples every item's stage at each week boundary "
            "since the project horizon and writes one CSV series plus one gnuplot script "
            "per project.\n\n"
            "Examples:\n"
            "  python src/main.py kanban cfd-metrics --config-file projects.json --input-file asana_data.json\n"
            "  python src/main.py kanban cfd-metrics --config-file projects.json --input-file history.json "
            "--input-format history --now 2024-06-30T00:00:00Z"
        )

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        parser.add_argument("--config-file", required=True, help="Project configuration JSON file")
        parser.add_argument("--input-file", required=True, help="Asana snapshot or history JSON file")
        parser.add_argument(
            "--input-format",
            choices=list(INPUT_FORMATS),
            default="asana",
            help="Format of --input-file (default: asana)",
        )
        parser.add_argument("--output-dir", help="Folder for series and scripts (default: OUTPUT_DIR)")
        parser.add_argument("--now", help="Reference time (ISO-8601, default: current UTC time)")
        parser.add_argument(
            "--max-workers",
            type=int,
            default=None,
            help="Worker threads for per-item processing (default: METRICS_MAX_WORKERS)",
        )
        parser.add_argument("--no-gnuplot", action="store_true", help="Do not write gnuplot scripts")

    @staticmethod
    def main(args: Namespace):
        ensure_env_loaded()
        logger = LogManager.get_instance().get_logger("CfdMetricsCommand")

        try:
            now = parse_timestamp(args.now) if args.now else datetime.now(UTC)
        except ValueError as e:
            logger.error(f"Invalid --now value: {e}")
            sys.exit(1)

        try:
            metrics_config = load_metrics_config(args.config_file)
            history = HistoryLoader().load(args.input_file, args.input_format, metrics_config.projects)
        except (FileNotFoundError, ValueError, BaseCustomError) as e:
            logger.error(f"Failed to load inputs: {e}")
            sys.exit(1)

        projects = {
            label: project_config.model_copy(update={"name": history.names_by_project[label]})
            if label in history.names_by_project and not project_config.name
            else project_config
            for label, project_config in metrics_config.projects.items()
        }

        service = FlowMetricsService(max_workers=args.max_workers or Config.METRICS_MAX_WORKERS)
        reports = service.run(
            projects, history.items_by_project, now=now, project_errors=history.errors_by_project
        )

        output_dir = OutputManager.get_output_root(args.output_dir)
        for report in reports:
            if report.succeeded:
                CfdMetricsCommand._write_project(report, output_dir, not args.no_gnuplot)
            CfdMetricsCommand._log_report(logger, report)

        summary = {
            "generated_at": format_timestamp(now),
            "input_file": args.input_file,
            "projects": [report.to_summary() for report in reports],
        }
        summary_path = OutputManager.save_json_report(summary, "run_summary", output_dir)
        logger.info(f"Run summary saved to {summary_path}")

        failed = [report.label for report in reports if not report.succeeded]
        if failed:
            logger.error(f"{len(failed)} project(s) failed: {', '.join(failed)}")
            sys.exit(1)

    @staticmethod
    def _write_project(report: ProjectReport, output_dir: str, with_gnuplot: bool) -> None:
        data_path = OutputManager.save_text_report(
            series_codec.dumps(report.metrics, report.cfd_states), f"{report.label}_metrics", "csv", output_dir
        )
        if with_gnuplot:
            script = GnuplotScriptWriter().render(
                label=report.label,
                title=report.name,
                data_file_name=f"{report.label}_metrics.csv",
                cfd_states=report.cfd_states,
                done_states=report.done_states,
            )
            OutputManager.save_text_report(script, report.label, "gnuplot", output_dir)
        report.output_file = data_path

    @staticmethod
    def _log_report(logger, report: ProjectReport) -> None:
        if not report.succeeded:
            logger.error(f"[{report.label}] FAILED: {report.error}")
            return
        logger.info(
            f"[{report.label}] {report.name}: {len(report.metrics)} weeks, {report.item_count} items, "
            f"{report.skipped_items} skipped -> {report.output_file}"
        )
        for warning in report.warnings:
            logger.warning(f"[{report.label}] {warning}")
