"""Reads item move histories for the metrics run.

Two input formats are accepted:

* ``history``: ``{"projects": {"<label>": {"items": {"<id>": [[ts, stage], ...]}}}}``
* ``asana``: a snapshot written by ``asana fetch``; projects are matched to the
  configuration through their gid.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from domains.asana.asana_history_service import AsanaHistoryService
from domains.kanban.errors import FlowMetricsError, InvalidProjectConfig
from domains.kanban.project_config import ProjectConfig
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

INPUT_FORMATS = ("history", "asana")


@dataclass
class LoadedHistory:
    items_by_project: dict[str, dict] = field(default_factory=dict)
    names_by_project: dict[str, str] = field(default_factory=dict)
    errors_by_project: dict[str, FlowMetricsError] = field(default_factory=dict)


class HistoryLoader:
    def __init__(self):
        self.logger = LogManager.get_instance().get_logger("HistoryLoader")

    def load(self, file_path: str, input_format: str, projects: Mapping[str, ProjectConfig]) -> LoadedHistory:
        """
        Raises:
            FileNotFoundError: If the input file is missing.
            ValueError: If the format is unknown.
            InvalidProjectConfig: If a ``history`` file has no ``projects`` object.
                A single malformed project is recorded in ``errors_by_project`` instead.
            AsanaSnapshotError: If an ``asana`` snapshot is missing sections.
        """
        if input_format not in INPUT_FORMATS:
            raise ValueError(f"Unknown input format: {input_format}. Use one of {INPUT_FORMATS}")
        raw = JSONManager.read_json(file_path)
        self.logger.info(f"Loaded {input_format} input from {file_path}")
        if input_format == "asana":
            return self.from_asana(raw, projects)
        return self.from_history(raw, projects)

    def from_history(self, raw, projects: Mapping[str, ProjectConfig]) -> LoadedHistory:
        if not isinstance(raw, dict) or not isinstance(raw.get("projects"), dict):
            raise InvalidProjectConfig("History file must contain a 'projects' object")

        loaded = LoadedHistory()
        for label in projects:
            entry = raw["projects"].get(label)
            if entry is None:
                self.logger.warning(f"No history for project {label}")
                loaded.items_by_project[label] = {}
                continue
            items = entry.get("items") if isinstance(entry, dict) else None
            if not isinstance(items, dict):
                error = InvalidProjectConfig("Project history has no 'items' object", project=label)
                self.logger.error(str(error))
                loaded.errors_by_project[label] = error
                continue
            loaded.items_by_project[label] = items
        return loaded

    def from_asana(self, snapshot, projects: Mapping[str, ProjectConfig]) -> LoadedHistory:
        by_name = AsanaHistoryService().project_items(snapshot)
        names_by_gid = {project["gid"]: project["name"] for project in snapshot["projects"]}

        loaded = LoadedHistory()
        for label, project_config in projects.items():
            name = names_by_gid.get(project_config.gid)
            if name is None:
                self.logger.warning(f"Project {label} (gid={project_config.gid}) is not in the snapshot")
                loaded.items_by_project[label] = {}
                continue
            loaded.names_by_project[label] = name
            loaded.items_by_project[label] = by_name.get(name, {})
        return loaded
