"""Project configuration file.

    {
        "projects": {
            "<label>": {
                "gid": "1200000000000000",
                "horizon": "2024-01-01T00:00:00Z",
                "cfd_states": ["Backlog", "Doing", "Review"],
                "done_states": ["Done"],
                "align_weeks": false
            }
        }
    }

``horizon`` is kept as given and parsed per project, so one bad horizon only
fails that project.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from domains.kanban.errors import InvalidHorizon, InvalidProjectConfig
from domains.kanban.models import ProjectSettings
from domains.kanban.timestamps import parse_timestamp
from utils.data.json_manager import JSONManager


class ProjectConfig(BaseModel):
    """Settings of one board as written in the configuration file."""

    gid: str = ""
    name: str = ""
    horizon: Any = None
    cfd_states: list[str] = Field(default_factory=list)
    done_states: list[str] = Field(default_factory=list)
    align_weeks: bool = False

    def to_settings(self, label: str) -> ProjectSettings:
        """Validate the per-project parts and build engine settings.

        Raises:
            InvalidHorizon: If the horizon is missing or unparseable.
            InvalidProjectConfig: If no tracked stages are configured.
        """
        try:
            horizon = parse_timestamp(self.horizon)
        except ValueError as e:
            raise InvalidHorizon("Horizon is not a valid timestamp", project=label, horizon=self.horizon) from e

        if not self.cfd_states:
            raise InvalidProjectConfig("No tracked stages (cfd_states) configured", project=label)

        return ProjectSettings(
            label=label,
            name=self.name or label,
            horizon=horizon,
            cfd_states=tuple(dict.fromkeys(self.cfd_states)),
            done_states=frozenset(self.done_states),
            align_weeks=self.align_weeks,
        )


class MetricsConfig(BaseModel):
    """Top-level configuration: projects keyed by the label used in output file names."""

    projects: dict[str, ProjectConfig]


def load_metrics_config(file_path: str) -> MetricsConfig:
    """Read and validate the configuration file.

    Raises:
        FileNotFoundError: If the file is missing.
        InvalidProjectConfig: If the file does not match the expected structure.
    """
    raw = JSONManager.read_json(file_path)
    try:
        return MetricsConfig.model_validate(raw)
    except ValidationError as e:
        raise InvalidProjectConfig("Configuration file is invalid", file=file_path, errors=e.error_count()) from e
