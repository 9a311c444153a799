import re
from collections import defaultdict

from domains.asana.errors import AsanaSnapshotError
from utils.logging.logging_manager import LogManager

SNAPSHOT_KEYS = ("users", "projects", "project_sections", "project_task_gids", "tasks", "task_stories")

SECTION_CHANGED_PATTERN = re.compile(r'^moved this Task from "([^"]+?)" to "([^"]+?)" in (.+)$')


def parse_section_changed(text: str) -> tuple[str, str, str] | None:
    """Split a ``section_changed`` story text into (from section, to section, project name)."""
    match = SECTION_CHANGED_PATTERN.match(text or "")
    if not match:
        return None
    return match.group(1), match.group(2), match.group(3)


class AsanaHistoryService:
    """
    Rebuilds per-task section histories from a stored Asana snapshot.

    Asana has no section history endpoint; the moves are recovered from the
    ``section_changed`` stories attached to each task.
    """

    def __init__(self):
        self.logger = LogManager.get_instance().get_logger("AsanaHistoryService")

    def project_items(self, snapshot: dict) -> dict[str, dict[str, list[tuple[str, str]]]]:
        """
        Move events per project name and task gid.

        Args:
            snapshot (dict): Content written by ``AsanaFetchService``.

        Returns:
            dict: ``{project_name: {task_gid: [(timestamp, section), ...]}}``.
                Timestamps are left as the ISO strings found in the snapshot.

        Raises:
            AsanaSnapshotError: If a required section of the snapshot is missing.
        """
        self._validate(snapshot)

        project_names = {project["gid"]: project["name"] for project in snapshot["projects"]}
        section_projects = {}
        section_names = {}
        for entry in snapshot["project_sections"]:
            for section in entry.get("sections", []):
                section_projects[section["gid"]] = entry["project_gid"]
                section_names[section["gid"]] = section["name"]

        tasks = {task.get("gid"): task for task in snapshot["tasks"]}
        known_projects = set(project_names.values())
        items: dict[str, dict[str, list[tuple[str, str]]]] = defaultdict(dict)

        for entry in snapshot["task_stories"]:
            task_gid = entry.get("task_gid")
            task = tasks.get(task_gid)
            if task is None:
                self.logger.warning(f"Stories for unknown task {task_gid}; skipping")
                continue
            created_at = task.get("created_at")
            if not created_at:
                self.logger.warning(f"Task {task_gid} has no created_at; skipping")
                continue

            for story in entry.get("stories", []):
                if story.get("resource_subtype") != "section_changed":
                    continue
                parsed = parse_section_changed(story.get("text", ""))
                if parsed is None:
                    self.logger.warning(f"Task {task_gid}: unrecognised section change text {story.get('text')!r}")
                    continue
                from_section, to_section, project_name = parsed
                if project_name not in known_projects:
                    continue
                if not story.get("created_at"):
                    self.logger.warning(f"Task {task_gid}: section change without created_at; skipping")
                    continue
                events = items[project_name].setdefault(task_gid, [])
                if not events:
                    events.append((created_at, from_section))
                events.append((story["created_at"], to_section))

            for project_name, section_name in self._current_sections(
                task, section_projects, section_names, project_names
            ).items():
                events = items[project_name].setdefault(task_gid, [])
                if not events:
                    events.append((created_at, section_name))

        for project_name, project_items in items.items():
            self.logger.debug(f"{project_name}: {len(project_items)} tasks with history")
        return dict(items)

    @staticmethod
    def _current_sections(task: dict, section_projects: dict, section_names: dict, project_names: dict) -> dict:
        # Memberships cover every project the task belongs to, not only the fetched ones
        current = {}
        for membership in task.get("memberships", []):
            section_gid = (membership.get("section") or {}).get("gid")
            project_gid = section_projects.get(section_gid)
            if project_gid is None or project_gid not in project_names:
                continue
            current[project_names[project_gid]] = section_names[section_gid]
        return current

    @staticmethod
    def _validate(snapshot) -> None:
        if not isinstance(snapshot, dict):
            raise AsanaSnapshotError("Snapshot must be a JSON object")
        missing = [key for key in SNAPSHOT_KEYS if key not in snapshot]
        if missing:
            raise AsanaSnapshotError(missing=", ".join(missing))
