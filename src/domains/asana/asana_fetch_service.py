from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

from domains.asana.asana_api_client import AsanaApiClient
from domains.kanban.errors import FlowMetricsError
from domains.kanban.project_config import ProjectConfig
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager


class AsanaFetchService:
    """Downloads everything the metrics run needs from Asana into one JSON snapshot.

    Snapshot layout::

        {
            "users": [...], "projects": [...], "project_sections": [...],
            "project_task_gids": [...], "tasks": [...], "task_stories": [...]
        }
    """

    def __init__(self, client: AsanaApiClient, max_workers: int = 8):
        self.client = client
        self.max_workers = max_workers
        self.logger = LogManager.get_instance().get_logger("AsanaFetchService")

    def fetch(self, projects: Mapping[str, ProjectConfig]) -> dict:
        """Fetch projects, sections, task ids, tasks, stories and assignees.

        Projects whose horizon cannot be parsed are skipped with an error log.
        """
        targets = []
        for label, project_config in projects.items():
            if not project_config.gid:
                self.logger.error(f"Project {label} has no gid; skipping fetch")
                continue
            try:
                settings = project_config.to_settings(label)
            except FlowMetricsError as e:
                self.logger.error(f"Project {label} skipped: {e}")
                continue
            targets.append((project_config.gid, settings.horizon))

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            project_futures = [executor.submit(self.client.get_project, gid) for gid, _ in targets]
            section_futures = [executor.submit(self.client.get_project_sections, gid) for gid, _ in targets]
            task_gid_futures = [
                executor.submit(self.client.get_project_task_gids, gid, horizon) for gid, horizon in targets
            ]
            asana_projects = [future.result() for future in project_futures]
            project_sections = [future.result() for future in section_futures]
            project_task_gids = [future.result() for future in task_gid_futures]

            task_gids = list(dict.fromkeys(gid for entry in project_task_gids for gid in entry["task_gids"]))
            self.logger.info(f"Fetching {len(task_gids)} tasks from {len(targets)} projects")

            task_futures = [executor.submit(self.client.get_task, gid) for gid in task_gids]
            story_futures = [executor.submit(self.client.get_task_stories, gid) for gid in task_gids]
            tasks = []
            task_stories = []
            for gid, task_future, story_future in zip(task_gids, task_futures, story_futures):
                task = task_future.result()
                stories = story_future.result()
                # Either lookup can be the one that notices the deletion
                if task is None or stories is None:
                    self.logger.warning(f"Task {gid} disappeared while fetching; skipping")
                    continue
                tasks.append(task)
                task_stories.append(stories)

            user_gids = sorted({(task.get("assignee") or {}).get("gid") for task in tasks} - {None})
            users = list(executor.map(self.client.get_user, user_gids))

        return {
            "users": users,
            "projects": asana_projects,
            "project_sections": project_sections,
            "project_task_gids": project_task_gids,
            "tasks": tasks,
            "task_stories": task_stories,
        }

    def fetch_to_file(self, projects: Mapping[str, ProjectConfig], output_file: str) -> dict:
        snapshot = self.fetch(projects)
        JSONManager.write_json(snapshot, output_file, backup=True)
        self.logger.info(f"Wrote Asana snapshot to {output_file}")
        return snapshot
