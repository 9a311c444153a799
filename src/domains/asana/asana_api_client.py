from datetime import datetime
from typing import Any

import requests

from domains.asana.errors import AsanaApiRequestError, AsanaAuthenticationError
from utils.http.rate_limited_client import RateLimitedHTTPClient
from utils.logging.logging_manager import LogManager

PAGE_LIMIT = 100


class AsanaApiClient:
    """
    Read-only Asana REST client returning plain dictionaries shaped like the stored snapshot.
    """

    def __init__(self, base_url: str, access_token: str | None, max_rps: float = 2.0, http_client=None):
        """
        Args:
            base_url (str): API root, e.g. ``https://app.asana.com/api/1.0``.
            access_token (str): Personal access token.
            max_rps (float): Request-per-second cap shared by all threads.
            http_client: Optional preconfigured client exposing ``get_json``.
        """
        if not access_token:
            raise AsanaAuthenticationError()
        self.logger = LogManager.get_instance().get_logger("AsanaApiClient")
        self.base_url = base_url.rstrip("/")
        self.http = http_client or RateLimitedHTTPClient(
            max_rps=max_rps, headers={"Authorization": f"Bearer {access_token}"}
        )

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any | None:
        url = f"{self.base_url}/{endpoint}"
        try:
            return self.http.get_json(url, params=params)
        except requests.RequestException as e:
            raise AsanaApiRequestError(endpoint=endpoint, params=params, error=str(e)) from e
        except ValueError as e:
            raise AsanaApiRequestError("Invalid JSON in response", endpoint=endpoint) from e

    def _get_data(self, endpoint: str, params: dict[str, Any] | None = None) -> dict | None:
        body = self._get(endpoint, params)
        if body is None:
            return None
        if not isinstance(body, dict) or "data" not in body:
            raise AsanaApiRequestError("Response has no 'data' member", endpoint=endpoint)
        return body["data"]

    def _get_pages(self, endpoint: str, params: dict[str, Any], missing_ok: bool = False) -> list[dict] | None:
        """Follow ``next_page.offset`` until the collection is exhausted.

        A collection that does not exist raises, or returns None with ``missing_ok``.
        """
        items: list[dict] = []
        offset = None
        while True:
            page_params = {**params, "limit": PAGE_LIMIT}
            if offset:
                page_params["offset"] = offset
            body = self._get(endpoint, page_params)
            if body is None:
                if missing_ok and offset is None:
                    return None
                raise AsanaApiRequestError("Collection not found", endpoint=endpoint)
            items.extend(body.get("data", []))
            next_page = body.get("next_page") or {}
            offset = next_page.get("offset")
            if not offset:
                return items

    def get_project(self, project_gid: str) -> dict:
        self.logger.debug(f"get_project: project={project_gid}")
        project = self._get_data(f"projects/{project_gid}", {"opt_fields": "name,created_at"})
        if project is None:
            raise AsanaApiRequestError("Project not found", project_gid=project_gid)
        return {"gid": project["gid"], "name": project["name"], "created_at": project.get("created_at")}

    def get_project_sections(self, project_gid: str) -> dict:
        self.logger.debug(f"get_project_sections: project={project_gid}")
        sections = self._get_pages(f"projects/{project_gid}/sections", {"opt_fields": "name"})
        return {
            "project_gid": project_gid,
            "sections": [{"gid": section["gid"], "name": section["name"]} for section in sections],
        }

    def get_project_task_gids(self, project_gid: str, completed_since: datetime) -> dict:
        """Tasks of a project that were still open at ``completed_since`` or later."""
        self.logger.debug(f"get_project_task_gids: project={project_gid}")
        tasks = self._get_pages(
            "tasks",
            {"project": project_gid, "completed_since": completed_since.isoformat(), "opt_fields": "gid"},
        )
        return {"project_gid": project_gid, "task_gids": [task["gid"] for task in tasks]}

    def get_task(self, task_gid: str) -> dict | None:
        self.logger.debug(f"get_task: task={task_gid}")
        return self._get_data(
            f"tasks/{task_gid}",
            {"opt_fields": "name,created_at,completed,completed_at,assignee.gid,memberships.section.gid"},
        )

    def get_task_stories(self, task_gid: str) -> dict | None:
        """Stories of a task; None when the task was deleted."""
        self.logger.debug(f"get_task_stories: task={task_gid}")
        stories = self._get_pages(
            f"tasks/{task_gid}/stories", {"opt_fields": "created_at,resource_subtype,text"}, missing_ok=True
        )
        if stories is None:
            return None
        return {"task_gid": task_gid, "stories": stories}

    def get_user(self, user_gid: str) -> dict:
        """User details; deleted or inaccessible users get a placeholder record."""
        self.logger.debug(f"get_user: user={user_gid}")
        user = self._get_data(f"users/{user_gid}", {"opt_fields": "name,email"})
        if user is None:
            return {"gid": user_gid, "name": f"MissingUser({user_gid})", "email": f"{user_gid}@nowhere.com"}
        return {"gid": user.get("gid", user_gid), "name": user.get("name", ""), "email": user.get("email", "")}
