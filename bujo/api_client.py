"""HTTP client for the BulletJournal REST API.

Every call returns a result dict instead of raising, so callers on the
Streamlit side can decide how to surface failures:

    {"ok": bool, "status": int, "url": str, "body": Any}
    {"ok": False, "error": str, "url": str}          # transport failure
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from bujo.config import BujoConfig
from bujo.models import ProjectItemType

logger = logging.getLogger(__name__)

Result = Dict[str, Any]


def describe_failure(result: Result) -> str:
    """Short human readable reason for a failed result."""
    if result.get("error"):
        return str(result["error"])
    status = result.get("status")
    body = result.get("body")
    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {status}: {body['message']}"
    return f"HTTP {status}"


class BujoApiClient:
    """Thin wrapper over the backend routes the web client uses."""

    def __init__(self, config: BujoConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        if self.config.username:
            headers["X-Forwarded-User"] = self.config.username
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Result:
        url = f"{self.config.api_base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._headers(),
                verify=self.config.verify_ssl,
                timeout=self.config.timeout_seconds,
                **kwargs,
            )
        except requests.exceptions.Timeout:
            logger.warning("%s %s timed out after %ss", method, url, self.config.timeout_seconds)
            return {"ok": False, "error": f"Timeout after {self.config.timeout_seconds}s", "url": url}
        except requests.exceptions.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            return {"ok": False, "error": f"Connection failed: {exc}", "url": url}

        content_type = resp.headers.get("content-type", "")
        body: Any = None
        if "application/json" in content_type:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
        elif resp.text:
            body = resp.text

        if not resp.ok:
            logger.warning("%s %s -> HTTP %s", method, url, resp.status_code)
        else:
            logger.debug("%s %s -> HTTP %s", method, url, resp.status_code)

        return {"ok": resp.ok, "status": resp.status_code, "url": url, "body": body}

    # ---------------- task lifecycle ----------------

    def complete_task(self, task_id: int) -> Result:
        return self._request("POST", f"/api/tasks/{task_id}/complete")

    def uncomplete_task(self, task_id: int) -> Result:
        return self._request("POST", f"/api/tasks/{task_id}/uncomplete")

    def delete_task(self, task_id: int) -> Result:
        return self._request("DELETE", f"/api/tasks/{task_id}")

    def delete_completed_task(self, task_id: int) -> Result:
        return self._request("DELETE", f"/api/completedTasks/{task_id}")

    # ---------------- account ----------------

    def fetch_myself(self, expand: bool = False) -> Result:
        return self._request("GET", "/api/myself", params={"expand": "true" if expand else "false"})

    def fetch_system_updates(self) -> Result:
        return self._request("GET", "/api/system/updates")

    def fetch_notifications(self) -> Result:
        return self._request("GET", "/api/notifications")

    def fetch_projects(self) -> Result:
        return self._request("GET", "/api/projects")

    # ---------------- task lists ----------------

    def fetch_task(self, task_id: int) -> Result:
        return self._request("GET", f"/api/tasks/{task_id}")

    def fetch_tasks(self, project_id: int) -> Result:
        return self._request("GET", f"/api/projects/{project_id}/tasks")

    def fetch_completed_tasks(self, project_id: int) -> Result:
        return self._request("GET", f"/api/projects/{project_id}/completedTasks")

    # ---------------- item modals ----------------

    def update_task(self, task_id: int, fields: Dict[str, Any]) -> Result:
        return self._request("PATCH", f"/api/tasks/{task_id}", json=fields)

    def move_item(self, item_type: ProjectItemType, item_id: int, target_project: int) -> Result:
        return self._request("POST", f"/api/{item_type.route}/{item_id}/move", json={"targetProject": target_project})

    def share_item(
        self,
        item_type: ProjectItemType,
        item_id: int,
        *,
        target_user: Optional[str] = None,
        target_group: Optional[int] = None,
        generate_link: bool = False,
    ) -> Result:
        payload = {"targetUser": target_user, "targetGroup": target_group, "generateLink": generate_link}
        return self._request("POST", f"/api/{item_type.route}/{item_id}/share", json=payload)
