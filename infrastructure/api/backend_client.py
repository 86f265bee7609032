import logging
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"


class ApiError(Exception):
    pass


class HttpError(ApiError):
    """Non-success response from the backend."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"HttpError(status={self.status}, message={self.message!r})"


class AuthRequiredError(ApiError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class BackendUnavailableError(ApiError):
    pass


class BackendClient:
    """
    Thin wrapper over the TrackHive REST backend.
    One method per backend capability; no retries and no caching.
    """

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        *,
        auth_required: bool = True,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {}
        if auth_required:
            if not token:
                raise AuthRequiredError()
            headers["Authorization"] = f"Bearer {token}"

        url = f"{self.base_url}{path}"
        try:
            resp = requests.request(
                method,
                url,
                headers=headers,
                json=json,
                data=data,
                files=files,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"❌ Network error on {method} {path}: {e}")
            raise BackendUnavailableError(f"Backend unreachable: {e}") from e

        return self._handle_response(resp, method, path)

    @staticmethod
    def _handle_response(resp: requests.Response, method: str, path: str) -> Any:
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            message = message or resp.reason or f"HTTP {resp.status_code}"
            log.warning(f"⚠️ {method} {path} failed: HTTP {resp.status_code} {message}")
            raise HttpError(resp.status_code, message)

        # Empty 2xx bodies (204, empty 200) are a valid "nothing to report".
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    @staticmethod
    def _has_image_file(payload: Dict[str, Any]) -> bool:
        image = payload.get("image")
        return image is not None and not isinstance(image, str)

    def _send_employee(self, method: str, path: str, employee_data: Dict[str, Any], token: Optional[str]) -> Any:
        if self._has_image_file(employee_data):
            fields = {k: v for k, v in employee_data.items() if k != "image"}
            return self._request(method, path, token, data=fields, files={"image": employee_data["image"]})
        return self._request(method, path, token, json=employee_data)

    # --- auth ---
    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/login", auth_required=False, json={"email": email, "password": password})

    def signup(self, user_data: Dict[str, Any], password: Optional[str] = None) -> Dict[str, Any]:
        payload = {**user_data, "password": password or user_data.get("password")}
        return self._request("POST", "/auth/signup", auth_required=False, json=payload)

    def get_current_user(self, token: Optional[str]) -> Dict[str, Any]:
        return self._request("GET", "/auth/me", token)

    def logout(self, token: Optional[str]) -> Any:
        return self._request("POST", "/auth/logout", token)

    # --- employees ---
    def get_employees(self, token: Optional[str]) -> Any:
        return self._request("GET", "/employees", token)

    def get_employee(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("GET", f"/employees/{employee_id}", token)

    def get_current_employee(self, token: Optional[str]) -> Any:
        return self._request("GET", "/employees/me", token)

    def add_employee(self, employee_data: Dict[str, Any], token: Optional[str]) -> Any:
        return self._send_employee("POST", "/employees", employee_data, token)

    def update_employee(self, employee_id: str, employee_data: Dict[str, Any], token: Optional[str]) -> Any:
        return self._send_employee("PUT", f"/employees/{employee_id}", employee_data, token)

    def delete_employee(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("DELETE", f"/employees/{employee_id}", token)

    # --- attendance ---
    def get_attendance(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("GET", f"/attendance/{employee_id}", token)

    def check_in(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("POST", "/attendance/check-in", token, json={"employeeId": employee_id})

    def check_out(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("POST", "/attendance/check-out", token, json={"employeeId": employee_id})

    def get_activities(self, employee_id: str, token: Optional[str]) -> Any:
        return self._request("GET", f"/activities/{employee_id}", token)

    # --- tasks & projects ---
    def get_tasks(self, employee_id: Optional[str], token: Optional[str]) -> Any:
        params = {"assignedTo": employee_id} if employee_id else None
        return self._request("GET", "/tasks", token, params=params)

    def create_task(self, task_data: Dict[str, Any], token: Optional[str]) -> Any:
        return self._request("POST", "/tasks", token, json=task_data)

    def update_task(self, task_id: str, data: Dict[str, Any], token: Optional[str]) -> Any:
        return self._request("PUT", f"/tasks/{task_id}", token, json=data)

    def get_projects(self, token: Optional[str]) -> Any:
        return self._request("GET", "/projects", token)

    # --- announcements (wrapped in a {"data": ...} envelope) ---
    def get_announcements(self, token: Optional[str]) -> Any:
        body = self._request("GET", "/announcements", token)
        return body.get("data", []) if isinstance(body, dict) else body

    def create_announcement(self, announcement_data: Dict[str, Any], token: Optional[str]) -> Any:
        body = self._request("POST", "/announcements", token, json=announcement_data)
        return body.get("data", body) if isinstance(body, dict) else body

    def delete_announcement(self, announcement_id: str, token: Optional[str]) -> bool:
        self._request("DELETE", f"/announcements/{announcement_id}", token)
        return True
