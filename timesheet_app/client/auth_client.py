"""
Auth Client
Login, registration and authorized API calls against the timesheet API
"""

import base64
import mimetypes
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import BaseModel

from timesheet_app.client.errors import (
    AuthenticationFailure,
    HTTPError,
    NetworkError,
    ParseError,
    ValidationError,
)
from timesheet_app.client.session import SessionContext
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()

LOGIN_PAGE = "index.html"
REGISTER_REDIRECT_DELAY = 1.2  # seconds
MIN_PASSWORD_LENGTH = 6


class FormResult(BaseModel):
    """Outcome shown to the user after a form submission"""
    ok: bool
    message: str = ""
    redirect: Optional[str] = None
    redirect_delay: float = 0.0


class RegistrationForm(BaseModel):
    """Values read from the registration form"""
    name: str = ""
    email: str = ""
    password: str = ""
    role: str = "employee"
    designation: str = ""
    department: str = ""
    manager_email: str = ""
    github: str = ""
    linkedin: str = ""
    photo_path: Optional[str] = None


def dashboard_for(role: Optional[str]) -> str:
    return f"dashboard_{role}.html"


def encode_photo(path: str) -> str:
    """
    Read an image file as a base64 data URI

    Args:
        path: Image file path

    Returns:
        str: ``data:<mime>;base64,<payload>``
    """
    data = Path(path).read_bytes()
    mime_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def _is_success(response) -> bool:
    return 200 <= response.status_code < 300


def _server_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        return data.get("message") or data.get("error")
    return None


class AuthClient:
    """Client side of the authentication flow"""

    def __init__(
        self,
        base_url: str = "",
        session: Optional[SessionContext] = None,
        http=None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else SessionContext()
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout
        self.submitting = False

    def _post_json(self, path: str, payload: dict):
        return self.http.request(
            "POST",
            f"{self.base_url}{path}",
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

    def _authenticate(self, email: str, password: str) -> dict:
        response = self._post_json("/api/auth/login", {"email": email, "password": password})
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not isinstance(data, dict) or not data.get("token"):
            raise AuthenticationFailure(_server_message(data) or "Login failed")
        return data

    def login(self, email: str, password: str) -> FormResult:
        """
        Sign in and start the session

        Args:
            email: Account email
            password: Account password

        Returns:
            FormResult: Redirect to the role dashboard, or the failure message
        """
        try:
            data = self._authenticate(email, password)
        except AuthenticationFailure as e:
            logger.warning(f"Login failed for {email}: {e.message}")
            return FormResult(ok=False, message=e.message)
        except requests.RequestException as e:
            logger.error(f"Login request failed: {e}")
            return FormResult(ok=False, message=f"Network error: {e}")

        user = self.session.start(data["token"], data.get("user"))
        return FormResult(ok=True, redirect=dashboard_for(user.get("role")))

    def validate_registration(self, form: RegistrationForm):
        """
        Check required fields and password length

        Raises:
            ValidationError: With the message shown next to the form
        """
        if not form.name.strip() or not form.email.strip() or not form.password:
            raise ValidationError("Name, email and password are required.")
        if len(form.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    def register(self, form: RegistrationForm) -> FormResult:
        """
        Create an account

        Validation happens before any request. The client stays marked as
        submitting while the request is in flight so a second submission
        is refused.
        """
        if self.submitting:
            return FormResult(ok=False, message="Registration already in progress")

        try:
            self.validate_registration(form)
        except ValidationError as e:
            return FormResult(ok=False, message=e.message)

        photo = None
        if form.photo_path:
            try:
                photo = encode_photo(form.photo_path)
            except OSError as e:
                return FormResult(ok=False, message=f"Could not read photo: {e}")

        payload = {
            "name": form.name.strip(),
            "email": form.email.strip(),
            "password": form.password,
            "role": form.role,
            "designation": form.designation.strip(),
            "department": form.department.strip(),
            "managerEmail": form.manager_email.strip(),
            "photo": photo,
            "github": form.github.strip(),
            "linkedin": form.linkedin.strip(),
        }

        self.submitting = True
        try:
            response = self._post_json("/api/auth/register", payload)
            data = response.json()
            if _is_success(response):
                logger.info(f"Registered {payload['email']}")
                return FormResult(
                    ok=True,
                    message="Registration successful. Redirecting to login...",
                    redirect=LOGIN_PAGE,
                    redirect_delay=REGISTER_REDIRECT_DELAY,
                )
            return FormResult(ok=False, message=_server_message(data) or "Registration failed")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Registration request failed: {e}")
            return FormResult(ok=False, message=f"Network error: {e}")
        finally:
            self.submitting = False

    def api_call(self, endpoint: str, method: str = "GET", body: Optional[dict] = None) -> Any:
        """
        Call an API endpoint with the session token

        Args:
            endpoint: Path below ``/api``, e.g. ``/timesheets/me``
            method: HTTP method
            body: JSON body, sent only when given

        Returns:
            Parsed JSON response

        Raises:
            ParseError: If the response body is not JSON
            HTTPError: If the response status is not 2xx
            NetworkError: If the request could not complete
        """
        headers = {"Content-Type": "application/json"}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs = {"headers": headers, "timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body

        try:
            response = self.http.request(method, f"{self.base_url}/api{endpoint}", **kwargs)
        except requests.RequestException as e:
            logger.error(f"api_call: request to {endpoint} failed: {e}")
            raise NetworkError(str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"api_call: failed to parse JSON for {endpoint} status {response.status_code}: {e}")
            raise ParseError("API returned non-JSON response") from e

        if not _is_success(response):
            logger.error(f"api_call error: {endpoint} {response.status_code} {data}")
            raise HTTPError(
                _server_message(data) or f"API error {response.status_code}",
                response.status_code,
                data if isinstance(data, dict) else None,
            )

        return data

    def logout(self) -> str:
        """End the session and return the page to show next"""
        self.session.clear()
        return LOGIN_PAGE
