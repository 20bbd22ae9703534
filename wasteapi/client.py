"""
Remote Service Client for the waste reporting backend.

Endpoints (relative to the base endpoint, e.g. https://<host>/api):

  Operation                Method  Path                        Body
  ───────────────────────  ──────  ──────────────────────────  ─────────
  login                    POST    /auth/login                 JSON
  signup                   POST    /auth/signup                JSON
  get_profile              GET     /auth/profile               -
  update_profile           PATCH   /auth/profile               JSON
  change_password          PUT     /user/change-password       JSON
  analyze_waste            POST    /cleanup                    multipart
  submit_report            POST    /cleanup                    multipart
  get_cleanup_history      GET     /cleanup/history            -
  update_report_status     PATCH   /reports/{id}               JSON
  get_reports              GET     /reports                    -
  get_user_reports         GET     /reports/user               -
  delete_report            DELETE  /reports/{id}               -
  classify_waste           POST    /waste/classify             multipart
  get_waste_history        GET     /waste/history?page&limit   -
  get_notifications        GET     /notifications              -
  mark_notification_read   PATCH   /notifications/{id}/read    -
  mark_all_notifications_read
                           PATCH   /notifications/mark-all-read -

Invariants:
- Bearer token read once per request from the injected CredentialHolder
- No retries, no caching, no recovery: every failure propagates typed
- analyze_waste validates before any network call and races a timer
- Multipart field names are fixed: image, locationText, lat, lng, prompt
"""

import asyncio
import logging
import math
from numbers import Real
from typing import Any, Dict, Optional, Union

import httpx

from .credentials import CredentialHolder
from .encoders import ImageEncoder, ImageEncoderType, create_image_encoder
from .errors import NetworkError, RequestValidationError
from .executor import RequestExecutor
from .normalize import normalize_analysis
from .race import SleepFn, race_with_timeout
from .schemas import Coordinates, MultipartForm, NormalizedResponse, SignupRequest, WasteAnalysisResult

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "https://origin-jxav.onrender.com/api"
DEFAULT_REQUEST_TIMEOUT_S = 30.0
ANALYSIS_TIMEOUT_S = 20.0

# Stand-in for device geolocation; overridden through configuration
DEFAULT_COORDINATES = Coordinates(lat=28.6139, lng=77.2090)


def format_coordinate(value: float) -> str:
    """Shortest text form of a coordinate: 12.34 -> "12.34"."""
    return str(value)


def check_location_text(value: Any) -> str:
    """Location text must be a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise RequestValidationError("locationText", "Location text is required")
    return value


def check_coordinate(field: str, value: Any) -> float:
    """Coordinate must be present, numeric and finite."""
    if value is None:
        raise RequestValidationError(field, f"{field} is required")
    if isinstance(value, bool) or not isinstance(value, Real):
        raise RequestValidationError(field, f"{field} must be numeric, got {type(value).__name__}")
    if not math.isfinite(value):
        raise RequestValidationError(field, f"{field} must be a finite number")
    return value


class RemoteServiceClient:
    """
    Async client for the waste reporting backend.

    Usage:
        async with RemoteServiceClient(credentials=CredentialHolder(storage)) as client:
            await client.login("a@b.com", "secret")
            result = await client.analyze_waste("Park gate", 12.34, 56.78, image_uri="/tmp/w.jpg")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        credentials: Optional[CredentialHolder] = None,
        image_encoder: Optional[ImageEncoder] = None,
        platform: ImageEncoderType = "native",
        http_client: Optional[httpx.AsyncClient] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_S,
        analysis_timeout: float = ANALYSIS_TIMEOUT_S,
        default_coordinates: Coordinates = DEFAULT_COORDINATES,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials or CredentialHolder()
        self.image_encoder = image_encoder or create_image_encoder(platform)
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=request_timeout)
        self.analysis_timeout = analysis_timeout
        self.default_coordinates = default_coordinates
        self._sleep = sleep
        self.executor = RequestExecutor(self.base_url, self.credentials, self.http_client)

    async def __aenter__(self) -> "RemoteServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close owned transports. Injected clients are left open."""
        await self.image_encoder.aclose()
        if self._owns_http_client:
            await self.http_client.aclose()

    # ── Credential lifecycle ──────────────────────────────────

    def set_auth_token(self, token: str) -> None:
        self.credentials.set(token)

    def clear_auth_token(self) -> None:
        self.credentials.clear()

    def logout(self) -> None:
        """Forget the session token. No server call is made."""
        self.clear_auth_token()

    def _remember_token(self, response: NormalizedResponse) -> None:
        token = response.get("token")
        if isinstance(token, str) and token:
            self.credentials.set(token)

    # ── Auth & profile ────────────────────────────────────────

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """POST /auth/login; stores the returned token when present."""
        response = await self.executor.request(
            "/auth/login",
            method="POST",
            json_body={"email": email, "password": password},
        )
        self._remember_token(response)
        return response.data

    async def signup(self, user: Union[SignupRequest, Dict[str, Any]]) -> Dict[str, Any]:
        """POST /auth/signup; stores the returned token when present."""
        if isinstance(user, dict):
            user = SignupRequest.model_validate(user)
        response = await self.executor.request(
            "/auth/signup",
            method="POST",
            json_body=user.to_payload(),
        )
        self._remember_token(response)
        return response.data

    async def get_profile(self) -> Dict[str, Any]:
        response = await self.executor.request("/auth/profile")
        return response.data

    async def update_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.executor.request("/auth/profile", method="PATCH", json_body=fields)
        return response.data

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        """PUT /user/change-password. The stored token is left untouched."""
        response = await self.executor.request(
            "/user/change-password",
            method="PUT",
            json_body={"currentPassword": current_password, "newPassword": new_password},
        )
        return response.data

    # ── Multipart helpers ─────────────────────────────────────

    async def _location_form(
        self,
        location_text: str,
        lat: float,
        lng: float,
        image_uri: Optional[str],
    ) -> MultipartForm:
        form = MultipartForm()
        form.add_field("locationText", location_text)
        form.add_field("lat", format_coordinate(lat))
        form.add_field("lng", format_coordinate(lng))
        if image_uri:
            form.add_file(await self.image_encoder.encode(image_uri))
        return form

    # ── Waste analysis ────────────────────────────────────────

    async def analyze_waste(
        self,
        location_text: str,
        lat: Optional[float],
        lng: Optional[float],
        image_uri: Optional[str] = None,
    ) -> WasteAnalysisResult:
        """
        Submit a location (and image) for AI analysis with a hard time limit.

        The backend analyses an image; callers must supply ``image_uri``.
        It is not replaced with a placeholder when missing.

        Raises:
            RequestValidationError: Empty location text or bad coordinates
            AnalysisTimeoutError: No answer within analysis_timeout seconds
            ApiError / MalformedResponseError / NetworkError: From the executor
        """
        check_location_text(location_text)
        lat = check_coordinate("lat", lat)
        lng = check_coordinate("lng", lng)

        logger.info(
            f"Starting waste analysis for '{location_text}'",
            extra={"lat": lat, "lng": lng, "has_image": bool(image_uri)},
        )

        async def submit() -> NormalizedResponse:
            # Image encoding may fetch over HTTP, so it runs under the timer too
            form = await self._location_form(location_text, lat, lng, image_uri)
            return await self.executor.request("/cleanup", method="POST", form=form)

        response = await race_with_timeout(
            submit(),
            self.analysis_timeout,
            sleep=self._sleep,
            name="waste analysis",
        )
        return normalize_analysis(response.data)

    # ── Reports ───────────────────────────────────────────────

    async def submit_report(
        self,
        image_uri: str,
        location_text: str,
        coordinates: Optional[Coordinates] = None,
    ) -> Any:
        """
        POST a waste report. Returns the server acknowledgment.

        Missing coordinates fall back to ``default_coordinates``.
        """
        if not image_uri:
            raise RequestValidationError("image", "An image is required to submit a report")
        check_location_text(location_text)

        coords = coordinates or self.default_coordinates
        lat = check_coordinate("lat", coords.lat)
        lng = check_coordinate("lng", coords.lng)
        if coordinates is None:
            logger.warning(
                "No coordinates supplied; using configured default location",
                extra={"lat": coords.lat, "lng": coords.lng},
            )

        form = await self._location_form(location_text, lat, lng, image_uri)
        response = await self.executor.request("/cleanup", method="POST", form=form)
        return response.data

    async def update_report_status(self, report_id: str, status: str) -> Any:
        response = await self.executor.request(
            f"/reports/{report_id}",
            method="PATCH",
            json_body={"status": status},
        )
        return response.data

    async def get_cleanup_history(self) -> Any:
        response = await self.executor.request("/cleanup/history")
        return response.data

    async def get_reports(self) -> Any:
        """Every report visible to the caller."""
        response = await self.executor.request("/reports")
        return response.data

    async def get_user_reports(self) -> Any:
        """Reports filed by the signed-in user."""
        response = await self.executor.request("/reports/user")
        return response.data

    async def delete_report(self, report_id: str) -> Any:
        response = await self.executor.request(f"/reports/{report_id}", method="DELETE")
        return response.data

    # ── Classification & history ──────────────────────────────

    async def classify_waste(
        self,
        prompt: Optional[str] = None,
        image_uri: Optional[str] = None,
    ) -> Any:
        """
        POST /waste/classify with a text prompt and/or image.

        Whether at least one is present is for the server to decide.
        """
        form = MultipartForm()
        if prompt:
            form.add_field("prompt", prompt)
        if image_uri:
            form.add_file(await self.image_encoder.encode(image_uri))
        response = await self.executor.request("/waste/classify", method="POST", form=form)
        return response.data

    async def get_waste_history(self, page: int = 1, limit: int = 50) -> Any:
        """Paginated classification history. Always a fresh round-trip."""
        response = await self.executor.request(
            "/waste/history",
            params={"page": page, "limit": limit},
        )
        return response.data

    # ── Notifications ─────────────────────────────────────────

    async def get_notifications(self) -> Any:
        response = await self.executor.request("/notifications")
        return response.data

    async def mark_notification_read(self, notification_id: str) -> Any:
        response = await self.executor.request(
            f"/notifications/{notification_id}/read",
            method="PATCH",
        )
        return response.data

    async def mark_all_notifications_read(self) -> Any:
        response = await self.executor.request("/notifications/mark-all-read", method="PATCH")
        return response.data

    # ── Connectivity ──────────────────────────────────────────

    async def test_connection(self) -> Dict[str, Any]:
        """
        GET the backend host root. No JSON enforcement.

        Returns:
            {"status": <http status>, "data": <raw text>}
        """
        root = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        url = f"{root}/"
        try:
            response = await self.http_client.get(url)
        except httpx.TransportError as e:
            logger.error(f"Connection test failed: {e}")
            raise NetworkError(f"Connection test failed: {e}") from e
        logger.info(f"Connection test successful: {response.status_code}")
        return {"status": response.status_code, "data": response.text}
