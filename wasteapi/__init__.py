"""
Waste reporting API client.

Async request/response layer between the app and the backend:
- JSON and multipart request encoding
- Strict JSON response handling with typed errors
- Timeout-bounded waste analysis
- Bearer token lifecycle backed by key-value storage
"""

from .client import (
    ANALYSIS_TIMEOUT_S,
    DEFAULT_BASE_URL,
    DEFAULT_COORDINATES,
    RemoteServiceClient,
)
from .credentials import DEFAULT_TOKEN_KEY, CredentialHolder
from .encoders import BrowserImageEncoder, ImageEncoder, NativeImageEncoder, create_image_encoder
from .errors import (
    AnalysisTimeoutError,
    ApiError,
    MalformedResponseError,
    NetworkError,
    RequestValidationError,
    WasteApiError,
)
from .executor import RequestExecutor
from .normalize import lookup_field, normalize_analysis
from .race import AbandonableTask, race_with_timeout
from .schemas import (
    Coordinates,
    ImageFile,
    ImagePart,
    MultipartForm,
    NormalizedResponse,
    RequestDescriptor,
    SignupAddress,
    SignupRequest,
    WasteAnalysisResult,
)
from .storage import InMemoryStorage, KeyValueStorage, SQLiteStorage

__all__ = [
    # Client
    "RemoteServiceClient",
    "RequestExecutor",
    "DEFAULT_BASE_URL",
    "DEFAULT_COORDINATES",
    "ANALYSIS_TIMEOUT_S",
    # Credentials
    "CredentialHolder",
    "DEFAULT_TOKEN_KEY",
    "KeyValueStorage",
    "InMemoryStorage",
    "SQLiteStorage",
    # Encoders
    "ImageEncoder",
    "BrowserImageEncoder",
    "NativeImageEncoder",
    "create_image_encoder",
    # Errors
    "WasteApiError",
    "MalformedResponseError",
    "ApiError",
    "AnalysisTimeoutError",
    "RequestValidationError",
    "NetworkError",
    # Normalization & race
    "lookup_field",
    "normalize_analysis",
    "AbandonableTask",
    "race_with_timeout",
    # Schemas
    "Coordinates",
    "ImageFile",
    "ImagePart",
    "MultipartForm",
    "NormalizedResponse",
    "RequestDescriptor",
    "SignupAddress",
    "SignupRequest",
    "WasteAnalysisResult",
]
