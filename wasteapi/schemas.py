"""
Waste API - Pydantic Schemas

PURE DATA MODELS - NO NETWORK LOGIC
Defines the contract between the backend and the normalized client interface.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


# ============================================================================
# REQUEST SIDE
# ============================================================================

class ImageFile(BaseModel):
    """Native file descriptor: where the image lives and how to label it."""

    model_config = ConfigDict(frozen=True)

    uri: str
    mime_type: str = "image/jpeg"
    filename: str


class ImagePart(BaseModel):
    """Binary file part of a multipart body."""

    model_config = ConfigDict(frozen=True)

    field_name: str = "image"
    filename: str
    content: bytes
    mime_type: str = "image/jpeg"


class MultipartForm(BaseModel):
    """Ordered text fields plus optional file parts."""

    fields: Dict[str, str] = Field(default_factory=dict)
    files: List[ImagePart] = Field(default_factory=list)

    def add_field(self, name: str, value: str) -> "MultipartForm":
        self.fields[name] = value
        return self

    def add_file(self, part: ImagePart) -> "MultipartForm":
        self.files.append(part)
        return self

    def has_file(self, field_name: str) -> bool:
        return any(part.field_name == field_name for part in self.files)

    def to_httpx_files(self) -> List[tuple]:
        """
        Shape every part the way httpx expects multipart entries.

        Text fields go in as (None, value) so httpx encodes multipart/form-data
        even when no file is attached.
        """
        parts: List[tuple] = [(name, (None, value)) for name, value in self.fields.items()]
        parts.extend(
            (part.field_name, (part.filename, part.content, part.mime_type))
            for part in self.files
        )
        return parts


class RequestDescriptor(BaseModel):
    """One HTTP exchange, described before it is sent."""

    method: HttpMethod = "GET"
    path: str
    json_body: Optional[Any] = None
    form: Optional[MultipartForm] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def check_body(self) -> "RequestDescriptor":
        if self.form is not None and self.json_body is not None:
            raise ValueError("json_body and form are mutually exclusive")
        if self.form is not None and any(
            name.lower() == "content-type" for name in self.headers
        ):
            # httpx must assign the multipart boundary itself
            raise ValueError("Content-Type must not be set for multipart bodies")
        return self

    @property
    def is_multipart(self) -> bool:
        return self.form is not None


class Coordinates(BaseModel):
    """Latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class SignupAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address_line: str = Field(..., alias="addressLine")
    latitude: float
    longitude: float


class SignupRequest(BaseModel):
    """Payload for /auth/signup."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    password: str
    address: SignupAddress
    profile_image: Optional[str] = Field(None, alias="profileImage")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# RESPONSE SIDE
# ============================================================================

class NormalizedResponse(BaseModel):
    """Parsed JSON body plus the HTTP status it arrived with."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    data: Union[Dict[str, Any], List[Any]]

    def get(self, key: str, default: Any = None) -> Any:
        """Dict-style access; list bodies have no keys."""
        if isinstance(self.data, dict):
            return self.data.get(key, default)
        return default


class WasteAnalysisResult(BaseModel):
    """
    Flattened analysis record.

    Every field is guaranteed; see wasteapi.normalize for the lookup order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    waste_type: str = Field(..., alias="wasteType")
    urgency: str
    severity: str
    reasoning: str
    segregation_level: str = Field(..., alias="segregationLevel")
    segregation_reasoning: str = Field(..., alias="segregationReasoning")
    id: str
    created_at: str = Field(..., alias="createdAt")
