from datetime import datetime
from pydantic import BaseModel, Field
from bandtrack.models.signature import SignatureType, SignatureFormat


class SignatureCreate(BaseModel):
    signature_data: str = Field(..., min_length=1)
    signature_type: SignatureType = SignatureType.general
    signature_name: str | None = Field(None, max_length=100)
    signature_format: SignatureFormat = SignatureFormat.svg
    signature_width: int | None = Field(None, ge=1)
    signature_height: int | None = Field(None, ge=1)
    stroke_color: str = Field("#000000", max_length=16)
    background_color: str = Field("transparent", max_length=32)
    legal_name: str | None = Field(None, max_length=255)
    intent_statement: str | None = None


class SignatureVerifyRequest(BaseModel):
    method: str = Field(..., min_length=1, max_length=64)


class SignatureResponse(BaseModel):
    id: int
    user_id: int
    signature_data: str
    signature_type: SignatureType
    signature_name: str | None
    display_name: str
    signature_format: SignatureFormat
    signature_width: int | None
    signature_height: int | None
    stroke_color: str
    background_color: str
    usage_count: int
    last_used_at: datetime | None
    signature_hash: str
    is_verified: bool
    verification_date: datetime | None
    verification_method: str | None
    legal_name: str | None
    intent_statement: str | None
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SignatureTypeCount(BaseModel):
    signature_type: SignatureType
    count: int
