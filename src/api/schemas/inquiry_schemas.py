from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums.inquiry_status import InquiryStatus


class CreateInquiryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    listing_id: UUID
    message: str
    phone: str | None = Field(default=None, max_length=64)


class RespondToInquiryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str


class SetInquiryStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Checked against InquiryStatus by the domain
    status: str


class HandlerResponse(BaseModel):
    id: UUID
    name: str
    email: str


class InquiryResponse(BaseModel):
    id: UUID
    listing_id: UUID
    requester_id: UUID
    original_owner_id: UUID | None
    message: str
    phone: str | None = None
    status: InquiryStatus
    response: str | None = None
    responded_at: datetime | None = None
    created_at: datetime
    handler: HandlerResponse | None = None


class InquiryListResponse(BaseModel):
    inquiries: list[InquiryResponse]
    count: int
