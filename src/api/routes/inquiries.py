from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_create_inquiry_use_case,
    get_delete_inquiry_use_case,
    get_listing_inquiries_use_case,
    get_own_inquiries_use_case,
    get_respond_to_inquiry_use_case,
    get_set_inquiry_status_use_case,
)
from src.api.presenters import inquiry_to_response
from src.api.schemas.common import MessageResponse
from src.api.schemas.inquiry_schemas import (
    CreateInquiryRequest,
    InquiryListResponse,
    InquiryResponse,
    RespondToInquiryRequest,
    SetInquiryStatusRequest,
)
from src.api.security import get_principal
from src.application.use_cases.manage_inquiries import (
    CreateInquiry,
    CreateInquiryInput,
    DeleteInquiry,
    InquiryView,
    ListInquiriesForListing,
    ListOwnInquiries,
    RespondToInquiry,
    RespondToInquiryInput,
    SetInquiryStatus,
    SetInquiryStatusInput,
)
from src.domain.principal import Principal

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


def _list_response(views: list[InquiryView]) -> InquiryListResponse:
    return InquiryListResponse(
        inquiries=[inquiry_to_response(v) for v in views],
        count=len(views),
    )


@router.post("", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    body: CreateInquiryRequest,
    principal: Principal = Depends(get_principal),
    use_case: CreateInquiry = Depends(get_create_inquiry_use_case),
) -> InquiryResponse:
    view = await use_case.execute(
        CreateInquiryInput(
            principal=principal,
            listing_id=body.listing_id,
            message=body.message,
            phone=body.phone,
        )
    )
    return inquiry_to_response(view)


@router.get("/mine", response_model=InquiryListResponse)
async def list_own_inquiries(
    principal: Principal = Depends(get_principal),
    use_case: ListOwnInquiries = Depends(get_own_inquiries_use_case),
) -> InquiryListResponse:
    return _list_response(await use_case.execute(principal))


@router.get("/listing/{listing_id}", response_model=InquiryListResponse)
async def list_inquiries_for_listing(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: ListInquiriesForListing = Depends(get_listing_inquiries_use_case),
) -> InquiryListResponse:
    return _list_response(await use_case.execute(principal, listing_id))


@router.put("/{inquiry_id}/respond", response_model=InquiryResponse)
async def respond_to_inquiry(
    inquiry_id: UUID,
    body: RespondToInquiryRequest,
    principal: Principal = Depends(get_principal),
    use_case: RespondToInquiry = Depends(get_respond_to_inquiry_use_case),
) -> InquiryResponse:
    view = await use_case.execute(
        RespondToInquiryInput(principal=principal, inquiry_id=inquiry_id, message=body.message)
    )
    return inquiry_to_response(view)


@router.put("/{inquiry_id}/status", response_model=InquiryResponse)
async def set_inquiry_status(
    inquiry_id: UUID,
    body: SetInquiryStatusRequest,
    principal: Principal = Depends(get_principal),
    use_case: SetInquiryStatus = Depends(get_set_inquiry_status_use_case),
) -> InquiryResponse:
    view = await use_case.execute(
        SetInquiryStatusInput(principal=principal, inquiry_id=inquiry_id, status=body.status)
    )
    return inquiry_to_response(view)


@router.delete("/{inquiry_id}", response_model=MessageResponse)
async def delete_inquiry(
    inquiry_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: DeleteInquiry = Depends(get_delete_inquiry_use_case),
) -> MessageResponse:
    await use_case.execute(principal, inquiry_id)
    return MessageResponse(message="Inquiry removed.")
