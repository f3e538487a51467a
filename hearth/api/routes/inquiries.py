"""Inquiry API routes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hearth.api.dependencies import get_current_user, get_notifier
from hearth.core.database import get_db
from hearth.models.inquiry import Inquiry
from hearth.models.user import User
from hearth.schemas.common import ApiResponse, Page, PaginationOut
from hearth.schemas.inquiry import (
    FeedbackRequest,
    InquiryCreate,
    InquiryDetail,
    InquiryResponse,
    RespondRequest,
    ScheduleRequest,
    StatusRequest,
)
from hearth.services import inquiry as inquiry_service
from hearth.services.notifications import Notifier
from hearth.services.pagination import Pagination

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


def _page(items: list[Inquiry], pagination: Pagination) -> Page[InquiryResponse]:
    return Page[InquiryResponse](
        items=[InquiryResponse.model_validate(i) for i in items],
        pagination=PaginationOut.model_validate(pagination),
    )


def _detail(inquiry: Inquiry) -> InquiryDetail:
    return InquiryDetail(inquiry=InquiryResponse.model_validate(inquiry))


@router.post("", response_model=ApiResponse[InquiryDetail], status_code=201)
def create_inquiry(
    inquiry_data: InquiryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> ApiResponse[InquiryDetail]:
    """Send an inquiry to a property's owner."""
    inquiry = inquiry_service.create_inquiry(db, inquiry_data, current_user, notifier)
    return ApiResponse(message="Inquiry sent successfully", data=_detail(inquiry))


@router.get("/sent", response_model=ApiResponse[Page[InquiryResponse]])
def sent_inquiries(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[Page[InquiryResponse]]:
    """Inquiries the caller sent."""
    items, pagination = inquiry_service.list_sent(db, current_user, request.query_params)
    return ApiResponse(data=_page(items, pagination))


@router.get("/received", response_model=ApiResponse[Page[InquiryResponse]])
def received_inquiries(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[Page[InquiryResponse]]:
    """Inquiries about the caller's properties."""
    items, pagination = inquiry_service.list_received(db, current_user, request.query_params)
    return ApiResponse(data=_page(items, pagination))


@router.get("/{inquiry_id}", response_model=ApiResponse[InquiryDetail])
def get_inquiry(
    inquiry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[InquiryDetail]:
    inquiry = inquiry_service.get_inquiry(db, inquiry_id, current_user)
    return ApiResponse(data=_detail(inquiry))


@router.put("/{inquiry_id}/respond", response_model=ApiResponse[InquiryDetail])
def respond_to_inquiry(
    inquiry_id: int,
    body: RespondRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> ApiResponse[InquiryDetail]:
    """Owner replies to an inquiry."""
    inquiry = inquiry_service.respond(db, inquiry_id, body.message, current_user, notifier)
    return ApiResponse(message="Response sent successfully", data=_detail(inquiry))


@router.put("/{inquiry_id}/schedule", response_model=ApiResponse[InquiryDetail])
def schedule_meeting(
    inquiry_id: int,
    body: ScheduleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> ApiResponse[InquiryDetail]:
    """Owner schedules a meeting with the inquirer."""
    inquiry = inquiry_service.schedule(
        db,
        inquiry_id,
        meeting_date=body.date,
        meeting_time=body.time,
        meeting_type=body.type,
        location=body.location,
        user=current_user,
        notifier=notifier,
    )
    return ApiResponse(message="Meeting scheduled successfully", data=_detail(inquiry))


@router.put("/{inquiry_id}/status", response_model=ApiResponse[InquiryDetail])
def update_inquiry_status(
    inquiry_id: int,
    body: StatusRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[InquiryDetail]:
    inquiry = inquiry_service.update_status(db, inquiry_id, body.status, current_user)
    return ApiResponse(message="Inquiry status updated successfully", data=_detail(inquiry))


@router.put("/{inquiry_id}/feedback", response_model=ApiResponse[InquiryDetail])
def leave_feedback(
    inquiry_id: int,
    body: FeedbackRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[InquiryDetail]:
    """Inquirer rates a completed inquiry."""
    inquiry = inquiry_service.leave_feedback(db, inquiry_id, body.rating, body.feedback, current_user)
    return ApiResponse(message="Feedback recorded successfully", data=_detail(inquiry))
