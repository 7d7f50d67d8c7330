"""
Community FAQ endpoints: public listing, admin listing, submission and moderation.
"""

from typing import List

from fastapi import APIRouter, HTTPException

from .schemas import FAQCreateRequest, FAQStatusRequest, FAQResponse, SuccessResponse
from ..core import faqs

router = APIRouter(prefix="/api/faqs")


def _to_response(faq: faqs.FAQ) -> FAQResponse:
    return FAQResponse(**faq.to_dict())


@router.get("/public", response_model=List[FAQResponse])
def list_public_faqs():
    """Approved FAQs only, newest first."""
    return [_to_response(faq) for faq in faqs.list_faqs(status="approved")]


@router.get("/admin", response_model=List[FAQResponse])
def list_all_faqs():
    """Every FAQ regardless of status, newest first."""
    return [_to_response(faq) for faq in faqs.list_faqs()]


@router.post("", response_model=SuccessResponse)
def submit_faq(req: FAQCreateRequest):
    faqs.submit_faq(req.category, req.question, req.answer, req.submitted_by)
    return SuccessResponse(success=True)


@router.put("/{faq_id}/status", response_model=SuccessResponse)
def update_faq_status(faq_id: int, req: FAQStatusRequest):
    if not faqs.update_faq_status(faq_id, req.status):
        raise HTTPException(status_code=404, detail="FAQ not found")
    return SuccessResponse(success=True)
