"""
Chat endpoint: one question in, one reply out.
Always answers HTTP 200; failures are reported through the outcome/reason_code fields.
"""

from fastapi import APIRouter, Depends

from .schemas import ChatRequest, ChatResponse
from ..core.pipeline import AnsweringPipeline, Answered

router = APIRouter()

_pipeline = None


def get_pipeline() -> AnsweringPipeline:
    """Process-wide pipeline built from configuration on first use."""
    global _pipeline
    if _pipeline is None:
        from ..core.config import build_pipeline
        _pipeline = build_pipeline()
    return _pipeline


@router.post("/api/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, pipeline: AnsweringPipeline = Depends(get_pipeline)) -> ChatResponse:
    run = await pipeline.run(req.user_message)
    outcome = run.outcome

    return ChatResponse(
        reply=outcome.reply,
        outcome="answered" if isinstance(outcome, Answered) else "degraded",
        reason_code=outcome.reason_code,
        category=run.query.category if run.query else None,
    )
