"""
Study sessions endpoint.
"""
from fastapi import APIRouter, Depends, status
from vocadeck.core.context import RequestContext, get_request_context
from vocadeck.core.database import get_store
from vocadeck.core.record_store import RecordStore
from vocadeck.models.learning_session import LearningSession
from vocadeck.schemas.session import (
    AnswerRequest,
    AnswerResponse,
    ReviewStatResponse,
    SessionResponse,
    StartSessionRequest,
    StartSessionResponse
)
from vocadeck.services.study_session_service import StudySessionEngine

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_engine(store: RecordStore = Depends(get_store)) -> StudySessionEngine:
    """Dependency for getting a session engine over the request's store."""
    return StudySessionEngine(store)


def to_response(engine: StudySessionEngine, session: LearningSession) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        card_set_id=session.card_set_id,
        is_reversed=session.is_reversed,
        is_random_order=session.is_random_order,
        status=session.status,
        total_words=session.total_words,
        answered=session.cursor,
        correct_words=session.correct_words,
        accuracy=session.accuracy,
        started_at=session.started_at,
        completed_at=session.completed_at,
        current=engine.current_prompt(session),
    )


@router.post("", response_model=StartSessionResponse, status_code=status.HTTP_201_CREATED)
def start_session(
    request: StartSessionRequest,
    ctx: RequestContext = Depends(get_request_context),
    engine: StudySessionEngine = Depends(get_engine)
):
    """Start a study pass. The returned card sequence is fixed for the session."""
    session = engine.start(
        ctx,
        request.card_set_id,
        is_reversed=request.is_reversed,
        is_random_order=request.is_random_order,
    )
    return StartSessionResponse(session=to_response(engine, session), cards=engine.prompts(session))


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    ctx: RequestContext = Depends(get_request_context),
    engine: StudySessionEngine = Depends(get_engine)
):
    return to_response(engine, engine.get(ctx, session_id))


@router.post("/{session_id}/answers", response_model=AnswerResponse)
def answer_card(
    session_id: int,
    request: AnswerRequest,
    ctx: RequestContext = Depends(get_request_context),
    engine: StudySessionEngine = Depends(get_engine)
):
    """Record the answer for the current card. The last answer completes the session."""
    session, stat = engine.answer(
        ctx,
        session_id,
        request.card_id,
        request.is_correct,
        response_time_ms=request.response_time_ms,
    )
    return AnswerResponse(
        session=to_response(engine, session),
        stat=ReviewStatResponse.model_validate(stat),
    )


@router.post("/{session_id}/cancel", response_model=SessionResponse)
def cancel_session(
    session_id: int,
    ctx: RequestContext = Depends(get_request_context),
    engine: StudySessionEngine = Depends(get_engine)
):
    """Cancel an unfinished session. Statistics already recorded are kept."""
    return to_response(engine, engine.cancel(ctx, session_id))
