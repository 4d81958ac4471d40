"""
API Endpoints for Audit Submission

Handles:
1. Sub-niche registry for the questionnaire
2. Submit a finished questionnaire (score, record, start AI report)
3. In-memory report session view
4. Retry / skip after a recoverable AI failure
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from bizaudit.models import AuditSubmission
from bizaudit.orchestrator import GenerationState, ReportOrchestrator, ReportSession
from bizaudit.ratelimit import client_origin
from bizaudit.scoring import Niche, get_sub_niche_options, get_sub_niches_for_niche
from bizaudit.scoring.engine import compute_scores, find_unmapped_answers

from .deps import get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Audits"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class AuditRequest(BaseModel):
    """Finished questionnaire, in the shape the form posts it."""
    model_config = ConfigDict(populate_by_name=True)

    niche: Optional[str] = None
    sub_niche: Optional[str] = Field(default=None, alias="subNiche")
    partner_code: Optional[str] = Field(default=None, alias="partnerCode")
    language: str = "en"
    audit_id: Optional[str] = Field(default=None, alias="auditId", max_length=64)

    step1: Dict[str, Any] = Field(default_factory=dict)
    step2: Dict[str, Any] = Field(default_factory=dict)
    step3: Dict[str, Any] = Field(default_factory=dict)
    step4: Dict[str, Any] = Field(default_factory=dict)
    step5: Dict[str, Any] = Field(default_factory=dict)
    step6: Dict[str, Any] = Field(default_factory=dict)
    step7: Dict[str, Any] = Field(default_factory=dict)
    step8: Dict[str, Any] = Field(default_factory=dict)


class AuditResponse(BaseModel):
    """Returned as soon as the audit is recorded."""
    auditId: str
    persisted: bool
    notice: Optional[str] = None
    state: str
    scores: Dict[str, Any]


class SubNicheResponse(BaseModel):
    id: str
    label: str
    niche: str
    group: str
    options: Optional[Dict[str, List[str]]] = None


# =============================================================================
# HELPERS
# =============================================================================

def _origin(request: Request) -> str:
    peer = request.client.host if request.client else None
    return client_origin(request.headers, peer)


async def run_report_generation(orchestrator: ReportOrchestrator, session: ReportSession, origin: str) -> None:
    """Background task: first AI attempt for a freshly submitted audit."""
    await orchestrator.generate(session, origin)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/subniches", response_model=List[SubNicheResponse])
async def list_sub_niches(niche: Optional[str] = Query(None, description="home_services or real_estate")):
    """Sub-niche registry with option lists."""
    if niche is not None:
        parsed = Niche.parse(niche)
        if parsed is None:
            raise HTTPException(status_code=400, detail=f"Unknown niche: {niche}")
        niches = [parsed]
    else:
        niches = list(Niche)

    results = []
    for n in niches:
        for info in get_sub_niches_for_niche(n):
            options = get_sub_niche_options(info.id)
            results.append(SubNicheResponse(
                id=info.id,
                label=info.label,
                niche=info.niche.value,
                group=info.group.value,
                options=options.to_dict() if options else None,
            ))
    return results


@router.post("/audits", response_model=AuditResponse)
async def submit_audit(
    body: AuditRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    orchestrator: ReportOrchestrator = Depends(get_orchestrator),
):
    """
    Submit a finished questionnaire.

    This endpoint:
    1. Validates the answers (422 on failure)
    2. Scores them
    3. Records the audit (degrades to a local id if the write fails)
    4. Starts AI report generation in the background
    """
    form_state = body.model_dump(by_alias=True, exclude={"audit_id", "language"})
    submission = AuditSubmission.from_form_state(form_state, language=body.language)
    scores = compute_scores(submission)

    unmapped = find_unmapped_answers(submission)
    if unmapped:
        logger.info(f"Submission has {len(unmapped)} unmapped answer(s), scored as partial")

    session = await orchestrator.submit(submission, scores, audit_id=body.audit_id)

    if session.state is GenerationState.AWAITING_AI:
        background_tasks.add_task(run_report_generation, orchestrator, session, _origin(request))

    return AuditResponse(
        auditId=session.audit_id,
        persisted=session.persisted,
        notice=session.notice,
        state=session.state.value,
        scores=session.scores.to_dict(),
    )


@router.get("/audits/{audit_id}/session")
async def get_session(audit_id: str, orchestrator: ReportOrchestrator = Depends(get_orchestrator)):
    """Report flow state, with the report the reader should see right now."""
    return orchestrator.get(audit_id).to_dict()


@router.post("/audits/{audit_id}/retry")
async def retry_report(
    audit_id: str,
    request: Request,
    orchestrator: ReportOrchestrator = Depends(get_orchestrator),
):
    """Try the AI report again. No minimum wait this time."""
    session = await orchestrator.retry(audit_id, _origin(request))
    return session.to_dict()


@router.post("/audits/{audit_id}/skip")
async def skip_report(audit_id: str, orchestrator: ReportOrchestrator = Depends(get_orchestrator)):
    """Give up on the AI report and use the standard one."""
    session = await orchestrator.skip(audit_id)
    return session.to_dict()
