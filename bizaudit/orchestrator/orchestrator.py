"""
Report Orchestrator

Drives one submission through the report flow:

    submit()   IDLE -> SUBMITTING -> AWAITING_AI | FALLBACK
    generate() AWAITING_AI -> COMPLETED | FAILED | RATE_LIMITED | PROVIDER_ERROR
    retry()    PROVIDER_ERROR -> AWAITING_AI -> ...   (no minimum wait)
    skip()     PROVIDER_ERROR | AWAITING_AI -> FALLBACK

The first generation is joined with a minimum-wait timer so a fast reply
never lands abruptly. Retry does not wait again.

Attempts are not cancelled. An attempt abandoned by retry or skip may still
finish and persist its report (the upsert is keyed by audit id), but its
result is only applied to the session if it is still the current attempt and
the session is still awaiting it.

Sessions live in process memory only. Resubmitting a recorded id never starts
a second attempt, and sessions idle past the TTL are evicted (the persisted
status and report remain readable through the report read path).
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional

from bizaudit.errors import (
    AuditError,
    NotFoundError,
    RateLimitExceeded,
    TransientProviderError,
)
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission
from bizaudit.utils.config import get_settings

from .gateway import SubmissionGateway
from .generator import Attempt, ReportGenerator
from .state import GenerationState, ReportSession

logger = logging.getLogger(__name__)

AI_UNAVAILABLE_NOTICE = "Personalized analysis is unavailable right now. Showing your standard report."


class ReportOrchestrator:
    """
    Usage:
        orchestrator = ReportOrchestrator(store, generator)
        session = await orchestrator.start(submission, scores, origin="203.0.113.7")
        if session.state is GenerationState.PROVIDER_ERROR:
            await orchestrator.retry(session.audit_id)   # or skip()
    """

    def __init__(
        self,
        store,
        generator: Optional[ReportGenerator] = None,
        min_wait: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        session_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = get_settings()
        self.store = store
        self.gateway = SubmissionGateway(store)
        self.generator = generator
        self.min_wait = settings.MIN_WAIT_SECONDS if min_wait is None else min_wait
        self.session_ttl = settings.SESSION_TTL_SECONDS if session_ttl is None else session_ttl
        self._sleep = sleep
        self._clock = clock
        self._sessions: Dict[str, ReportSession] = {}
        self._origins: Dict[str, str] = {}

    # =========================================================================
    # SESSIONS
    # =========================================================================

    def get(self, audit_id: str) -> ReportSession:
        session = self._sessions.get(audit_id)
        if session is None:
            raise NotFoundError(audit_id)
        return session

    def has(self, audit_id: str) -> bool:
        return audit_id in self._sessions

    async def evict_expired(self) -> int:
        """
        Drop sessions with no state change for session_ttl seconds.

        A session still awaiting its AI attempt is kept. One abandoned in
        PROVIDER_ERROR is closed out as failed so readers stop polling.
        Readers of an evicted session fall back to the report read path.
        """
        now = self._clock()
        expired = [
            session for session in self._sessions.values()
            if session.state is not GenerationState.AWAITING_AI
            and now - session.updated_at >= self.session_ttl
        ]
        for session in expired:
            self._sessions.pop(session.audit_id, None)
            self._origins.pop(session.audit_id, None)

        for session in expired:
            if session.state is GenerationState.PROVIDER_ERROR:
                await self._mark_failed(session.audit_id)

        if expired:
            logger.info(f"Evicted {len(expired)} idle report session(s), {len(self._sessions)} remaining")
        return len(expired)

    # =========================================================================
    # FLOW
    # =========================================================================

    async def submit(
        self,
        submission: AuditSubmission,
        scores: AuditScores,
        audit_id: Optional[str] = None,
    ) -> ReportSession:
        """
        Record the audit. Always reaches AWAITING_AI or FALLBACK.

        An id that is already on record never starts AI work: the live
        session for it is returned unchanged, or a FALLBACK session rebuilt
        from the stored answers.
        """
        await self.evict_expired()
        session = ReportSession(submission=submission, scores=scores)
        self._advance(session, GenerationState.SUBMITTING)

        receipt = await self.gateway.submit(submission, scores, audit_id)
        session.audit_id = receipt.audit_id
        session.persisted = receipt.persisted
        session.notice = receipt.notice

        if receipt.persisted and not receipt.created:
            return await self._resubmitted(session)

        self._sessions[receipt.audit_id] = session
        if not receipt.persisted:
            self._advance(session, GenerationState.FALLBACK)
        elif self.generator is None:
            session.notice = AI_UNAVAILABLE_NOTICE
            self._advance(session, GenerationState.FALLBACK)
            await self._mark_failed(receipt.audit_id)
        else:
            self._advance(session, GenerationState.AWAITING_AI)
        return session

    async def generate(self, session: ReportSession, origin: str = "unknown") -> ReportSession:
        """First attempt, joined with the minimum-wait timer. Runs once per session."""
        if session.attempts:
            logger.info(f"[{session.audit_id}] First AI attempt already started, not starting another")
            return session
        return await self._run_attempt(session, origin, smooth=True)

    async def start(
        self,
        submission: AuditSubmission,
        scores: AuditScores,
        origin: str = "unknown",
        audit_id: Optional[str] = None,
    ) -> ReportSession:
        session = await self.submit(submission, scores, audit_id)
        if session.state is GenerationState.AWAITING_AI:
            await self.generate(session, origin)
        return session

    async def retry(self, audit_id: str, origin: Optional[str] = None) -> ReportSession:
        """
        Raises:
            NotFoundError: no session for this id
            InvalidTransition: not in PROVIDER_ERROR
        """
        session = self.get(audit_id)
        self._advance(session, GenerationState.AWAITING_AI)
        session.provider_error = None
        return await self._run_attempt(session, origin or self._origins.get(audit_id, "unknown"), smooth=False)

    async def skip(self, audit_id: str) -> ReportSession:
        """
        Abandon augmentation and show the template report.

        Raises:
            NotFoundError: no session for this id
            InvalidTransition: nothing to skip
        """
        session = self.get(audit_id)
        in_flight = session.state is GenerationState.AWAITING_AI
        self._advance(session, GenerationState.FALLBACK)
        logger.info(f"[{audit_id}] Skipped to template report after {session.attempts} attempt(s)")
        if not in_flight:
            # Nothing left that could complete this audit
            await self._mark_failed(audit_id)
        return session

    async def _resubmitted(self, session: ReportSession) -> ReportSession:
        """Session for an id that was already recorded by an earlier submit."""
        audit_id = session.audit_id
        live = self._sessions.get(audit_id)
        if live is not None:
            logger.info(f"[{audit_id}] Resubmitted id, returning live session ({live.state.value})")
            return live

        try:
            record = await self.store.fetch(audit_id)
        except AuditError as e:
            # Not registered: the submitted answers are not the ones on record
            logger.warning(f"[{audit_id}] Resubmitted id, stored audit unreadable: {e.code}")
            self._advance(session, GenerationState.FALLBACK)
            return session

        audit = record.audit
        session.submission = AuditSubmission.from_form_state(
            audit["form_data"], language=audit.get("language"), validate=False,
        )
        session.scores = AuditScores.from_dict(audit["scores"])
        session.ai_report = record.ai_report
        self._advance(session, GenerationState.FALLBACK)
        self._sessions[audit_id] = session
        logger.info(f"[{audit_id}] Resubmitted id, restored stored audit (report {record.report_status})")
        return session

    # =========================================================================
    # ATTEMPTS
    # =========================================================================

    async def _run_attempt(self, session: ReportSession, origin: str, smooth: bool) -> ReportSession:
        if session.state is not GenerationState.AWAITING_AI:
            logger.warning(f"[{session.audit_id}] generate() called in state {session.state.value}")
            return session

        audit_id = session.audit_id
        self._origins[audit_id] = origin
        session.attempts += 1
        attempt = Attempt(token=session.attempts, origin=origin)
        work = self.generator.run(audit_id, session.submission, session.scores, attempt)

        try:
            if smooth:
                report = await self._with_min_wait(work)
            else:
                report = await work
        except RateLimitExceeded as e:
            # Terminal for this submission; readers polling the status must not wait it out
            await self._mark_failed(audit_id)
            self._apply(session, attempt, GenerationState.RATE_LIMITED, rate_limit=e)
        except TransientProviderError as e:
            logger.warning(f"[{audit_id}] AI attempt {attempt.token} recoverable failure: {e.reason}")
            self._apply(session, attempt, GenerationState.PROVIDER_ERROR, provider_error=e)
        except AuditError as e:
            logger.error(f"[{audit_id}] AI attempt {attempt.token} failed: {e.code}: {e.message}")
            if not attempt.saved:
                await self._mark_failed(audit_id)
            self._apply(
                session, attempt, GenerationState.FAILED,
                error=e.code, ai_report=attempt.report,
            )
        else:
            self._apply(session, attempt, GenerationState.COMPLETED, ai_report=report)
        return session

    async def _with_min_wait(self, work: Awaitable):
        """Result of `work`, delivered no sooner than min_wait seconds."""
        result, _ = await asyncio.gather(work, self._sleep(self.min_wait), return_exceptions=True)
        if isinstance(result, BaseException):
            raise result
        return result

    def _apply(self, session: ReportSession, attempt: Attempt, target: GenerationState, **changes) -> None:
        if attempt.token != session.attempts or session.state is not GenerationState.AWAITING_AI:
            logger.info(
                f"[{session.audit_id}] Discarding {target.value} from abandoned attempt "
                f"{attempt.token} (now {session.state.value}, attempt {session.attempts})"
            )
            return
        for name, value in changes.items():
            if value is not None:
                setattr(session, name, value)
        self._advance(session, target)
        logger.info(f"[{session.audit_id}] Report flow -> {target.value}")

    def _advance(self, session: ReportSession, target: GenerationState) -> None:
        session.advance(target)
        session.updated_at = self._clock()

    async def _mark_failed(self, audit_id: str) -> None:
        """Best-effort failed status; never raises."""
        try:
            await self.store.mark_failed(audit_id)
        except Exception as e:
            logger.warning(f"[{audit_id}] Could not record failed status: {type(e).__name__}: {e}")
