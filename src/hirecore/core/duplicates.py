"""Duplicate application detection."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from rapidfuzz.distance import Levenshtein

from ..analysis import AnalysisGateway
from ..errors import AnalysisFailed
from ..repositories import ApplicationRepository
from ..schemas import Application, CandidateIdentity


@dataclass
class DuplicateConfig:
    """Thresholds for deterministic matching and escalation."""

    name_similarity_threshold: float = 0.8
    fallback_confidence: float = 95.0
    max_escalation_candidates: int = 5
    resume_snippet_chars: int = 500


@dataclass(slots=True)
class DuplicateMatch:
    """Outcome of a duplicate check; computed per request, never stored."""

    is_duplicate: bool
    matched_application_ids: list[str] = field(default_factory=list)
    confidence: float = 0.0
    matching_factors: list[str] = field(default_factory=list)


def name_similarity(first: str, second: str) -> float:
    """Normalized edit-distance similarity of two names in [0, 1]."""
    a = first.strip().lower()
    b = second.strip().lower()
    if a == b:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / max(len(a), len(b))


class DuplicateDetector:
    """Find existing applications that likely belong to the same candidate."""

    def __init__(
        self,
        *,
        applications: ApplicationRepository,
        gateway: AnalysisGateway,
        config: DuplicateConfig | None = None,
    ) -> None:
        self._applications = applications
        self._gateway = gateway
        self._config = config or DuplicateConfig()
        self._logger = structlog.get_logger(__name__)

    def detect(self, identity: CandidateIdentity, job_id: str | None = None) -> DuplicateMatch:
        matches = [
            app
            for app in self._applications.get_applications(job_id)
            if self._is_candidate_match(identity, app)
        ]
        if not matches:
            return DuplicateMatch(is_duplicate=False)

        if identity.resume_text and self._gateway.available:
            try:
                return self._escalate(identity, matches)
            except AnalysisFailed as exc:
                self._logger.warning(
                    "duplicates.escalation_failed",
                    candidate_email=identity.email,
                    match_count=len(matches),
                    error=str(exc),
                )

        return self._deterministic_result(identity, matches)

    def _is_candidate_match(self, identity: CandidateIdentity, app: Application) -> bool:
        if app.candidate_email.lower() == identity.email.lower():
            return True
        if identity.phone and app.candidate_phone == identity.phone:
            return True
        similarity = name_similarity(identity.name, app.candidate_name)
        return similarity >= self._config.name_similarity_threshold

    def _deterministic_result(
        self,
        identity: CandidateIdentity,
        matches: list[Application],
    ) -> DuplicateMatch:
        factors: list[str] = []
        if any(app.candidate_email.lower() == identity.email.lower() for app in matches):
            factors.append("Email match")
        if identity.phone and any(app.candidate_phone == identity.phone for app in matches):
            factors.append("Phone match")
        if not factors:
            factors.append("Similar name")
        return DuplicateMatch(
            is_duplicate=True,
            matched_application_ids=[app.id for app in matches],
            confidence=self._config.fallback_confidence,
            matching_factors=factors,
        )

    def _escalate(self, identity: CandidateIdentity, matches: list[Application]) -> DuplicateMatch:
        considered = matches[: self._config.max_escalation_candidates]
        assessment = self._gateway.assess_duplicates(
            new_candidate_summary=self._summarize_identity(identity),
            existing_summaries=[self._summarize_application(app) for app in considered],
        )

        known_ids = {app.id for app in considered}
        accepted = [i for i in assessment.duplicate_application_ids if i in known_ids]
        rejected = [i for i in assessment.duplicate_application_ids if i not in known_ids]
        if rejected:
            self._logger.warning("duplicates.unknown_ids", ids=rejected)
        if assessment.is_duplicate and not accepted:
            self._logger.warning(
                "duplicates.escalation_unmatched", candidate_email=identity.email
            )
            return self._deterministic_result(identity, matches)

        return DuplicateMatch(
            is_duplicate=assessment.is_duplicate,
            matched_application_ids=list(dict.fromkeys(accepted)),
            confidence=assessment.confidence,
            matching_factors=list(assessment.matching_factors),
        )

    def _summarize_identity(self, identity: CandidateIdentity) -> str:
        snippet = (identity.resume_text or "")[: self._config.resume_snippet_chars]
        return (
            f"Email: {identity.email}\n"
            f"Name: {identity.name}\n"
            f"Phone: {identity.phone or 'N/A'}\n"
            f"Resume snippet: {snippet}..."
        )

    @staticmethod
    def _summarize_application(app: Application) -> str:
        return (
            f"Application ID: {app.id}\n"
            f"   Email: {app.candidate_email}\n"
            f"   Name: {app.candidate_name}\n"
            f"   Phone: {app.candidate_phone or 'N/A'}\n"
            f"   Current Company: {app.current_company or 'N/A'}"
        )
