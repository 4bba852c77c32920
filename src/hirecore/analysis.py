"""Résumé analysis requests and the HTTP client that carries them."""

from __future__ import annotations

import http.client
import json
from dataclasses import dataclass
from typing import Any, Protocol, Sequence, runtime_checkable
from urllib import request

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import AnalysisFailed
from .schemas import AnalysisResult, clamp_score

ANALYSIS_TEMPERATURE = 0.3
DUPLICATE_TEMPERATURE = 0.1
QUESTIONS_TEMPERATURE = 0.4

_ANALYSIS_SHAPE = """{
  "overallScore": number (0-100),
  "skillsMatch": ["skill1", "skill2"],
  "experienceLevel": "entry|mid|senior|lead|executive",
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "culturalFit": number (0-100),
  "technicalCompetency": number (0-100),
  "leadershipPotential": number (0-100),
  "recommendations": "detailed recommendation",
  "redFlags": ["flag1", "flag2"],
  "interviewQuestions": ["question1", "question2"],
  "salaryRange": {"min": number, "max": number, "currency": "USD"},
  "competencyBreakdown": {
    "technical": number (0-100),
    "communication": number (0-100),
    "problemSolving": number (0-100),
    "teamwork": number (0-100),
    "adaptability": number (0-100)
  }
}"""

_DUPLICATE_SHAPE = """{
  "isDuplicate": boolean,
  "duplicateApplicationIds": ["id1", "id2"],
  "confidence": number (0-100),
  "matchingFactors": ["factor1", "factor2"]
}"""


@dataclass
class AnalysisConfig:
    """Connection settings for the analysis service."""

    endpoint: str | None = None
    api_key: str | None = None
    model: str = "gpt-4o"
    timeout: float = 30.0


class DuplicateAssessment(BaseModel):
    """Validated verdict returned by duplicate escalation."""

    is_duplicate: bool
    duplicate_application_ids: list[str] = Field(default_factory=list)
    confidence: float = 0.0
    matching_factors: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        clamped = clamp_score(value)
        return 0.0 if clamped is None else clamped

    @field_validator("duplicate_application_ids", "matching_factors", mode="before")
    @classmethod
    def default_list(cls, value: Any) -> Any:
        return [] if value is None else value


@runtime_checkable
class AnalysisClient(Protocol):
    """Transport for prompts that expect a JSON object back."""

    def complete(self, prompt: str, *, temperature: float) -> str:
        """Return the raw response content or raise AnalysisFailed."""


class HTTPAnalysisClient:
    """Chat-completions style HTTP client for the analysis service."""

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        *,
        model: str = "gpt-4o",
        timeout: float = 30.0,
    ):
        self._endpoint = endpoint
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def complete(self, prompt: str, *, temperature: float) -> str:
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
            "temperature": temperature,
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except (OSError, http.client.HTTPException) as exc:
            self._logger.warning("analysis.request_failed", endpoint=self._endpoint, error=str(exc))
            raise AnalysisFailed(f"Analysis request failed: {exc}") from exc

        try:
            return json.loads(body)["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AnalysisFailed("Analysis response has no message content") from exc


class AnalysisGateway:
    """Build evaluation prompts and normalize what comes back."""

    def __init__(self, client: AnalysisClient | None = None) -> None:
        self._client = client
        self._logger = structlog.get_logger(__name__)

    @property
    def available(self) -> bool:
        return self._client is not None

    def analyze(
        self,
        *,
        job_title: str,
        job_requirements: str,
        resume_text: str,
        company_description: str = "",
    ) -> AnalysisResult:
        """Evaluate a résumé against a job; numeric fields come back clamped."""
        prompt = build_analysis_prompt(
            job_title=job_title,
            job_requirements=job_requirements,
            resume_text=resume_text,
            company_description=company_description,
        )
        payload = self._request(prompt, temperature=ANALYSIS_TEMPERATURE, kind="analysis")
        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError as exc:
            self._logger.warning("analysis.invalid_payload", kind="analysis", error=str(exc))
            raise AnalysisFailed("Analysis response failed validation") from exc

    def assess_duplicates(
        self,
        *,
        new_candidate_summary: str,
        existing_summaries: Sequence[str],
    ) -> DuplicateAssessment:
        prompt = build_duplicate_prompt(new_candidate_summary, existing_summaries)
        payload = self._request(prompt, temperature=DUPLICATE_TEMPERATURE, kind="duplicates")
        try:
            return DuplicateAssessment.model_validate(payload)
        except ValidationError as exc:
            self._logger.warning("analysis.invalid_payload", kind="duplicates", error=str(exc))
            raise AnalysisFailed("Duplicate assessment failed validation") from exc

    def generate_interview_questions(
        self,
        *,
        job_title: str,
        job_requirements: str,
        strengths: Sequence[str],
        weaknesses: Sequence[str],
    ) -> list[str]:
        prompt = build_questions_prompt(job_title, job_requirements, strengths, weaknesses)
        payload = self._request(prompt, temperature=QUESTIONS_TEMPERATURE, kind="questions")
        questions = payload.get("questions")
        if not isinstance(questions, list):
            raise AnalysisFailed("Question response has no 'questions' list")
        return [str(question) for question in questions if question]

    def _request(self, prompt: str, *, temperature: float, kind: str) -> dict[str, Any]:
        if self._client is None:
            raise AnalysisFailed("No analysis client configured")
        content = self._client.complete(prompt, temperature=temperature)
        try:
            payload = json.loads(content)
        except (TypeError, ValueError) as exc:
            self._logger.warning("analysis.unparsable", kind=kind)
            raise AnalysisFailed("Analysis response is not JSON") from exc
        if not isinstance(payload, dict):
            raise AnalysisFailed("Analysis response must be a JSON object")
        return payload


def build_analysis_prompt(
    *,
    job_title: str,
    job_requirements: str,
    resume_text: str,
    company_description: str = "",
) -> str:
    return (
        "You are an expert recruiter analyzing a candidate's resume for a specific position. "
        "Provide a comprehensive analysis in JSON format.\n\n"
        f"JOB DETAILS:\nTitle: {job_title}\nRequirements: {job_requirements}\n"
        f"Company: {company_description}\n\n"
        f"RESUME:\n{resume_text}\n\n"
        f"Analyze the candidate and respond with JSON containing:\n{_ANALYSIS_SHAPE}\n\n"
        "Include 8-10 interview questions. Scores are integers from 0 to 100."
    )


def build_duplicate_prompt(new_candidate_summary: str, existing_summaries: Sequence[str]) -> str:
    existing = "\n".join(
        f"{index}. {summary}" for index, summary in enumerate(existing_summaries, start=1)
    )
    return (
        "Analyze if this candidate is a duplicate of existing applications.\n\n"
        f"NEW CANDIDATE:\n{new_candidate_summary}\n\n"
        f"EXISTING APPLICATIONS:\n{existing}\n\n"
        f"Respond with JSON:\n{_DUPLICATE_SHAPE}"
    )


def build_questions_prompt(
    job_title: str,
    job_requirements: str,
    strengths: Sequence[str],
    weaknesses: Sequence[str],
) -> str:
    return (
        f"Generate 8-10 targeted interview questions for a {job_title} position.\n\n"
        f"Job Requirements: {job_requirements}\n"
        f"Candidate Strengths: {', '.join(strengths)}\n"
        f"Candidate Weaknesses: {', '.join(weaknesses)}\n\n"
        "Cover technical competency, the strengths above, the weaknesses above, "
        "cultural fit and problem solving.\n\n"
        'Return JSON: {"questions": ["question1", "question2", ...]}'
    )
