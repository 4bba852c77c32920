"""Dependency injection container for the hiring core."""

from __future__ import annotations

from typing import Any, Callable

from dependency_injector import containers, providers

from .analysis import AnalysisConfig, AnalysisGateway, HTTPAnalysisClient
from .core import (
    CandidateRanker,
    DuplicateConfig,
    DuplicateDetector,
    InterviewLifecycleManager,
    InterviewSlotAllocator,
    LifecycleConfig,
    RankingConfig,
    SchedulingConfig,
)
from .notifications import InterviewNotifier, LoggingDispatcher, SESNotificationDispatcher
from .repositories import InMemoryApplicationRepository, InMemoryInterviewRepository
from .service import HiringService


class HiringContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    ranking_config = providers.Object(None)
    duplicate_config = providers.Object(None)
    scheduling_config = providers.Object(None)
    lifecycle_config = providers.Object(None)
    now_provider = providers.Object(None)
    audit_logger = providers.Object(None)

    application_repository = providers.Singleton(InMemoryApplicationRepository)
    interview_repository = providers.Singleton(InMemoryInterviewRepository)

    analysis_client = providers.Object(None)
    analysis_gateway = providers.Singleton(AnalysisGateway, client=analysis_client)

    dispatcher = providers.Singleton(LoggingDispatcher)
    notifier = providers.Singleton(InterviewNotifier, dispatcher=dispatcher)

    duplicate_detector = providers.Singleton(
        DuplicateDetector,
        applications=application_repository,
        gateway=analysis_gateway,
        config=duplicate_config,
    )
    candidate_ranker = providers.Singleton(
        CandidateRanker,
        applications=application_repository,
        config=ranking_config,
    )
    slot_allocator = providers.Singleton(
        InterviewSlotAllocator,
        interviews=interview_repository,
        config=scheduling_config,
        now_provider=now_provider,
    )
    lifecycle_manager = providers.Singleton(
        InterviewLifecycleManager,
        applications=application_repository,
        interviews=interview_repository,
        allocator=slot_allocator,
        notifier=notifier,
        config=lifecycle_config,
        audit_logger=audit_logger,
    )

    service = providers.Factory(
        HiringService,
        applications=application_repository,
        gateway=analysis_gateway,
        detector=duplicate_detector,
        ranker=candidate_ranker,
        allocator=slot_allocator,
        lifecycle=lifecycle_manager,
    )


def create_container(
    *,
    settings: dict | None = None,
    applications: Any | None = None,
    interviews: Any | None = None,
    analysis_client: Any | None = None,
    dispatcher: Any | None = None,
    audit_logger: Any | None = None,
    now_provider: Callable[[], Any] | None = None,
) -> HiringContainer:
    """Instantiate container with optional overrides."""

    container = HiringContainer()

    if applications is not None:
        container.application_repository.override(providers.Object(applications))
    if interviews is not None:
        container.interview_repository.override(providers.Object(interviews))
    if analysis_client is not None:
        container.analysis_client.override(providers.Object(analysis_client))
    if dispatcher is not None:
        container.dispatcher.override(providers.Object(dispatcher))
    if audit_logger is not None:
        container.audit_logger.override(providers.Object(audit_logger))
    if now_provider is not None:
        container.now_provider.override(providers.Object(now_provider))

    if not settings:
        return container

    if "ranking" in settings:
        container.ranking_config.override(providers.Object(RankingConfig(**settings["ranking"])))

    if "duplicates" in settings:
        container.duplicate_config.override(
            providers.Object(DuplicateConfig(**settings["duplicates"]))
        )

    if "scheduling" in settings:
        scheduling = dict(settings["scheduling"])
        if "weekdays" in scheduling:
            scheduling["weekdays"] = tuple(scheduling["weekdays"])
        container.scheduling_config.override(providers.Object(SchedulingConfig(**scheduling)))

    if "lifecycle" in settings:
        container.lifecycle_config.override(
            providers.Object(LifecycleConfig(**settings["lifecycle"]))
        )

    analysis = AnalysisConfig(**settings.get("analysis", {}))
    if analysis.endpoint and analysis_client is None:
        container.analysis_client.override(
            providers.Singleton(
                HTTPAnalysisClient,
                analysis.endpoint,
                analysis.api_key,
                model=analysis.model,
                timeout=analysis.timeout,
            )
        )

    notifications = settings.get("notifications", {})
    if notifications.get("backend") == "ses" and dispatcher is None:
        if not notifications.get("sender"):
            raise ValueError("SES notifications require a sender address")
        container.dispatcher.override(
            providers.Singleton(
                SESNotificationDispatcher,
                notifications["sender"],
                region=notifications.get("region") or "us-east-1",
            )
        )
    if notifications.get("team_name"):
        container.notifier.override(
            providers.Singleton(
                InterviewNotifier,
                dispatcher=container.dispatcher,
                team_name=notifications["team_name"],
            )
        )

    return container
