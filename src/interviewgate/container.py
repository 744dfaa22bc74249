"""Dependency injection container for the interview gate."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .core import (
    ApplicationDispatcher,
    DispatchConfig,
    JobCatalog,
    JobMatcher,
    QuestionGenerator,
    SessionCache,
    SkillExtractor,
    VerificationAggregator,
    VerificationConfig,
)
from .mail import SMTPTransport
from .oracles import GeminiClient, GeminiEvaluationOracle, GeminiQuestionOracle
from .schemas.config import AppConfig, load_config
from .workflow import AuditLogger, InterviewWorkflow


def _audit_logger(path: str | None) -> AuditLogger | None:
    return AuditLogger(path) if path else None


class InterviewContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    gemini_client = providers.Singleton(
        GeminiClient,
        api_key=config.oracle.api_key,
        model=config.oracle.model,
        endpoint=config.oracle.endpoint,
        timeout=config.oracle.timeout,
    )
    question_oracle = providers.Singleton(GeminiQuestionOracle, client=gemini_client)
    evaluation_oracle = providers.Singleton(GeminiEvaluationOracle, client=gemini_client)

    mail_transport = providers.Singleton(
        SMTPTransport,
        host=config.dispatch.smtp.host,
        port=config.dispatch.smtp.port,
        username=config.dispatch.smtp.username,
        password=config.dispatch.smtp.password,
        use_tls=config.dispatch.smtp.use_tls,
        sender_name=config.dispatch.smtp.sender_name,
        sender_email=config.dispatch.smtp.sender_email,
        timeout=config.dispatch.smtp.timeout,
    )

    skill_extractor = providers.Singleton(SkillExtractor)
    question_generator = providers.Singleton(QuestionGenerator, oracle=question_oracle)
    aggregator = providers.Singleton(
        VerificationAggregator,
        oracle=evaluation_oracle,
        config=providers.Factory(VerificationConfig, max_workers=config.interview.max_workers),
    )

    job_catalog = providers.Singleton(JobCatalog)
    job_matcher = providers.Singleton(JobMatcher, catalog=job_catalog)

    dispatcher = providers.Singleton(
        ApplicationDispatcher,
        transport=mail_transport,
        config=providers.Factory(DispatchConfig, delay_seconds=config.dispatch.delay_seconds),
    )

    question_store = providers.Singleton(
        SessionCache,
        name="questions",
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )
    verification_cache = providers.Singleton(
        SessionCache,
        name="verifications",
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )

    audit_logger = providers.Singleton(_audit_logger, config.audit_log)

    workflow = providers.Singleton(
        InterviewWorkflow,
        extractor=skill_extractor,
        question_generator=question_generator,
        aggregator=aggregator,
        catalog=job_catalog,
        matcher=job_matcher,
        dispatcher=dispatcher,
        question_store=question_store,
        verification_cache=verification_cache,
        audit_logger=audit_logger,
    )


def create_container(
    *,
    settings: dict[str, Any] | AppConfig | None = None,
    use_environment: bool = True,
) -> InterviewContainer:
    """Instantiate container with validated settings and environment secrets."""

    app_config = settings if isinstance(settings, AppConfig) else load_config(settings or {})
    if use_environment:
        app_config = app_config.with_environment()

    container = InterviewContainer()
    container.config.from_dict(app_config.to_settings())
    return container
