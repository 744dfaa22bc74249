"""Sequential application dispatch with per-item failure isolation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import pendulum
import structlog

from ..errors import DispatchError
from ..mail import Attachment, MailTransport, compose_application
from ..schemas import ApplicationRecord, ApplicationTarget, CandidateInfo, DispatchReport


@dataclass
class DispatchConfig:
    """Pause inserted between consecutive sends."""

    delay_seconds: float = 1.0


class ApplicationDispatcher:
    """Send one application per matched job, strictly one at a time."""

    def __init__(
        self,
        transport: MailTransport,
        *,
        config: DispatchConfig | None = None,
        sleeper: Callable[[float], Any] | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._transport = transport
        self._config = config or DispatchConfig()
        self._sleep = sleeper or time.sleep
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def dispatch_all(
        self,
        targets: Sequence[ApplicationTarget],
        candidate: CandidateInfo,
        attachment: Attachment | None = None,
    ) -> DispatchReport:
        records: list[ApplicationRecord] = []
        for position, target in enumerate(targets):
            if position and self._config.delay_seconds > 0:
                self._sleep(self._config.delay_seconds)
            records.append(self._dispatch_one(target, candidate, attachment))

        report = DispatchReport(records=records)
        self._logger.info(
            "dispatch.completed",
            total_sent=report.total_sent,
            total_failed=report.total_failed,
        )
        return report

    def _dispatch_one(
        self,
        target: ApplicationTarget,
        candidate: CandidateInfo,
        attachment: Attachment | None,
    ) -> ApplicationRecord:
        try:
            if not target.company_email:
                raise DispatchError(f"No company email for {target.company_name or 'job'}")
            self._transport.send(compose_application(target, candidate, attachment))
        except DispatchError as exc:
            self._logger.warning(
                "dispatch.failed",
                company=target.company_name,
                email=target.company_email,
                error=exc.message,
            )
            return self._record(target, "failed", error_detail=exc.message)
        except Exception as exc:  # noqa: BLE001
            self._logger.exception(
                "dispatch.unexpected_error",
                company=target.company_name,
                email=target.company_email,
            )
            return self._record(target, "failed", error_detail=f"{type(exc).__name__}: {exc}")
        return self._record(target, "sent")

    def _record(
        self,
        target: ApplicationTarget,
        status: str,
        *,
        error_detail: str | None = None,
    ) -> ApplicationRecord:
        return ApplicationRecord(
            company_name=target.company_name,
            job_role=target.job_role,
            company_email=target.company_email,
            status=status,  # type: ignore[arg-type]
            timestamp=self._now_provider().to_iso8601_string(),
            error_detail=error_detail,
        )
