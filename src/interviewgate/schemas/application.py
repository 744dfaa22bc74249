from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ApplicationStatus = Literal["sent", "failed"]


class ApplicationTarget(BaseModel):
    """A matched job an application is sent to."""

    id: int | None = None
    company_name: str = ""
    job_role: str = ""
    company_email: str = ""

    model_config = ConfigDict(extra="ignore")


class ApplicationRecord(BaseModel):
    """Terminal status of one dispatch attempt."""

    company_name: str
    job_role: str
    company_email: str
    status: ApplicationStatus
    timestamp: str
    error_detail: str | None = None

    model_config = ConfigDict(extra="forbid")


class DispatchReport(BaseModel):
    """Outcome of one dispatch batch, records kept in ranking order."""

    records: list[ApplicationRecord] = Field(default_factory=list)

    @property
    def total_sent(self) -> int:
        return sum(1 for record in self.records if record.status == "sent")

    @property
    def total_failed(self) -> int:
        return sum(1 for record in self.records if record.status == "failed")

    def summary(self) -> dict:
        return {
            "total_sent": self.total_sent,
            "total_failed": self.total_failed,
            "companies_applied": [
                record.company_name for record in self.records if record.status == "sent"
            ],
        }
