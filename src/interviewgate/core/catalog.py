"""In-memory job catalog loaded from CSV sources."""

from __future__ import annotations

import csv
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

import structlog

from ..errors import CatalogLoadError
from ..schemas import JobPosting, parse_skills

CATALOG_COLUMNS: tuple[str, ...] = (
    "company_name",
    "job_role",
    "required_skills",
    "company_email",
    "job_description",
    "location",
    "salary_range",
)


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable view of the catalog at one point in time."""

    jobs: tuple[JobPosting, ...] = ()
    index: Mapping[int, JobPosting] = field(default_factory=dict)
    source: str | None = None

    def __len__(self) -> int:
        return len(self.jobs)


class JobCatalog:
    """Process-wide job catalog replaced wholesale on every load.

    A load parses the complete source before publishing it, so readers see
    either the previous or the new snapshot and a failed load leaves the
    previous snapshot in place.
    """

    def __init__(self, *, skills_delimiter: str = ",") -> None:
        self._snapshot = CatalogSnapshot()
        self._load_lock = threading.Lock()
        self._delimiter = skills_delimiter
        self._logger = structlog.get_logger(__name__)

    def load(self, source: str | Path) -> int:
        path = Path(source)
        with self._load_lock:
            snapshot = self._build_snapshot(path)
            self._snapshot = snapshot
        self._logger.info("catalog.loaded", source=str(path), jobs=len(snapshot))
        return len(snapshot)

    def load_rows(self, rows: Iterable[Mapping[str, str | None]], *, source: str | None = None) -> int:
        """Replace the catalog from already-parsed rows."""
        with self._load_lock:
            snapshot = self._snapshot_from_rows(rows, source)
            self._snapshot = snapshot
        self._logger.info("catalog.loaded", source=source, jobs=len(snapshot))
        return len(snapshot)

    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def all(self) -> tuple[JobPosting, ...]:
        return self._snapshot.jobs

    def by_id(self, job_id: int) -> JobPosting | None:
        return self._snapshot.index.get(job_id)

    def __len__(self) -> int:
        return len(self._snapshot)

    def _build_snapshot(self, path: Path) -> CatalogSnapshot:
        if not path.is_file():
            raise CatalogLoadError(f"Jobs CSV file not found: {path}")
        try:
            with path.open("r", encoding="utf-8-sig", newline="") as handle:
                rows = list(csv.DictReader(handle))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            self._logger.warning("catalog.load_failed", source=str(path), error=str(exc))
            raise CatalogLoadError(f"Failed to load jobs CSV: {exc}") from exc
        return self._snapshot_from_rows(rows, str(path))

    def _snapshot_from_rows(
        self,
        rows: Iterable[Mapping[str, str | None]],
        source: str | None,
    ) -> CatalogSnapshot:
        jobs: list[JobPosting] = []
        for row in rows:
            jobs.append(self._parse_row(len(jobs) + 1, row))
        return CatalogSnapshot(
            jobs=tuple(jobs),
            index={job.id: job for job in jobs},
            source=source,
        )

    def _parse_row(self, job_id: int, row: Mapping[str, str | None]) -> JobPosting:
        values = {column: _cell(row, column) for column in CATALOG_COLUMNS}
        return JobPosting(
            id=job_id,
            company_name=values["company_name"],
            job_role=values["job_role"],
            required_skills=parse_skills(values["required_skills"], self._delimiter),
            company_email=values["company_email"],
            job_description=values["job_description"],
            location=values["location"],
            salary_range=values["salary_range"],
        )


def _cell(row: Mapping[str, str | None], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


__all__ = ["CATALOG_COLUMNS", "CatalogSnapshot", "JobCatalog"]
