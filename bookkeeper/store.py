"""Persistence of company snapshots."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .base import BookkeeperError
from .company import Company

logger = logging.getLogger(__name__)


class Repository(Protocol):
    def load(self, company_id: str) -> Company: ...

    def save(self, company: Company) -> None: ...


@dataclass
class JsonFileRepository:
    """Store every company as `<company_id>.json` in *directory*."""

    directory: str | Path

    @property
    def base(self) -> Path:
        return Path(self.directory)

    def path(self, company_id: str) -> Path:
        return self.base / f"{company_id}.json"

    def company_ids(self) -> list[str]:
        return sorted(p.stem for p in self.base.glob("*.json"))

    def load(self, company_id: str) -> Company:
        BookkeeperError.must_exist(self.company_ids(), company_id, "Company")
        return Company.load(self.path(company_id))

    def save(self, company: Company) -> None:
        self.base.mkdir(parents=True, exist_ok=True)
        company.save(self.path(company.id), allow_overwrite=True)
        logger.debug("Saved company %s to %s", company.name, self.path(company.id))

    def delete(self, company_id: str) -> None:
        BookkeeperError.must_exist(self.company_ids(), company_id, "Company")
        self.path(company_id).unlink()
