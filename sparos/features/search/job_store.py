"""Stores for the in-flight search job record.

The record is advisory: after a restart the stored query is replayed from
scratch, nothing from the interrupted pipeline is resumed.
"""

from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from .models import SearchJob

logger = structlog.get_logger(__name__)


class InMemoryJobStore:
    """Keeps the job record for the lifetime of the process only."""

    def __init__(self, job: Optional[SearchJob] = None):
        self._job = job

    def load(self) -> Optional[SearchJob]:
        return self._job

    def save(self, job: SearchJob) -> None:
        self._job = job

    def clear(self) -> None:
        self._job = None


class JsonFileJobStore:
    """Persists the job record as a JSON document on disk.

    Reads and writes are synchronous. The record is a few dozen bytes and is
    written once per submit and once per finish, and ``SearchPipeline.submit``
    must have saved it before it returns.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[SearchJob]:
        """Read the stored job; unreadable files are treated as no job."""
        if not self.path.exists():
            return None
        try:
            return SearchJob.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.warning(
                "Ignoring unreadable search job record",
                path=str(self.path),
                error=str(e),
            )
            return None

    def save(self, job: SearchJob) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(job.model_dump_json(), encoding="utf-8")
        tmp_path.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
