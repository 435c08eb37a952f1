import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from datamodels import AnalysisRecord
from structuredllm.llm_wrapper import IntegrationError

logger = logging.getLogger(__name__)


class AnalysisStore(ABC):
    """Somewhere finished analyses can be kept."""

    @abstractmethod
    def save(self, record: AnalysisRecord) -> str:
        """Store the record and return its id."""


class JsonFileStore(AnalysisStore):
    """One JSON document per analysis, named ``<id>.json``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, record_id: str) -> Path:
        return self.directory / f"{record_id}.json"

    def save(self, record: AnalysisRecord) -> str:
        record_id = uuid.uuid4().hex
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(record_id).write_text(record.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise IntegrationError(f"Could not save analysis: {e}") from e
        logger.info("Saved analysis %s", record_id)
        return record_id

    def load(self, record_id: str) -> AnalysisRecord:
        try:
            return AnalysisRecord.model_validate_json(
                self._path(record_id).read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            raise IntegrationError(f"Could not load analysis {record_id}: {e}") from e
