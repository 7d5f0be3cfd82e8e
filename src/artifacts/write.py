from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

from artifacts.utils import _write_json
from contract.artifacts import artifact_relpath, source_artifacts_relpath

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models import ContractArtifact

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Writes contract artifacts below an artifacts directory."""

    def __init__(self, artifacts_dir: Path) -> None:
        self.artifacts_dir = artifacts_dir

    def path_for(self, source_path: str, contract_name: str) -> Path:
        return self.artifacts_dir / artifact_relpath(source_path, contract_name)

    def write(
        self, source_path: str, contract_name: str, artifact: ContractArtifact
    ) -> Path:
        """Write one artifact, creating parent directories as needed."""
        path = self.path_for(source_path, contract_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_json(path, artifact)
        logger.debug("Wrote %s", path)
        return path

    def remove(self, source_path: str, contract_name: str) -> None:
        self.path_for(source_path, contract_name).unlink(missing_ok=True)

    def remove_source(self, source_path: str) -> None:
        """Delete every artifact emitted for a source."""
        directory = self.artifacts_dir / source_artifacts_relpath(source_path)
        if directory.is_dir():
            shutil.rmtree(directory)
            logger.debug("Removed artifacts of %s", source_path)
