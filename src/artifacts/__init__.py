"""Build artifact models and writers."""

from artifacts.models import ContractArtifact
from artifacts.write import ArtifactWriter

__all__ = ["ArtifactWriter", "ContractArtifact"]
