"""Artifact models exposed at the build output boundary."""

from artifacts.models import ContractArtifact

__all__ = ["ContractArtifact"]
