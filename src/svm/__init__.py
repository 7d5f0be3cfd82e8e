"""Solidity compiler version manager."""

from svm.manager import SolidityVersionManager, release_asset, release_url

__all__ = ["SolidityVersionManager", "release_asset", "release_url"]
