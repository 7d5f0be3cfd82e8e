"""Lifecycle of the Solidity compiler binaries.

Compilers are cached as ``<cache_dir>/solidity-<version>``. A version becomes
visible in the cache only through the final rename of a fully downloaded,
executable file; downloads are staged in a temporary directory inside the
cache directory so a partial file is never mistaken for a cached one.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
import time
from pathlib import Path

import httpx
from semantic_version import Version

from config.settings import default_svm_dir
from errors import FetchError

logger = logging.getLogger(__name__)

RELEASES_URL = "https://github.com/ethereum/solidity/releases/download"

BINARY_PREFIX = "solidity-"

_STAGING_PREFIX = "solc-download-"

# staging dirs untouched this long belong to an interrupted download
_STALE_STAGING_SECONDS = 3600

_RELEASE_ASSETS = {
    "linux": "solc-static-linux",
    "darwin": "solc-macos",
    "win32": "solc-windows.exe",
}


def release_asset(platform: str | None = None) -> str:
    """Return the release asset name for a host platform."""
    platform = platform or sys.platform
    for prefix, asset in _RELEASE_ASSETS.items():
        if platform.startswith(prefix):
            return asset
    msg = f"No solc release binary for platform {platform!r}"
    raise FetchError(msg)


def release_url(version: str, platform: str | None = None) -> str:
    return f"{RELEASES_URL}/v{version}/{release_asset(platform)}"


class SolidityVersionManager:
    """Resolves compiler versions to local executables, downloading on demand."""

    def __init__(
        self,
        cache_dir: Path | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.cache_dir = cache_dir if cache_dir is not None else default_svm_dir()
        self._client = client

    def binary_path(self, version: str) -> Path:
        return self.cache_dir / f"{BINARY_PREFIX}{version}"

    def installed(self) -> list[str]:
        """Return the cached versions, sorted by semantic version."""
        if not self.cache_dir.is_dir():
            return []
        versions: list[Version] = []
        for path in self.cache_dir.glob(f"{BINARY_PREFIX}*"):
            if not path.is_file():
                continue
            try:
                versions.append(Version(path.name.removeprefix(BINARY_PREFIX)))
            except ValueError:
                continue
        return [str(version) for version in sorted(versions)]

    def resolve(self, version: str) -> Path:
        """Return the path of the compiler for ``version``.

        A cached compiler is returned without touching the network; otherwise
        the release binary is downloaded first.

        Raises:
            FetchError: If the version is malformed or the download or
                installation fails.
        """
        try:
            Version(version)
        except ValueError as exc:
            msg = f"Invalid solc version {version!r}: {exc}"
            raise FetchError(msg) from exc

        path = self.binary_path(version)
        if path.is_file():
            return path

        logger.info("Downloading solc compiler (%s)...", version)
        self._download(version, path)
        return path

    def _prepare_cache_dir(self) -> None:
        if self.cache_dir.exists() and not self.cache_dir.is_dir():
            msg = f"Compiler cache path is not a directory: {self.cache_dir}"
            raise FetchError(msg)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Cannot create compiler cache {self.cache_dir}: {exc}"
            raise FetchError(msg) from exc
        self._remove_stale_staging()

    def _remove_stale_staging(self) -> None:
        cutoff = time.time() - _STALE_STAGING_SECONDS
        for path in self.cache_dir.glob(f"{_STAGING_PREFIX}*"):
            try:
                if not path.is_dir() or path.stat().st_mtime >= cutoff:
                    continue
            except OSError:
                continue
            shutil.rmtree(path, ignore_errors=True)
            logger.debug("Removed stale download directory %s", path)

    def _download(self, version: str, dst: Path) -> None:
        self._prepare_cache_dir()
        url = release_url(version)

        try:
            staging_dir = Path(
                tempfile.mkdtemp(prefix=_STAGING_PREFIX, dir=self.cache_dir)
            )
        except OSError as exc:
            msg = f"Cannot create staging directory in {self.cache_dir}: {exc}"
            raise FetchError(msg) from exc

        try:
            staged = staging_dir / dst.name
            self._fetch(url, staged)
            staged.chmod(0o755)
            os.replace(staged, dst)
        except httpx.HTTPError as exc:
            msg = f"Failed to download solc {version} from {url}: {exc}"
            raise FetchError(msg) from exc
        except OSError as exc:
            msg = f"Failed to install solc {version} into {dst}: {exc}"
            raise FetchError(msg) from exc
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

        logger.info("Installed solc %s at %s", version, dst)

    def _fetch(self, url: str, target: Path) -> None:
        client = self._client or httpx.Client(follow_redirects=True, timeout=None)
        try:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                with target.open("wb") as out:
                    for chunk in response.iter_bytes():
                        out.write(chunk)
        finally:
            if self._client is None:
                client.close()


__all__ = [
    "BINARY_PREFIX",
    "RELEASES_URL",
    "SolidityVersionManager",
    "release_asset",
    "release_url",
]
