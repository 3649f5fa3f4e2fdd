"""Remote resource downloading for the rewriter."""

from __future__ import annotations

import logging
import os
import tempfile
from http.cookiejar import LoadError, MozillaCookieJar
from pathlib import Path
from typing import Optional

import requests

from .config import FETCH_TIMEOUT, HEAD_TIMEOUT, MAX_FILE_BYTES, ConfigurationError
from .mimes import extension_for
from .utils import filename_from_url

logger = logging.getLogger("moodle_embedded.fetcher")

_CHUNK_SIZE = 64 * 1024


def load_cookie_jar(path: Path) -> MozillaCookieJar:
    """Load a curl/Netscape cookie file used to authenticate downloads."""
    jar = MozillaCookieJar(str(path))
    try:
        jar.load(ignore_discard=True, ignore_expires=True)
    except (LoadError, OSError) as exc:
        raise ConfigurationError(f"Unable to read cookie file {path}: {exc}") from exc
    return jar


def _declared_length(headers) -> int:
    raw = headers.get("Content-Length")
    if raw is None:
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


class ResourceFetcher:
    """Download linked files into ``storage_dir`` and report their local names."""

    def __init__(
        self,
        storage_dir: Path,
        session: Optional[requests.Session] = None,
        max_bytes: int = MAX_FILE_BYTES,
        timeout: float = FETCH_TIMEOUT,
        head_timeout: float = HEAD_TIMEOUT,
    ) -> None:
        self.storage_dir = Path(storage_dir)
        self.session = session or requests.Session()
        self.max_bytes = max_bytes
        self.timeout = timeout
        self.head_timeout = head_timeout

    @classmethod
    def with_cookies(cls, storage_dir: Path, cookie_path: Path) -> "ResourceFetcher":
        session = requests.Session()
        session.cookies = load_cookie_jar(cookie_path)
        return cls(storage_dir, session=session)

    def fetch(self, url: str) -> Optional[str]:
        """Save ``url`` locally and return the filename, or None if it was skipped."""
        filename = filename_from_url(url)
        if not filename:
            logger.warning("Skipping %s: no filename in URL path", url)
            return None

        try:
            resp = self.session.head(url, timeout=self.head_timeout, allow_redirects=True)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Failed to fetch headers for %s: %s", url, exc)
            return None

        length = _declared_length(resp.headers)
        if length == 0:
            logger.warning("Skipping %s: empty or undeclared Content-Length", url)
            return None
        if length > self.max_bytes:
            logger.warning(
                "Skipping %s: %d bytes exceeds limit of %d bytes",
                url,
                length,
                self.max_bytes,
            )
            return None

        if "." not in filename:
            extension = extension_for(resp.headers.get("Content-Type"))
            if extension:
                filename = f"{filename}.{extension}"

        destination = self.storage_dir / filename
        if destination.exists():
            logger.debug("Reusing existing file %s for %s", destination, url)
            return filename

        try:
            self._download(url, destination)
        except requests.RequestException as exc:
            logger.warning("Failed to download %s: %s", url, exc)
            return None
        except OSError as exc:
            logger.warning("Failed to write %s: %s", destination, exc)
            return None
        logger.debug("Saved %s to %s", url, destination)
        return filename

    def _download(self, url: str, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with self.session.get(url, timeout=self.timeout, stream=True) as resp:
            resp.raise_for_status()
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", suffix=".part", dir=destination.parent
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                        if chunk:
                            handle.write(chunk)
                os.replace(tmp_name, destination)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
                raise
