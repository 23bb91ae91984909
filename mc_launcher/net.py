"""
Plain unauthenticated GET helpers on top of urllib.

No retries: any failure is raised as UpstreamError (network / status /
decoding) or InstallError (local file could not be written).
"""
from __future__ import annotations

import json
import shutil
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Optional

from . import __version__
from .errors import InstallError, UpstreamError
from .logging_setup import get_logger

log = get_logger("mc.launcher.net")

USER_AGENT = f"mc-launcher/{__version__}"


def _open(url: str, stage: str, timeout: Optional[float] = None):
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        return urllib.request.urlopen(req, **kwargs)
    except urllib.error.HTTPError as e:
        raise UpstreamError(stage, f"{url} returned HTTP {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise UpstreamError(stage, f"request to {url} failed: {e.reason}") from e
    except OSError as e:
        raise UpstreamError(stage, f"request to {url} failed: {e}") from e


def fetch_text(url: str, *, stage: str, timeout: Optional[float] = None) -> str:
    log.debug("GET %s", url)
    with _open(url, stage, timeout) as response:
        try:
            return response.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise UpstreamError(stage, f"failed to read response from {url}: {e}") from e


def fetch_json(url: str, *, stage: str, timeout: Optional[float] = None) -> Any:
    body = fetch_text(url, stage=stage, timeout=timeout)
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise UpstreamError(stage, f"failed to parse JSON from {url}: {e}") from e


def download_file(url: str, dest: Path, *, stage: str, timeout: Optional[float] = None) -> Path:
    """
    Stream ``url`` into ``dest``.

    The destination is created before the request is sent so local problems
    surface without touching the network. A partial file is removed on error.
    """
    dest = Path(dest)
    try:
        out = open(dest, "wb")
    except OSError as e:
        raise InstallError(stage, f"failed to create {dest}: {e}") from e

    log.info("Downloading %s -> %s", url, dest)
    try:
        with out:
            with _open(url, stage, timeout) as response:
                try:
                    shutil.copyfileobj(response, out)
                except OSError as e:
                    raise UpstreamError(stage, f"failed to save {dest.name}: {e}") from e
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    return dest
