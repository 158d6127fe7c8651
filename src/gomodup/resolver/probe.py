"""
Transport Probe

The I/O boundary to the ``go`` command, the oracle for which module
versions exist. No decision logic lives here.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..shared.errors import TransportError
from ..utils.config import DEFAULT_GO_BINARY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionCandidate:
    """One probe unit: does ``module_path`` exist at ``query_version``."""
    module_path: str
    query_version: str

    @property
    def query(self) -> str:
        return f"{self.module_path}@{self.query_version}"

    def __str__(self) -> str:
        return self.query


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one candidate query, in the order the batch was issued."""
    version: str = ""
    error_text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.error_text


class Probe(ABC):
    """Interface to the module version oracle."""

    @abstractmethod
    def query_batch(self, candidates: Sequence[VersionCandidate]) -> List[ProbeResult]:
        """Query all candidates in one call; results keep the candidates' order."""
        raise NotImplementedError

    @abstractmethod
    def query_version(self, query: str) -> str:
        """Resolve ``module@version`` to a concrete version string."""
        raise NotImplementedError


def decode_json_stream(text: str) -> List[dict]:
    """
    Decode concatenated JSON objects as printed by ``go list -json``.

    Raises:
        ValueError: if the stream is not a sequence of JSON values
    """
    decoder = json.JSONDecoder()
    values: List[dict] = []
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            return values
        value, pos = decoder.raw_decode(text, pos)
        values.append(value)


def _result_from_json(record: dict) -> ProbeResult:
    error = record.get("Error") or {}
    return ProbeResult(
        version=record.get("Version", "") or "",
        error_text=error.get("Err") or None,
    )


class GoListProbe(Probe):
    """
    Probe backed by ``go list -m``.

    Every call blocks until the go command exits; there is no timeout.
    """

    def __init__(self, go_binary: str = DEFAULT_GO_BINARY, workdir: Optional[Path] = None):
        self.go_binary = go_binary
        self.workdir = workdir

    def _run(self, args: List[str]) -> str:
        command = [self.go_binary] + args
        display = " ".join(command[:4])
        logger.debug(f"running {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                cwd=str(self.workdir) if self.workdir else None,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise TransportError(f"error executing '{display}' command: {e}") from e
        if completed.returncode != 0:
            raise TransportError(
                f"error executing '{display}' command: exit status {completed.returncode}",
                stderr=completed.stderr,
            )
        return completed.stdout

    def query_batch(self, candidates: Sequence[VersionCandidate]) -> List[ProbeResult]:
        if not candidates:
            return []
        out = self._run(["list", "-m", "-e", "-json"] + [c.query for c in candidates])
        try:
            records = decode_json_stream(out)
        except ValueError as e:
            raise TransportError(f"error parsing results of 'go list -m -e -json' command: {e}") from e
        if len(records) != len(candidates):
            raise TransportError(
                f"'go list -m -e -json' returned {len(records)} results for {len(candidates)} queries"
            )
        return [_result_from_json(r) for r in records]

    def query_version(self, query: str) -> str:
        return self._run(["list", "-m", "-f", "{{.Version}}", query]).strip()
