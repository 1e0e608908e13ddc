"""Issue data providers.

The navigator only needs ``fetch_snapshot()``.  ``BeadsDataProvider`` talks
to the ``bd`` command line tool the same way the tracker's own tooling does:
ask for the status summary, export the issue database to JSONL inside the
``.beads`` directory and read that export back.  ``JsonlDataProvider`` skips
``bd`` entirely and reads an existing export, which is handy for demos and
read-only checkouts.
"""

from abc import ABC, abstractmethod
import json
import logging
import os
import subprocess
from typing import List, Optional, Tuple

from .issues import Dependency, Issue, Snapshot, StatusSummary

logger = logging.getLogger(__name__)

BEADS_DIR = ".beads"
ISSUES_FILE = "issues.jsonl"
BD_TIMEOUT = 30


class DataFetchError(Exception):
    """A refresh failed; the message is shown to the user as-is."""


# ── Loading ───────────────────────────────────────────────


def find_beads_root(start):
    # type: (str) -> str
    """Walk up from ``start`` to the directory holding ``.beads``."""
    current = os.path.abspath(start)
    while True:
        if os.path.isdir(os.path.join(current, BEADS_DIR)):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            raise DataFetchError(
                "find beads: no %s directory found above %s" % (BEADS_DIR, start)
            )
        current = parent


def parse_issue_records(lines, source="<input>"):
    # type: (List[str], str) -> Tuple[List[Issue], List[Dependency]]
    issues = []  # type: List[Issue]
    edges = []  # type: List[Dependency]
    for lineno, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except ValueError as exc:
            raise DataFetchError("parse %s line %d: %s" % (source, lineno, exc))
        if not isinstance(record, dict):
            raise DataFetchError("parse %s line %d: expected an object" % (source, lineno))
        issue = Issue.from_dict(record)
        if not issue.id:
            logger.debug("skipping record without id at %s:%d", source, lineno)
            continue
        issues.append(issue)
        for dep in record.get("dependencies") or []:
            if isinstance(dep, dict):
                edges.append(Dependency.from_dict(dep, owner_id=issue.id))
    return issues, edges


def load_issues_from_file(path):
    # type: (str) -> Tuple[List[Issue], List[Dependency]]
    try:
        with open(path, "r", encoding="utf-8") as fh:
            lines = fh.readlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise DataFetchError("load beads issues: %s" % exc)
    return parse_issue_records(lines, source=path)


# ── bd command line ───────────────────────────────────────


def run_bd(args, bd_binary="bd", cwd=None):
    # type: (List[str], str, Optional[str]) -> str
    command = [bd_binary] + list(args)
    try:
        result = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            timeout=BD_TIMEOUT,
            cwd=cwd or None,
        )
    except FileNotFoundError:
        raise DataFetchError("bd %s failed: %s not found" % (" ".join(args), bd_binary))
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise DataFetchError("bd %s failed: %s" % (" ".join(args), exc))
    if result.returncode != 0:
        message = (result.stderr or result.stdout or "").strip()
        detail = "exit status %d" % result.returncode
        if message:
            detail += "\n" + message
        raise DataFetchError("bd %s failed: %s" % (" ".join(args), detail))
    return result.stdout


def fetch_status(bd_binary="bd", cwd=None):
    # type: (str, Optional[str]) -> StatusSummary
    output = run_bd(["status", "--json"], bd_binary=bd_binary, cwd=cwd)
    try:
        payload = json.loads(output)
    except ValueError as exc:
        raise DataFetchError("parse bd status: %s" % exc)
    if not isinstance(payload, dict):
        raise DataFetchError("parse bd status: expected an object")
    summary = payload.get("summary") or {}
    if not isinstance(summary, dict):
        raise DataFetchError("parse bd status: summary is not an object")
    return StatusSummary.from_dict(summary)


def export_issues(root, bd_binary="bd"):
    # type: (str, str) -> str
    output = os.path.join(root, BEADS_DIR, ISSUES_FILE)
    run_bd(["export", "-o", output, "-q"], bd_binary=bd_binary, cwd=root)
    return output


# ── Providers ─────────────────────────────────────────────


class DataProvider(ABC):
    """Source of issue snapshots.  Called from a worker thread."""

    @abstractmethod
    def fetch_snapshot(self):
        # type: () -> Snapshot
        """Return a fresh snapshot or raise ``DataFetchError``."""
        ...


class BeadsDataProvider(DataProvider):
    def __init__(self, start_dir=None, bd_binary="bd"):
        # type: (Optional[str], str) -> None
        self._start_dir = start_dir or os.getcwd()
        self._bd_binary = bd_binary

    def fetch_snapshot(self):
        # type: () -> Snapshot
        summary = fetch_status(bd_binary=self._bd_binary, cwd=self._start_dir)
        root = find_beads_root(self._start_dir)
        path = export_issues(root, bd_binary=self._bd_binary)
        issues, edges = load_issues_from_file(path)
        logger.info("loaded %d issues and %d edges from %s", len(issues), len(edges), path)
        return Snapshot(issues=issues, edges=edges, summary=summary)


class JsonlDataProvider(DataProvider):
    def __init__(self, path):
        # type: (str) -> None
        self._path = os.path.expanduser(path)

    def fetch_snapshot(self):
        # type: () -> Snapshot
        issues, edges = load_issues_from_file(self._path)
        logger.info("loaded %d issues and %d edges from %s", len(issues), len(edges), self._path)
        return Snapshot(
            issues=issues,
            edges=edges,
            summary=StatusSummary.from_issues(issues),
        )
