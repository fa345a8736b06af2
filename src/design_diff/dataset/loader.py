"""Dataset sources — local directories and git refs, loaded side by side.

Both sides are read from the *union* of their file names, so a file that
exists on only one side shows up as an addition or a deletion instead of a
load failure. The two sides load in parallel; the engine only ever sees two
complete datasets.
"""

import fnmatch
import json
import subprocess
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, DiffConfig
from ..exceptions import DatasetUnavailableError, MalformedEntryError
from ..logging_config import get_logger
from .models import TOKENS, Dataset, DatasetKind
from .validation import build_dataset

logger = get_logger(__name__)


class DatasetSource(ABC):
    """Where one side of a comparison comes from."""

    label: str = "<source>"

    @property
    def is_single_file(self) -> bool:
        """True when this side is exactly one dataset file."""
        return False

    @abstractmethod
    def list_files(self) -> List[str]:
        """Relative POSIX paths of every dataset file this side has.

        Raises:
            DatasetUnavailableError: If the source cannot be listed at all.
        """

    @abstractmethod
    def read_file(self, relpath: str) -> Optional[str]:
        """Return the file's text, or None if this side does not have it."""


class LocalSource(DatasetSource):
    """JSON files under a directory (or a single JSON file).

    A single file is listed under its own name unless ``file_name`` gives
    it another one, which is how two differently named files are paired.
    """

    def __init__(self, root: Path, pattern: str = "*.json", file_name: Optional[str] = None):
        self.root = Path(root)
        self.pattern = pattern
        self.file_name = file_name
        self.label = str(self.root)

    @property
    def is_single_file(self) -> bool:
        return self.root.is_file()

    def as_file_named(self, file_name: str) -> "LocalSource":
        return LocalSource(self.root, self.pattern, file_name=file_name)

    def _listed_name(self) -> str:
        return self.file_name or self.root.name

    def list_files(self) -> List[str]:
        if self.root.is_file():
            return [self._listed_name()]
        if not self.root.is_dir():
            raise DatasetUnavailableError(self.label, "path does not exist")
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in self.root.rglob(self.pattern)
            if p.is_file()
        )

    def read_file(self, relpath: str) -> Optional[str]:
        if self.root.is_file():
            if relpath != self._listed_name():
                return None
            path = self.root
        else:
            path = self.root / relpath
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise DatasetUnavailableError(self.label, f"cannot read {relpath}: {e}")


class GitSource(DatasetSource):
    """JSON files under ``subdir`` at a git ref (branch, tag or commit)."""

    def __init__(
        self,
        repo_path: Path,
        ref: str,
        subdir: str = "",
        pattern: str = "*.json",
        timeout: int = 30,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.ref = ref
        self.subdir = subdir.strip("/")
        self.pattern = pattern
        self.timeout = timeout
        self.label = f"{ref}:{self.subdir}" if self.subdir else ref

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", "-C", self.repo_path, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise DatasetUnavailableError(self.label, "git executable not found")
        except subprocess.TimeoutExpired:
            raise DatasetUnavailableError(self.label, f"git {args[0]} timed out")

    def list_files(self) -> List[str]:
        args = ["ls-tree", "-r", "--name-only", self.ref]
        if self.subdir:
            args += ["--", self.subdir]
        result = self._git(*args)
        if result.returncode != 0:
            raise DatasetUnavailableError(self.label, result.stderr.strip() or "git ls-tree failed")

        prefix = f"{self.subdir}/" if self.subdir else ""
        files = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line.startswith(prefix):
                continue
            if fnmatch.fnmatch(PurePosixPath(line).name, self.pattern):
                files.append(line[len(prefix):])
        return sorted(files)

    def read_file(self, relpath: str) -> Optional[str]:
        path = f"{self.subdir}/{relpath}" if self.subdir else relpath
        result = self._git("show", f"{self.ref}:{path}")
        if result.returncode != 0:
            # Missing at this ref: expected for added/deleted files
            logger.debug("%s not present at %s: %s", path, self.ref, result.stderr.strip())
            return None
        return result.stdout


def definition_name(relpath: str) -> str:
    """Definitions are keyed by file stem: ``components/button.json`` -> ``button``."""
    return PurePosixPath(relpath).stem


def load_dataset(
    source: DatasetSource,
    names: Sequence[str],
    kind: DatasetKind,
    config: DiffConfig = DEFAULT_CONFIG,
) -> Dataset:
    """Read ``names`` from one source and validate them into a Dataset.

    Token files are merged into one namespace; each definition file is one
    entry. A definition file with broken JSON becomes a malformed entry, a
    token file with broken JSON makes the whole side unavailable.
    """
    merged: Dict[str, Any] = {}
    broken: Dict[str, MalformedEntryError] = {}

    for relpath in names:
        text = source.read_file(relpath)
        if text is None:
            logger.debug("%s: %s missing on this side", source.label, relpath)
            continue

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            if kind == TOKENS:
                raise DatasetUnavailableError(source.label, f"{relpath}: invalid JSON ({e})")
            name = definition_name(relpath)
            broken[name] = MalformedEntryError(name, f"{relpath}: invalid JSON ({e})")
            continue

        if kind == TOKENS:
            if not isinstance(data, dict):
                raise DatasetUnavailableError(source.label, f"{relpath}: expected an object of tokens")
            for token_name, token in data.items():
                if token_name in merged:
                    logger.warning("Token %s defined more than once; %s wins", token_name, relpath)
                merged[token_name] = token
        else:
            name = definition_name(relpath)
            if name in merged:
                logger.warning("Definition %s defined more than once; %s wins", name, relpath)
            merged[name] = data

    dataset = build_dataset(merged, kind, config, source=source.label)
    for name, error in broken.items():
        dataset.failures.setdefault(name, error)
    return dataset


def load_pair(
    original: DatasetSource,
    updated: DatasetSource,
    kind: DatasetKind,
    names: Optional[Sequence[str]] = None,
    config: DiffConfig = DEFAULT_CONFIG,
) -> Tuple[Dataset, Dataset]:
    """Load both sides of a comparison in parallel.

    Two single-file sources are paired under the updated file's name, so
    ``old.json`` and ``new.json`` compare as one file.

    Args:
        original: The earlier source.
        updated: The later source.
        kind: Dataset kind of both sides.
        names: Files to load; defaults to the union of both sides' listings.
        config: Engine configuration (worker count, identifier fields).

    Returns:
        ``(original_dataset, updated_dataset)``, both fully materialized.

    Raises:
        DatasetUnavailableError: If either side cannot be listed or read.
    """
    if names is None and original.is_single_file and updated.is_single_file:
        # Two files are two versions of one dataset file, whatever their names
        shared = updated.list_files()[0]
        if original.list_files() != [shared] and isinstance(original, LocalSource):
            logger.debug("Pairing %s with %s as %s", original.label, updated.label, shared)
            original = original.as_file_named(shared)

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        if names is None:
            listings = list(executor.map(lambda s: s.list_files(), (original, updated)))
            names = sorted(set(listings[0]) | set(listings[1]))
            logger.info(
                "Comparing %d file(s): %d original, %d updated",
                len(names), len(listings[0]), len(listings[1]),
            )

        futures = [
            executor.submit(load_dataset, source, names, kind, config)
            for source in (original, updated)
        ]
        old_dataset, new_dataset = (future.result() for future in futures)

    return old_dataset, new_dataset
