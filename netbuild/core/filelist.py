"""
Lazy file lists built from glob patterns.

A FileList records include and exclude patterns and only touches the
filesystem when it is resolved, so lists can be declared before the files
they describe exist.
"""
import glob
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Callable, Iterator, List, Pattern, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ExcludePattern = Union[str, Pattern]


class FileList:
    """
    Ordered set of paths matching glob patterns.

    Examples:
        FileList("build/**/*.dll").exclude(re.compile(r"Tests\\.dll$"))
        FileList().include("src/**/obj", "src/**/bin")
    """

    def __init__(self, *patterns: PathLike):
        self._includes: List[str] = []
        self._excludes: List[ExcludePattern] = []
        self._mappers: List[Callable[[Path], Path]] = []
        self.include(*patterns)

    def include(self, *patterns: PathLike) -> "FileList":
        """Add glob patterns (``**`` matches any number of directories)."""
        self._includes.extend(str(p) for p in patterns)
        return self

    def exclude(self, *patterns: ExcludePattern) -> "FileList":
        """
        Exclude paths matching a glob pattern or a compiled regular expression.

        Glob patterns match the whole path; a bare name such as ``obj`` also
        excludes anything below a directory of that name.
        """
        self._excludes.extend(patterns)
        return self

    def map(self, func: Callable[[Path], Path]) -> "FileList":
        """Transform every resolved path with ``func``."""
        self._mappers.append(func)
        return self

    def clear(self) -> "FileList":
        """Forget all patterns."""
        self._includes.clear()
        self._excludes.clear()
        self._mappers.clear()
        return self

    @property
    def patterns(self) -> List[str]:
        return list(self._includes)

    def _excluded(self, path: str) -> bool:
        normalized = path.replace(os.sep, "/")
        for pattern in self._excludes:
            if isinstance(pattern, re.Pattern):
                if pattern.search(normalized):
                    return True
            elif Path(normalized).match(pattern) or pattern in normalized.split("/"):
                return True
        return False

    def resolve(self) -> List[Path]:
        """Expand the patterns into existing paths, in include order."""
        seen = set()
        paths: List[Path] = []
        for pattern in self._includes:
            for match in sorted(glob.glob(pattern, recursive=True)):
                if self._excluded(match):
                    continue
                path = Path(match)
                for mapper in self._mappers:
                    path = mapper(path)
                if path not in seen:
                    seen.add(path)
                    paths.append(path)
        return paths

    def names(self) -> List[str]:
        """Base names of the resolved paths, without extension."""
        return [p.stem for p in self.resolve()]

    def __iter__(self) -> Iterator[Path]:
        return iter(self.resolve())

    def __len__(self) -> int:
        return len(self.resolve())

    def __repr__(self) -> str:
        return f"<FileList(include={self._includes}, exclude={self._excludes})>"


def strip_template(path: Path) -> Path:
    """``App.config.template`` -> ``App.config``; other paths are unchanged."""
    if path.suffix == ".template":
        return path.with_suffix("")
    return path


def remove_paths(paths: List[Path]) -> int:
    """
    Delete files and directory trees.

    Returns:
        Number of paths removed
    """
    removed = 0
    for path in paths:
        if path.is_dir() and not path.is_symlink():
            logger.info(f"rm -r {path}")
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            logger.info(f"rm {path}")
            path.unlink()
        else:
            continue
        removed += 1
    return removed
