"""
Document store for translated articles.

The store is a flat directory of UTF-8 Markdown files, one per article.
It is read-only: articles are amended by hand, never by this package.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from .config import AttributionConfig, StoreConfig
from .core.types import Article
from .input.errors import ParseError
from .input.parser import parse_article

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for document store errors."""


class ArticleNotFoundError(StoreError, FileNotFoundError):
    """Raised when an article file does not exist."""


class ArticleEncodingError(StoreError):
    """Raised when an article file is not valid text in the store encoding."""


class DocumentStore:
    """Read access to the article files under a root directory.

    Attributes:
        root: Directory holding the article files
        config: Store settings (glob pattern, excluded names, encoding)
    """

    def __init__(
        self,
        root: Path | str,
        config: StoreConfig | None = None,
        attribution: AttributionConfig | None = None,
    ):
        self.root = Path(root)
        self.config = config or StoreConfig(root=str(root))
        self._labels = (attribution or AttributionConfig()).labels

    @classmethod
    def from_config(cls, store: StoreConfig, attribution: AttributionConfig | None = None) -> "DocumentStore":
        return cls(Path(store.root), store, attribution)

    def resolve(self, path: Path | str) -> Path:
        """Resolve a path relative to the store root.

        A relative path that does not exist under the root but does exist
        relative to the working directory (e.g., "articles/foo.md" given on
        the command line) is returned unchanged.
        """
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        in_store = self.root / candidate
        if not in_store.exists() and candidate.exists():
            return candidate
        return in_store

    def list_paths(self) -> list[Path]:
        """List article files in the store, sorted by name.

        Raises:
            ArticleNotFoundError: If the store root does not exist
        """
        if not self.root.is_dir():
            raise ArticleNotFoundError(f"Article store not found: {self.root}")
        excluded = set(self.config.exclude)
        return sorted(
            path
            for path in self.root.glob(self.config.pattern)
            if path.is_file() and path.name not in excluded
        )

    def read(self, path: Path | str) -> str:
        """Read an article file and return its raw text.

        Args:
            path: Absolute path, or a path relative to the store root

        Returns:
            The file contents, decoded with the store encoding

        Raises:
            ArticleNotFoundError: If the file does not exist
            ArticleEncodingError: If the file cannot be decoded
        """
        resolved = self.resolve(path)
        if not resolved.is_file():
            raise ArticleNotFoundError(f"Article not found: {resolved}")
        try:
            return resolved.read_text(encoding=self.config.encoding)
        except UnicodeDecodeError as exc:
            raise ArticleEncodingError(
                f"Article is not valid {self.config.encoding}: {resolved} ({exc.reason} at byte {exc.start})"
            ) from exc

    def load(self, path: Path | str) -> Article:
        """Read and parse an article.

        Raises:
            StoreError: If the file cannot be read
            ParseError: If the text cannot be parsed
        """
        resolved = self.resolve(path)
        return parse_article(self.read(resolved), source=str(resolved), labels=self._labels)

    def iter_articles(self) -> Iterator[tuple[Path, Article | ParseError | StoreError]]:
        """Yield every article in the store with its parse result.

        A file that fails to read or parse is yielded with its exception
        instead of an Article so one broken file never hides the others.
        """
        for path in self.list_paths():
            try:
                yield path, self.load(path)
            except (ParseError, StoreError) as exc:
                logger.debug("Failed to load %s: %s", path, exc)
                yield path, exc
