"""
Duplicate article detection using URL matching and fuzzy title comparison.

Two translations of the same source article end up in the store when
contributors pick up the same piece twice. They are found by:
1. Exact original URL matches
2. Fuzzy title similarity, when at least one of the two articles does not
   name its original
"""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz import fuzz

from .types import Article


@dataclass(frozen=True)
class Duplicate:
    """A pair of articles that look like the same translation.

    Attributes:
        first: The article seen first (store order)
        second: The later article duplicating it
        reason: "original_url" or "title"
        score: Title similarity (0-100); 100 for URL matches
    """
    first: Article
    second: Article
    reason: str
    score: float = 100.0


def _normalize_url(url: str) -> str:
    return url.strip().rstrip("/").lower()


def find_duplicates(articles: list[Article], threshold: int = 95) -> list[Duplicate]:
    """Find articles duplicating an earlier article in the list.

    Each article is reported at most once, against the first article it
    duplicates.

    Args:
        articles: Articles in store order
        threshold: Similarity threshold (0-100) for fuzzy title matching.
                   Default 95 means titles must be 95% similar to count.

    Returns:
        Duplicate pairs in the order the second article appears
    """
    seen_urls: dict[str, Article] = {}
    kept: list[Article] = []
    duplicates: list[Duplicate] = []

    for article in articles:
        url = _normalize_url(article.original_url)
        if url and url in seen_urls:
            duplicates.append(Duplicate(seen_urls[url], article, "original_url"))
            continue
        match = _similar_title(article, kept, threshold)
        if match is not None:
            duplicates.append(Duplicate(match[0], article, "title", match[1]))
            continue
        if url:
            seen_urls[url] = article
        kept.append(article)

    return duplicates


def _similar_title(article: Article, articles: list[Article], threshold: int) -> tuple[Article, float] | None:
    """Return the first article whose title is similar to the given article's.

    Two articles that both name an original URL never match on title.

    Uses rapidfuzz's ratio function which calculates the Levenshtein
    distance as a similarity percentage.
    """
    if not article.title:
        return None
    has_url = bool(article.original_url.strip())
    for existing in articles:
        if not existing.title:
            continue
        if has_url and existing.original_url.strip():
            continue
        score = fuzz.ratio(article.title, existing.title)
        if score >= threshold:
            return existing, score
    return None
