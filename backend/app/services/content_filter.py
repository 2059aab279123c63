"""
Content policy for review text.

Two interchangeable policies check text against a denylist of terms:

- ``SubstringDenylistPolicy`` flags a term anywhere, including inside other
  words ("class" matches "ass"). This is the default.
- ``WordBoundaryDenylistPolicy`` only flags whole words.

``CONTENT_FILTER_MODE`` selects the policy used by the review service.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Protocol

from app.core.config import settings


class ContentPolicy(Protocol):
    def find_violations(self, text: str) -> List[str]:
        ...

    def is_allowed(self, text: str) -> bool:
        ...


class _DenylistPolicy(ABC):
    def __init__(self, terms: Iterable[str]):
        self.terms = [t.lower() for t in terms if t and t.strip()]

    @abstractmethod
    def find_violations(self, text: str) -> List[str]:
        ...

    def is_allowed(self, text: str) -> bool:
        return not self.find_violations(text)


class SubstringDenylistPolicy(_DenylistPolicy):
    """Case-insensitive substring match"""

    def find_violations(self, text: str) -> List[str]:
        lowered = (text or "").lower()
        return [term for term in self.terms if term in lowered]


class WordBoundaryDenylistPolicy(_DenylistPolicy):
    """Case-insensitive whole-word match"""

    def __init__(self, terms: Iterable[str]):
        super().__init__(terms)
        self._patterns = [
            (term, re.compile(r"\b" + re.escape(term) + r"\b", re.IGNORECASE))
            for term in self.terms
        ]

    def find_violations(self, text: str) -> List[str]:
        text = text or ""
        return [term for term, pattern in self._patterns if pattern.search(text)]


POLICIES = {
    "substring": SubstringDenylistPolicy,
    "word_boundary": WordBoundaryDenylistPolicy,
}


def build_content_policy(mode: Optional[str] = None, terms: Optional[Iterable[str]] = None) -> ContentPolicy:
    """Policy for ``mode`` (defaults to CONTENT_FILTER_MODE) over ``terms`` (defaults to CONTENT_DENYLIST)"""
    mode = (mode or settings.CONTENT_FILTER_MODE).lower()
    if mode not in POLICIES:
        raise ValueError(f"Unknown content filter mode: {mode}")
    if terms is None:
        terms = settings.CONTENT_DENYLIST
    return POLICIES[mode](terms)
