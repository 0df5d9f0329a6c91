"""Review text normalization: markup stripping and n-gram analysis."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

_HTML_TAG = re.compile(r"<.*?>")
_TOKEN = re.compile(r"(?u)\b\w+(?:'\w+)*\b")

NGRAM_SEPARATOR = "_"


def strip_html(text: str) -> str:
    """Replace every markup tag (``<br />`` and friends) with a space."""
    return _HTML_TAG.sub(" ", text)


def tokenize(text: str) -> List[str]:
    """Lower-case word tokens."""
    return _TOKEN.findall(text.lower())


class NgramAnalyzer:
    """Callable analyzer for ``CountVectorizer(analyzer=...)``.

    Stop words are removed from the token stream before n-grams are formed,
    and n-gram parts are joined with ``_`` (``"not_good"``), so vocabulary
    files stay one whitespace-free term per line.
    """

    def __init__(self, stop_words: Iterable[str] = (), ngram_range: Tuple[int, int] = (1, 1)):
        lo, hi = ngram_range
        if lo < 1 or hi < lo:
            raise ValueError(f"invalid ngram_range {ngram_range}")
        self.stop_words = frozenset(w.lower() for w in stop_words)
        self.ngram_range = (lo, hi)

    def __call__(self, text: str) -> List[str]:
        tokens = [t for t in tokenize(strip_html(text)) if t not in self.stop_words]
        return list(self._ngrams(tokens))

    def _ngrams(self, tokens: Sequence[str]):
        lo, hi = self.ngram_range
        n_tokens = len(tokens)
        for n in range(lo, min(hi, n_tokens) + 1):
            for i in range(n_tokens - n + 1):
                yield NGRAM_SEPARATOR.join(tokens[i : i + n])

    def __repr__(self) -> str:
        return f"NgramAnalyzer(ngram_range={self.ngram_range}, stop_words={len(self.stop_words)})"


def build_analyzer(config) -> NgramAnalyzer:
    """Analyzer configured from a ``PipelineConfig``."""
    return NgramAnalyzer(stop_words=config.stop_words, ngram_range=config.ngram_range)
