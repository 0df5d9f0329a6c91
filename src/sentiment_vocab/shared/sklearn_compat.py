"""Penalty keyword arguments across scikit-learn releases.

From 1.8 the logistic estimators take the penalty mix as ``l1_ratio``
(``l1_ratios`` for the CV variant) and ``penalty`` is deprecated.
"""

import re
from typing import Any, Dict, Tuple

import sklearn


def sklearn_version() -> Tuple[int, int]:
    major, minor = re.findall(r"\d+", sklearn.__version__)[:2]
    return int(major), int(minor)


USE_L1_RATIO = sklearn_version() >= (1, 8)


def penalty_params(penalty: str, cv: bool = False) -> Dict[str, Any]:
    """Keyword arguments selecting a pure ``"l1"`` or ``"l2"`` penalty."""
    if penalty not in ("l1", "l2"):
        raise ValueError(f"penalty must be 'l1' or 'l2', got {penalty!r}")
    if not USE_L1_RATIO:
        return {"penalty": penalty}
    ratio = 1.0 if penalty == "l1" else 0.0
    return {"l1_ratios": (ratio,)} if cv else {"l1_ratio": ratio}
