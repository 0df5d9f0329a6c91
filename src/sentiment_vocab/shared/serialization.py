"""JSON helpers for metrics and run summaries."""

from typing import Any

import numpy as np


def pyify(o: Any) -> Any:
    """Convert numpy / non-JSON types to plain Python for json.dump."""
    if isinstance(o, dict):
        out = {}
        for k, v in o.items():
            if isinstance(k, np.integer):
                k = int(k)
            elif isinstance(k, np.floating):
                k = float(k)
            elif not isinstance(k, (str, int, float, bool, type(None))):
                k = str(k)
            out[k] = pyify(v)
        return out
    if isinstance(o, (list, tuple, set)):
        return [pyify(x) for x in o]
    if isinstance(o, np.ndarray):
        return o.tolist()
    if isinstance(o, np.integer):
        return int(o)
    if isinstance(o, np.floating):
        return float(o)
    if isinstance(o, np.bool_):
        return bool(o)
    return o
