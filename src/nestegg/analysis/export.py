"""Raw path export as comma-separated text.

Layout::

    month,Sim_1,Sim_2,...,Sim_N
    1,100583.21,99012.70,...
    ...

Values carry exactly two decimals, rounded half away from zero on the exact
binary value of the float (the rounding spreadsheet users see from the web
download), lines are ``\\n``-separated and there is no trailing newline.
"""

from decimal import ROUND_HALF_UP, Context, Decimal

import numpy as np
import pandas as pd

DEFAULT_EXPORT_FILENAME = "montecarlo.csv"

_CENTS = Decimal("0.01")
# Wide enough to hold any finite double with two decimals.
_EXACT = Context(prec=400)


def format_value(value: float) -> str:
    """Format ``value`` with two decimals, ties rounded away from zero.

    Negative zero prints as ``0.00`` and magnitudes of 1e21 or more switch to
    exponent notation, as the browser download does.
    """
    value = float(value) + 0.0  # -0.0 -> 0.0
    if abs(value) >= 1e21:
        return repr(value)
    return str(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP, context=_EXACT))


def _month_frame(values: np.ndarray) -> pd.DataFrame:
    """Transpose ``(paths, months)`` cells into month rows and ``Sim_i`` columns."""
    num_paths, months = values.shape
    frame = pd.DataFrame(values.T, columns=[f"Sim_{i + 1}" for i in range(num_paths)])
    frame.insert(0, "month", np.arange(1, months + 1))
    return frame


def paths_to_csv(paths: np.ndarray) -> str:
    """Serialize the path matrix; an empty string when there are no paths."""
    paths = np.asarray(paths, dtype=float)
    if paths.ndim != 2 or paths.shape[0] == 0:
        return ""

    cells = np.vectorize(format_value, otypes=[object])(paths)
    text = _month_frame(cells).to_csv(index=False, lineterminator="\n")
    return text.removesuffix("\n")
