## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import math


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_number(value: float) -> str:
    """Integral values print without a fractional part, others in shortest form."""
    if math.isnan(value): return 'nan'
    if math.isinf(value): return 'inf' if value > 0 else '-inf'
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def to_number(text: str) -> float:
    text = text.strip()
    if not text or '_' in text: return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def format_variables(variables: dict[str, float], width=48) -> str:
    if not variables: return '∅'
    text = ' '.join(f"{k}={format_number(v)}" for k, v in variables.items())
    return text if len(text) <= width else text[:width-2] + ' …'
