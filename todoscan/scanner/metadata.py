"""Parsing of the optional ``key=value`` metadata line inside a task block."""

from __future__ import annotations

import logging
import math

from .errors import BadEstimateError, NotMetadataError
from .models import TaskMetadata

logger = logging.getLogger(__name__)

CATEGORY_KEY = "category"
ISSUE_KEY = "issue"
ESTIMATE_KEY = "estimate"

# Estimates below this many hours do not count as a populated field.
ESTIMATE_EPSILON = 0.01


def parse_estimate(estimate: str) -> float:
    """
    Parse a human-written duration into hours.

    Accepts a number with an optional ``h`` (hours) or ``m`` (minutes)
    suffix, e.g. ``"2h"``, ``"30m"`` or ``"1.5"``.
    """
    if not estimate:
        raise BadEstimateError(estimate)

    unit = estimate[-1]
    if unit.isalpha():
        if unit not in ("m", "h"):
            raise BadEstimateError(estimate)
        number = estimate[:-1]
    else:
        number = estimate

    try:
        value = float(number)
    except ValueError as exc:
        raise BadEstimateError(estimate) from exc
    if not math.isfinite(value) or value < 0:
        raise BadEstimateError(estimate)

    if unit == "m":
        return value / 60.0
    return value


def _parse_issue(value: str) -> int:
    digits = value[1:] if value[:1] in ("+", "-") else value
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"issue id must be a plain decimal number, got {value!r}")
    issue = int(value)
    if issue <= 0:
        raise ValueError(f"issue id must be positive, got {issue}")
    return issue


def parse_metadata(line: str) -> TaskMetadata:
    """
    Parse a metadata line such as ``category=core issue=7 estimate=30m``.

    Raises NotMetadataError when the line has no ``=`` at all or when none of
    the recognized fields ends up populated. Unparsable issue/estimate values
    are left unset and reported in ``TaskMetadata.warnings``.
    """
    if "=" not in line:
        raise NotMetadataError()

    pairs = {}
    for token in line.split():
        key, sep, value = token.partition("=")
        if not sep:
            continue
        pairs[key.strip()] = value.strip()

    metadata = TaskMetadata()
    if CATEGORY_KEY in pairs:
        metadata.category = pairs[CATEGORY_KEY]

    if ISSUE_KEY in pairs:
        try:
            metadata.issue = _parse_issue(pairs[ISSUE_KEY])
        except ValueError:
            metadata.warnings.append(("BAD_ISSUE", f"Cannot parse issue id: {pairs[ISSUE_KEY]!r}"))

    if ESTIMATE_KEY in pairs:
        try:
            metadata.estimate = parse_estimate(pairs[ESTIMATE_KEY])
        except BadEstimateError as exc:
            metadata.warnings.append((exc.code, str(exc)))

    if not metadata.category and metadata.issue == 0 and metadata.estimate < ESTIMATE_EPSILON:
        logger.debug(f"No metadata fields found in {line!r}")
        raise NotMetadataError()
    return metadata
