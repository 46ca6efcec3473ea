"""Top-level read API: report whether an input starts with an expression."""

import logging
from typing import Optional

from .parser import ParseError, parse_prefix
from .types import Options

logger = logging.getLogger(__name__)

FOUND = "Found value"
NO_MATCH = "No match: "


def read_expr(src: str, options: Optional[Options] = None) -> str:
    """Parse src and describe the outcome.

    Returns:
        "Found value" when an expression was read (the value is discarded),
        otherwise "No match: " followed by the ParseError text.
    """
    try:
        expr, end = parse_prefix(src, options)
    except ParseError as err:
        logger.debug("no match for %r: %s", src, err)
        return NO_MATCH + str(err)
    logger.debug("read %s from %d of %d characters", type(expr).__name__, end, len(src))
    return FOUND
