"""Turning raw text into the words that get spoken."""

import re
from typing import List, Optional

from wordkeys import constants

_PUNCTUATION = re.compile("[" + re.escape(constants.STRIP_CHARS) + "]")


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into speakable word tokens.

    Splits on runs of whitespace, strips punctuation anywhere in each
    candidate, and drops candidates left empty. Order follows the text.

    Args:
        text: The raw text, possibly empty or None.

    Returns:
        The tokens in reading order.
    """
    if not text:
        return []
    words = (_PUNCTUATION.sub("", part) for part in text.split())
    return [word for word in words if word]
