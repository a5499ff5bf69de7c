"""Slug generation for permalinks and category names"""

import re


_NON_ALNUM_RE = re.compile(r"[\W_]+")


def slugify(text: str) -> str:
    """Collapse each run of non-alphanumerics to one hyphen and lowercase the result.

    Letters and digits outside ASCII are kept. Leading/trailing hyphens are stripped,
    so a title made only of punctuation slugifies to ''.
    """
    return _NON_ALNUM_RE.sub('-', text.lower()).strip('-')
