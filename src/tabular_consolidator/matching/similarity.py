"""Column-name similarity scoring.

Scores two column names in [0, 1] using a curated synonym table, applied to
whole names and word by word, with a normalized Levenshtein fallback.

Example:
    >>> similarity("Customer Name", "Client Name")
    1.0
    >>> similarity("Email", "E-mail")
    1.0
    >>> round(similarity("Revenue", "Revenues"), 3)
    0.875
"""

import re

from rapidfuzz.distance import Levenshtein

# =============================================================================
# SYNONYM TABLE
# =============================================================================
# Each entry is a set of interchangeable column words. The first word of an
# entry is its representative.

SYNONYM_GROUPS: tuple[tuple[str, ...], ...] = (
    ("name", "title", "label"),
    ("id", "identifier", "key", "code"),
    ("customer", "client", "user"),
    ("amount", "price", "cost", "value"),
    ("date", "time", "timestamp"),
    ("phone", "mobile", "telephone"),
    ("email", "mail", "e-mail"),
    ("address", "location", "addr"),
)

# Common header abbreviations, expanded before synonym lookup.
ABBREVIATIONS: dict[str, str] = {
    "cust": "customer",
    "qty": "quantity",
    "amt": "amount",
    "no": "number",
    "num": "number",
    "nbr": "number",
    "ref": "reference",
    "desc": "description",
    "tel": "telephone",
    "dept": "department",
}

_SYNONYM_REPRESENTATIVE: dict[str, str] = {
    word: group[0] for group in SYNONYM_GROUPS for word in group
}

_SEPARATOR_RE = re.compile(r"[\W_]+")
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+|[^\W\d_]+")


def split_words(name: str) -> list[str]:
    """Split a column name into words.

    Splits on underscores, hyphens, whitespace and other punctuation, then on
    camelCase and letter/digit boundaries. Case is preserved.

    Args:
        name: Raw column name.

    Returns:
        Words in order of appearance.

    Example:
        >>> split_words("CustID")
        ['Cust', 'ID']
        >>> split_words("order_line-itemCount2")
        ['order', 'line', 'item', 'Count', '2']
    """
    words: list[str] = []
    for part in _SEPARATOR_RE.split(name):
        if part:
            words.extend(_WORD_RE.findall(part))
    return words


def are_synonyms(a: str, b: str) -> bool:
    """Check whether two lower-cased names share an entry of the synonym table.

    Args:
        a: First name, lower-cased.
        b: Second name, lower-cased.

    Returns:
        True if both names appear together in one synonym entry.
    """
    return any(a in group and b in group for group in SYNONYM_GROUPS)


def canonical_words(name: str) -> tuple[str, ...]:
    """Reduce a column name to its synonym-representative words.

    Args:
        name: Raw column name.

    Returns:
        Lower-cased words with abbreviations expanded and synonyms collapsed.
    """
    result = []
    for word in split_words(name):
        lowered = word.lower()
        lowered = ABBREVIATIONS.get(lowered, lowered)
        result.append(_SYNONYM_REPRESENTATIVE.get(lowered, lowered))
    return tuple(result)


def similarity(a: str, b: str) -> float:
    """Score the similarity of two column names.

    1.0 when both names sit in one synonym entry or reduce to the same
    synonym words; otherwise ``1 - levenshtein / max(len)`` on the lower-cased
    names. Symmetric in its arguments.

    Args:
        a: First column name.
        b: Second column name.

    Returns:
        Similarity in [0, 1].
    """
    left = a.lower()
    right = b.lower()

    if not left and not right:
        return 1.0

    if are_synonyms(left, right):
        return 1.0

    left_words = canonical_words(a)
    if left_words and left_words == canonical_words(b):
        return 1.0

    distance = Levenshtein.distance(left, right)
    return 1.0 - distance / max(len(left), len(right))


def is_similar(a: str, b: str, threshold: float) -> bool:
    """Check whether two column names score strictly above a threshold."""
    return similarity(a, b) > threshold
