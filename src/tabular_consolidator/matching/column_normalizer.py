"""Canonical column naming.

Maps every raw column name seen in any source to one canonical display name.
Columns judged equivalent share a name; unrelated columns whose names
canonicalize identically are told apart with a numeric suffix.
"""

from collections.abc import Mapping, Sequence

import structlog

from tabular_consolidator.matching.schema_analyzer import distinct_columns
from tabular_consolidator.matching.similarity import split_words
from tabular_consolidator.models import SourceTable

logger = structlog.get_logger(__name__)


# =============================================================================
# WORD TABLE
# =============================================================================
# Lower-cased header word to display word. Unmapped words are title-cased.

WORD_DISPLAY_NAMES: dict[str, str] = {
    # Identifiers
    "id": "ID",
    "ids": "IDs",
    "uuid": "UUID",
    "guid": "GUID",
    "sku": "SKU",
    "vat": "VAT",
    "url": "URL",
    "ref": "Reference",
    "no": "Number",
    "num": "Number",
    "nbr": "Number",
    # Parties
    "name": "Name",
    "client": "Customer",
    "cust": "Customer",
    "customer": "Customer",
    # Contact
    "email": "Email",
    "mail": "Email",
    "tel": "Phone",
    "telephone": "Phone",
    "mobile": "Phone",
    "phone": "Phone",
    "addr": "Address",
    # Quantities
    "qty": "Quantity",
    "amt": "Amount",
    "desc": "Description",
    "dept": "Department",
}

# Whole (lower-cased) names that would split badly.
PHRASE_DISPLAY_NAMES: dict[str, str] = {
    "e-mail": "Email",
    "e_mail": "Email",
}


def canonical_column_name(raw_name: str) -> str:
    """Derive a display name for a raw column name.

    Args:
        raw_name: Raw column name as it appears in a source.

    Returns:
        Words mapped through the word table or title-cased, joined by spaces.
        Names without any word characters fall back to the trimmed raw name.

    Example:
        >>> canonical_column_name("CustID")
        'Customer ID'
        >>> canonical_column_name("client_name")
        'Customer Name'
        >>> canonical_column_name("orderDate")
        'Order Date'
    """
    stripped = raw_name.strip()
    phrase = PHRASE_DISPLAY_NAMES.get(stripped.lower())
    if phrase:
        return phrase

    words = split_words(stripped)
    if not words:
        return stripped or "Column"

    return " ".join(WORD_DISPLAY_NAMES.get(word.lower(), word.title()) for word in words)


class ColumnNameRegistry:
    """Hands out canonical names, suffixing collisions with `` 2``, `` 3``, ...

    Example:
        >>> registry = ColumnNameRegistry()
        >>> registry.claim("Name"), registry.claim("Name"), registry.claim("Name")
        ('Name', 'Name 2', 'Name 3')
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._taken: set[str] = set()

    def claim(self, name: str) -> str:
        """Reserve ``name`` or the first free suffixed variant of it.

        Args:
            name: Preferred canonical name.

        Returns:
            The reserved, unique name.
        """
        candidate = name
        suffix = 2
        while candidate in self._taken:
            candidate = f"{name} {suffix}"
            suffix += 1
        self._taken.add(candidate)
        return candidate


class _ColumnClasses:
    """Union-find over raw column names; each class is rooted at its first-seen member."""

    def __init__(self, columns: Sequence[str]) -> None:
        self._position = {column: index for index, column in enumerate(columns)}
        self._parent = {column: column for column in columns}

    def find(self, column: str) -> str:
        root = column
        while self._parent[root] != root:
            root = self._parent[root]
        while column != root:
            parent = self._parent[column]
            self._parent[column] = root
            column = parent
        return root

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if self._position[root_b] < self._position[root_a]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a


def build_column_mapping(
    sources: Sequence[SourceTable],
    similarity_groups: Mapping[str, Sequence[str]],
) -> dict[str, str]:
    """Map every raw column name to a canonical column name.

    Similarity groups are merged into equivalence classes: two columns share
    a canonical name when they are linked by a chain of similar pairs. Each
    class is named once, from its first-seen member, before the remaining
    columns are named independently.

    Args:
        sources: Source tables in input order.
        similarity_groups: Representative raw column to its similar columns.

    Returns:
        Raw column name to canonical column name, total over all raw columns.
    """
    columns = distinct_columns(sources)
    for representative, similar in similarity_groups.items():
        for column in (representative, *similar):
            if column not in columns:
                columns.append(column)

    classes = _ColumnClasses(columns)
    for representative, similar in similarity_groups.items():
        for column in similar:
            classes.union(representative, column)

    registry = ColumnNameRegistry()
    class_names: dict[str, str] = {}
    for representative in similarity_groups:
        root = classes.find(representative)
        if root not in class_names:
            class_names[root] = registry.claim(canonical_column_name(root))

    mapping: dict[str, str] = {}
    for column in columns:
        root = classes.find(column)
        if root in class_names:
            mapping[column] = class_names[root]
        else:
            mapping[column] = registry.claim(canonical_column_name(column))

    logger.debug(
        "Column mapping built",
        raw_columns=len(mapping),
        canonical_columns=len(set(mapping.values())),
    )

    return mapping
