"""
Statement classification by verb prefix.

A coarse allow-list, not a SQL validator: only the trimmed, upper-cased
prefix is inspected. Comments, stacked statements and non-standard verbs are
not detected.
"""

from sqlgateway.models import EntryPointEnum, VerbCategory

READ_PREFIXES: tuple[str, ...] = ("SELECT",)
WRITE_PREFIXES: tuple[str, ...] = ("INSERT", "UPDATE", "DELETE", "EXECUTE")
DDL_PREFIXES: tuple[str, ...] = ("CREATE", "DROP", "ALTER")

_ALLOWED: dict[EntryPointEnum, tuple[tuple[tuple[str, ...], VerbCategory], ...]] = {
    EntryPointEnum.QUERY: ((READ_PREFIXES, VerbCategory.READ),),
    EntryPointEnum.EXECUTE: (
        (WRITE_PREFIXES, VerbCategory.WRITE),
        (DDL_PREFIXES, VerbCategory.DDL),
    ),
}


def classify(sql: str, entry_point: EntryPointEnum) -> VerbCategory:
    """Category of *sql* on *entry_point*; REJECTED if the verb is not allowed there."""
    head = (sql or "").strip().upper()
    for prefixes, category in _ALLOWED[entry_point]:
        if head.startswith(prefixes):
            return category
    return VerbCategory.REJECTED


def allowed_verbs(entry_point: EntryPointEnum) -> list[str]:
    return [p for prefixes, _ in _ALLOWED[entry_point] for p in prefixes]
