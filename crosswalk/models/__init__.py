from .record import (  # noqa: F401
    PrimaryKey,
    RelationshipKind,
    RelationshipRecord,
    SourceKind,
)

__all__ = [
    "PrimaryKey",
    "RelationshipKind",
    "RelationshipRecord",
    "SourceKind",
]
