"""
Data models for table metadata rows
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, TypeVar


class ConstraintType(Enum):
    """Kinds of table constraints reported by information_schema"""
    PRIMARY_KEY = "PRIMARY KEY"
    FOREIGN_KEY = "FOREIGN KEY"
    UNIQUE = "UNIQUE"
    CHECK = "CHECK"
    OTHER = "OTHER"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "ConstraintType":
        for member in cls:
            if member.value == (value or "").upper():
                return member
        return cls.OTHER


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().upper() in ("YES", "1", "TRUE")
    return bool(value)


@dataclass(frozen=True)
class ColumnInfo:
    """One row of `describe <table>`"""
    field: str
    type: str
    null: bool
    key: str
    default: Optional[str]
    extra: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ColumnInfo":
        return cls(
            field=row["FIELD"],
            type=row["TYPE"],
            null=_as_bool(row.get("NULL")),
            key=row.get("KEY") or "",
            default=row.get("DEFAULT"),
            extra=row.get("EXTRA") or "",
        )


@dataclass(frozen=True)
class IndexColumn:
    """One row of `show indexes`, i.e. one column of one index"""
    table: str
    key_name: str
    seq_in_index: int
    column_name: Optional[str]
    unique: bool
    collation: Optional[str] = None
    cardinality: Optional[int] = None
    sub_part: Optional[int] = None
    packed: Optional[str] = None
    nullable: bool = False
    index_type: Optional[str] = None
    comment: str = ""

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "IndexColumn":
        # NON_UNIQUE arrives as 0/1
        return cls(
            table=row["TABLE"],
            key_name=row["KEY_NAME"],
            seq_in_index=int(row["SEQ_IN_INDEX"]),
            column_name=row.get("COLUMN_NAME"),
            unique=int(row["NON_UNIQUE"]) == 0,
            collation=row.get("COLLATION"),
            cardinality=row.get("CARDINALITY"),
            sub_part=row.get("SUB_PART"),
            packed=row.get("PACKED"),
            nullable=_as_bool(row.get("NULL")),
            index_type=row.get("INDEX_TYPE"),
            comment=row.get("COMMENT") or "",
        )


@dataclass(frozen=True)
class ConstraintColumn:
    """One column of a named constraint"""
    constraint_name: str
    constraint_type: ConstraintType
    column_name: str
    ordinal_position: int
    position_in_unique_constraint: Optional[int] = None
    referenced_table_name: Optional[str] = None
    referenced_column_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ConstraintColumn":
        return cls(
            constraint_name=row["CONSTRAINT_NAME"],
            constraint_type=ConstraintType.from_raw(row["CONSTRAINT_TYPE"]),
            column_name=row["COLUMN_NAME"],
            ordinal_position=int(row["ORDINAL_POSITION"]),
            position_in_unique_constraint=row.get("POSITION_IN_UNIQUE_CONSTRAINT"),
            referenced_table_name=row.get("REFERENCED_TABLE_NAME"),
            referenced_column_name=row.get("REFERENCED_COLUMN_NAME"),
        )


T = TypeVar("T")

Constraints = Dict[str, List[ConstraintColumn]]
Indexes = Dict[str, List[Optional[IndexColumn]]]


def place(sequence: List[Optional[T]], position: int, item: T) -> None:
    """Put item at the 1-based position, padding any gap with None."""
    slot = position - 1
    if slot < 0:
        raise ValueError(f"position must be 1-based, got {position}")
    if slot >= len(sequence):
        sequence.extend([None] * (slot + 1 - len(sequence)))
    sequence[slot] = item
