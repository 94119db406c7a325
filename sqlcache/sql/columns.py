"""
Column model for generated cache tables, dood!

A ColumnDefinition declares one table column (name, logical type and sizing
facets). The functions below project columns into the SQL fragments used by
the SQL builder. They are pure and independent, so each one can be tested on
its own, dood!
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from .types import LengthUnit, TypeTag


@dataclass(frozen=True)
class ColumnDefinition:
    """
    Immutable description of a single table column, dood!

    Attributes:
        name: Declared column name (without any namespace prefix)
        type: Logical column type
        length: Length for character, binary and large object types
        unit: Size unit for BLOB/CLOB lengths
        precision: Precision for DECIMAL/NUMERIC
        scale: Scale for DECIMAL/NUMERIC

    Example:
        >>> ColumnDefinition("TITLE", TypeTag.VARCHAR, length=200)
        >>> ColumnDefinition("PRICE", TypeTag.DECIMAL, precision=10, scale=2)
        >>> ColumnDefinition("OBJECT", TypeTag.BLOB, length=2, unit=LengthUnit.M)
    """

    name: str
    type: TypeTag
    length: Optional[int] = None
    unit: Optional[LengthUnit] = None
    precision: Optional[int] = None
    scale: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Column name must not be empty, dood!")
        hasLength = self.length is not None or self.unit is not None
        hasPrecision = self.precision is not None or self.scale is not None
        if hasLength and hasPrecision:
            raise ValueError(
                f"Column '{self.name}' can have either length/unit or precision/scale, not both, dood!"
            )

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "ColumnDefinition":
        """
        Build column definition from config dict, dood!

        Args:
            data: Dict with ``name`` and ``type`` keys and optional
                  ``length``, ``unit``, ``precision`` and ``scale``

        Returns:
            ColumnDefinition: New column definition

        Raises:
            ValueError: If required keys are missing or values are invalid
        """
        if "name" not in data or "type" not in data:
            raise ValueError(f"Column definition must have 'name' and 'type': {data}, dood!")

        unit = data.get("unit", None)
        return cls(
            name=str(data["name"]),
            type=TypeTag.fromName(str(data["type"])),
            length=data.get("length", None),
            unit=LengthUnit(str(unit).upper()) if unit is not None else None,
            precision=data.get("precision", None),
            scale=data.get("scale", None),
        )

    def renderType(self) -> str:
        """Shortcut for ``renderTypeFragment(self)``"""
        return renderTypeFragment(self)


def renderTypeFragment(col: ColumnDefinition) -> str:
    """
    Render the type part of a column definition for CREATE TABLE, dood!

    The renderer is permissive: facets that make no sense for the column type
    (or a scale without precision) are silently left out.

    Args:
        col: Column to render

    Returns:
        str: Type fragment without the column name, e.g. ``VARCHAR(200)``,
             ``CHAR(16) FOR BIT DATA`` or ``DECIMAL(10, 2)``
    """
    fragment = col.type.sqlName

    match col.type:
        case TypeTag.BINARY | TypeTag.VARBINARY:
            if col.length is not None:
                fragment += f"({col.length})"
            fragment += " FOR BIT DATA"

        case TypeTag.BLOB | TypeTag.CLOB:
            if col.length is not None:
                unit = col.unit.value if col.unit is not None else ""
                fragment += f"({col.length}{unit})"

        case TypeTag.CHAR | TypeTag.VARCHAR:
            if col.length is not None:
                fragment += f"({col.length})"

        case TypeTag.DECIMAL | TypeTag.NUMERIC:
            if col.precision is not None:
                if col.scale is not None:
                    fragment += f"({col.precision}, {col.scale})"
                else:
                    fragment += f"({col.precision})"

        case _:
            pass

    return fragment


def nameOf(col: ColumnDefinition) -> str:
    """Declared (unprefixed) column name, matched against object properties"""
    return col.name


def parameterNameOf(col: ColumnDefinition, prefix: str) -> str:
    """Column identifier in the table, which is also its parameter name"""
    return prefix + col.name


def placeholderOf(col: ColumnDefinition, prefix: str) -> str:
    """Named placeholder for the column, e.g. ``:k_ID``"""
    return ":" + parameterNameOf(col, prefix)


def nameEqualsPlaceholderOf(col: ColumnDefinition, prefix: str) -> str:
    """Assignment/comparison fragment, e.g. ``k_ID=:k_ID``"""
    return parameterNameOf(col, prefix) + "=" + placeholderOf(col, prefix)


def renderColumnDefinition(col: ColumnDefinition, prefix: str) -> str:
    """Full column definition for CREATE TABLE, e.g. ``v_TITLE VARCHAR(200)``"""
    return parameterNameOf(col, prefix) + " " + renderTypeFragment(col)


def joinColumns(
    columns: Iterable[ColumnDefinition],
    fn: Callable[[ColumnDefinition, str], str],
    prefix: str,
    separator: str = ", ",
) -> str:
    """
    Project each column through ``fn`` and join the results, dood!

    Example:
        >>> joinColumns(keyColumns, nameEqualsPlaceholderOf, "k_", " AND ")
        'k_ID=:k_ID AND k_REGION=:k_REGION'
    """
    return separator.join(fn(col, prefix) for col in columns)
