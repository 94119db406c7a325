"""
Parameter binders: resolve named statement placeholders to values, dood!

Binders pull values for placeholders out of the objects handed to a cache
call (the key, the value). They are created per call and thrown away right
after the statement runs.

Available Binders:
    - SingleValueBinder: one placeholder bound to a raw value
    - ObjectPropertyBinder: placeholders bound to attributes of an object,
      with a namespace prefix stripped from the placeholder name
    - PriorityBinder: ordered chain, first binder having the value wins
"""

from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Sequence, Tuple

from .columns import ColumnDefinition
from .types import TypeTag

# (value, SQL type or None if unknown)
Resolved = Tuple[Any, Optional[TypeTag]]

# Hook used to transform a resolved value before it is handed to the driver.
# Called with the parameter name, the column type (None if unknown) and the value.
ValueEncoder = Callable[[str, Optional[TypeTag], Any], Any]


class BinderError(KeyError):
    """Raised when no binder can provide a value for a placeholder, dood!"""

    def __str__(self) -> str:
        # KeyError quotes its argument, which makes messages unreadable
        return str(self.args[0]) if self.args else ""


class ParameterBinder(Protocol):
    """
    Protocol for resolving named placeholders to values, dood!

    Example:
        >>> binder = SingleValueBinder("k_ID", 42, ColumnDefinition("ID", TypeTag.INTEGER))
        >>> binder.hasValue("k_ID")
        True
        >>> binder.resolve("k_ID")
        (42, <TypeTag.INTEGER: 'INTEGER'>)
    """

    def hasValue(self, name: str) -> bool:
        """
        Check whether this binder can provide a value for ``name``, dood!

        Args:
            name: Placeholder (parameter) name, without the leading colon

        Returns:
            bool: True if ``resolve(name)`` will succeed
        """
        ...

    def resolve(self, name: str) -> Resolved:
        """
        Get value and SQL type for placeholder ``name``, dood!

        Args:
            name: Placeholder (parameter) name, without the leading colon

        Returns:
            Tuple[Any, Optional[TypeTag]]: The value and its column type (None if unknown)

        Raises:
            BinderError: If this binder has no value for ``name``
        """
        ...


class SingleValueBinder(ParameterBinder):
    """
    Binds exactly one placeholder to a raw value, dood!

    Used when a key (or value) list has a single column: the key (or value)
    object itself is the column value and needs no matching property.
    """

    __slots__ = ("parameterName", "value", "column")

    def __init__(self, parameterName: str, value: Any, column: Optional[ColumnDefinition] = None):
        self.parameterName = parameterName
        self.value = value
        self.column = column

    def hasValue(self, name: str) -> bool:
        return name == self.parameterName

    def resolve(self, name: str) -> Resolved:
        if name != self.parameterName:
            raise BinderError(f"No value for parameter '{name}' (only '{self.parameterName}' is bound), dood!")
        return self.value, self.column.type if self.column is not None else None


class ObjectPropertyBinder(ParameterBinder):
    """
    Binds placeholders to attributes of a wrapped object, dood!

    The configured prefix is stripped from the placeholder name before the
    attribute lookup, so ``v_TITLE`` reads ``obj.TITLE`` for prefix ``v_``.
    Stripping is a plain string-prefix test: an attribute literally named
    ``v_TITLE`` cannot be told apart from a prefixed ``TITLE`` placeholder.
    Names without the prefix are looked up unchanged.
    """

    __slots__ = ("obj", "prefix", "columnTypes")

    def __init__(self, obj: Any, prefix: str, columns: Iterable[ColumnDefinition] = ()):
        """
        Initialize binder, dood!

        Args:
            obj: Object to read attributes from
            prefix: Non-empty prefix to strip from placeholder names
            columns: Columns used to report SQL types for resolved values

        Raises:
            ValueError: If prefix is empty
        """
        if not prefix:
            raise ValueError("ObjectPropertyBinder needs a non-empty prefix, dood!")
        self.obj = obj
        self.prefix = prefix
        self.columnTypes: Dict[str, TypeTag] = {col.name: col.type for col in columns}

    def _propertyName(self, name: str) -> str:
        if name.startswith(self.prefix):
            return name[len(self.prefix) :]
        return name

    def hasValue(self, name: str) -> bool:
        propertyName = self._propertyName(name)
        return bool(propertyName) and hasattr(self.obj, propertyName)

    def resolve(self, name: str) -> Resolved:
        propertyName = self._propertyName(name)
        if not propertyName or not hasattr(self.obj, propertyName):
            raise BinderError(
                f"{type(self.obj).__name__} has no property '{propertyName}' for parameter '{name}', dood!"
            )
        return getattr(self.obj, propertyName), self.columnTypes.get(propertyName, None)


class PriorityBinder(ParameterBinder):
    """
    Ordered chain of binders, the first one having a value wins, dood!

    For INSERT/UPDATE the key binder goes first, so key columns always come
    from the key object even if the value object has a matching property.
    """

    __slots__ = ("binders",)

    def __init__(self, *binders: ParameterBinder):
        self.binders: Tuple[ParameterBinder, ...] = binders

    def hasValue(self, name: str) -> bool:
        return any(binder.hasValue(name) for binder in self.binders)

    def resolve(self, name: str) -> Resolved:
        for binder in self.binders:
            if binder.hasValue(name):
                return binder.resolve(name)
        raise BinderError(f"No value registered for parameter '{name}', dood!")


def bindParameters(
    binder: ParameterBinder,
    names: Sequence[str],
    valueEncoder: Optional[ValueEncoder] = None,
) -> Dict[str, Any]:
    """
    Materialize driver parameters for a statement, dood!

    Every name is resolved through ``binder``, passed through ``valueEncoder``
    (if any) and adapted to a storable representation by its column type.

    Args:
        binder: Binder providing the values
        names: Parameter names used by the statement
        valueEncoder: Optional hook transforming resolved values, e.g. to
                      serialize objects for BLOB columns

    Returns:
        Dict[str, Any]: Parameters ready for ``cursor.execute(sql, params)``

    Raises:
        BinderError: If any name can not be resolved
    """
    params: Dict[str, Any] = {}
    for name in names:
        value, sqlType = binder.resolve(name)
        if valueEncoder is not None:
            value = valueEncoder(name, sqlType, value)
        params[name] = sqlType.adapt(value) if sqlType is not None else value
    return params
