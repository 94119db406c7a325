"""
Externalizer registry: type -> externalizer dispatch table, dood!
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple, Type

from .types import Externalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Discriminator record written before externalizer-encoded payloads, dood!

    Identifies the concrete type of the encoded value by module and
    qualified name. The type itself is never imported while decoding, the
    descriptor is only used as a key into the registry.
    """

    module: str
    qualname: str

    @classmethod
    def fromType(cls, valueType: Type[Any]) -> "TypeDescriptor":
        return cls(module=valueType.__module__, qualname=valueType.__qualname__)

    @property
    def key(self) -> str:
        return f"{self.module}.{self.qualname}"


class ExternalizerRegistry:
    """
    Mapping from concrete value type to its externalizer, dood!

    The registry is filled at configuration time and frozen before use
    (``ObjectCodec`` freezes the registry it gets). After freezing it is
    read-only, so lookups need no locking. Lookups use the exact concrete
    type, subclasses of a registered type are not matched.

    Example:
        >>> registry = ExternalizerRegistry()
        >>> registry.register(NonSerializableBook, BookExternalizer())
        >>> registry.freeze()
        >>> registry.getForType(NonSerializableBook)
        <BookExternalizer object at ...>
    """

    def __init__(self, externalizers: Optional[Dict[Type[Any], Externalizer[Any]]] = None):
        self._byType: Dict[Type[Any], Externalizer[Any]] = {}
        self._byKey: Dict[str, Tuple[Type[Any], Externalizer[Any]]] = {}
        self._frozen = False
        self._lock = threading.Lock()

        for valueType, externalizer in (externalizers or {}).items():
            self.register(valueType, externalizer)

    def register(self, valueType: Type[Any], externalizer: Externalizer[Any]) -> None:
        """
        Register externalizer for a concrete type, dood!

        Args:
            valueType: Concrete type handled by the externalizer
            externalizer: Externalizer instance

        Raises:
            RuntimeError: If the registry is already frozen
        """
        with self._lock:
            if self._frozen:
                raise RuntimeError(
                    f"Can not register externalizer for {valueType.__qualname__}: registry is frozen, dood!"
                )
            descriptor = TypeDescriptor.fromType(valueType)
            if valueType in self._byType:
                logger.warning(f"Replacing externalizer for {descriptor.key}, dood!")
            self._byType[valueType] = externalizer
            self._byKey[descriptor.key] = (valueType, externalizer)
            logger.debug(f"Registered externalizer {type(externalizer).__name__} for {descriptor.key}, dood!")

    def freeze(self) -> None:
        """Forbid further registrations, dood!"""
        with self._lock:
            if not self._frozen:
                self._frozen = True
                logger.debug(f"Externalizer registry frozen with {len(self._byType)} entries, dood!")

    @property
    def isFrozen(self) -> bool:
        return self._frozen

    def getForType(self, valueType: Type[Any]) -> Optional[Externalizer[Any]]:
        return self._byType.get(valueType, None)

    def getForDescriptor(self, descriptor: TypeDescriptor) -> Optional[Externalizer[Any]]:
        entry = self._byKey.get(descriptor.key, None)
        return entry[1] if entry is not None else None

    def __contains__(self, valueType: object) -> bool:
        return valueType in self._byType

    def __len__(self) -> int:
        return len(self._byType)

    def __iter__(self) -> Iterator[Type[Any]]:
        return iter(self._byType)
