import logging
import typing
from collections import OrderedDict

from .exceptions import EmptyRegistryError, InvalidDeclarationError, MappingNotFoundError
from .models import Mapping

logger = logging.getLogger(__name__)


class MappingRegistry:
    """
    :py:class:`MappingRegistry` holds the :py:class:`Mapping` of every class known to the transformer.

    The registry is filled once at configuration time and only read afterwards.
    """

    _mappings: "OrderedDict[type, Mapping]"

    def add(self, mapping: Mapping) -> None:
        if mapping.class_ in self._mappings:
            raise InvalidDeclarationError(
                f"{mapping.class_.__name__} is already mapped to {self._mappings[mapping.class_].type_name}"
            )
        logger.debug("registering %s as %s", mapping.class_.__name__, mapping.type_name)
        self._mappings[mapping.class_] = mapping

    def lookup(self, class_: type) -> Mapping:
        """
        Returns the mapping for ``class_`` or its nearest mapped base class.

        :param type class_: the class to look up.
        :raises MappingNotFoundError: when neither the class nor any of its bases is mapped.
        """
        for c in class_.__mro__:
            mapping = self._mappings.get(c)
            if mapping is not None:
                return mapping
        raise MappingNotFoundError(class_)

    def lookup_by_type_name(self, type_name: str) -> Mapping:
        for mapping in self._mappings.values():
            if mapping.type_name == type_name:
                return mapping
        raise KeyError(type_name)

    def is_mapped(self, value: typing.Any) -> bool:
        if value is None or isinstance(value, type):
            return False
        try:
            self.lookup(type(value))
        except MappingNotFoundError:
            return False
        return True

    def require_non_empty(self) -> None:
        if not self._mappings:
            raise EmptyRegistryError()

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> typing.Iterator[Mapping]:
        return iter(self._mappings.values())

    def __contains__(self, class_: typing.Any) -> bool:
        return class_ in self._mappings

    def __init__(self, mappings: typing.Iterable[Mapping] = ()):
        self._mappings = OrderedDict()
        for mapping in mappings:
            self.add(mapping)
