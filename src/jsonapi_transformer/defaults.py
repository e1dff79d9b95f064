import dataclasses
import typing

from .interfaces import NativeInspector
from .models import Mapping


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _slot_names(class_: type) -> typing.List[str]:
    names: typing.List[str] = []
    for c in reversed(class_.__mro__):
        slots = c.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in names and name not in ("__dict__", "__weakref__"):
                names.append(name)
    return names


class DefaultNativeInspectorImpl(NativeInspector):
    """
    The inspector used unless told otherwise. Properties are discovered in the following order of precedence:

    1. :py:attr:`Mapping.properties`, when given.
    2. the fields of a dataclass.
    3. the names in ``__slots__`` that are set on the object, followed by the instance dictionary.

    Names beginning with an underscore are never discovered.
    """

    def _discover(self, target: typing.Any) -> typing.List[str]:
        if dataclasses.is_dataclass(target) and not isinstance(target, type):
            return [f.name for f in dataclasses.fields(target)]
        names = [n for n in _slot_names(type(target)) if hasattr(target, n)]
        for name in getattr(target, "__dict__", {}):
            if name not in names:
                names.append(name)
        return names

    def property_names(self, mapping: Mapping, target: typing.Any) -> typing.Sequence[str]:
        names = list(mapping.properties) if mapping.properties else self._discover(target)
        return [n for n in names if _is_public(n) and not mapping.is_hidden(n)]

    def fetch_value(self, mapping: Mapping, target: typing.Any, name: str) -> typing.Any:
        return mapping.get_value(target, name)

    def public_properties(self, target: typing.Any) -> typing.Iterable[typing.Tuple[str, typing.Any]]:
        for name in self._discover(target):
            if _is_public(name):
                yield name, getattr(target, name)
