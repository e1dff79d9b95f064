"""
This module contains the interface definitions through which the transformer
looks into native objects. Alternative implementations can be supplied to
:py:class:`jsonapi_transformer.transformer.JsonApiTransformer`.

"""
import abc
import typing

from .models import Mapping


class NativeInspector(metaclass=abc.ABCMeta):
    """
    A :py:class:`NativeInspector` tells the transformer which properties a native object
    exposes and how to read them.
    """

    @abc.abstractmethod
    def property_names(self, mapping: Mapping, target: typing.Any) -> typing.Sequence[str]:
        """
        Returns the names of the properties of the target that are candidates
        for attributes and relationships, in the order they are to be emitted.
        Hidden properties are excluded.

        :param Mapping mapping: the mapping the target is governed by.
        :param Any target: a native object.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def fetch_value(self, mapping: Mapping, target: typing.Any, name: str) -> typing.Any:
        """
        Fetches the value of the property named ``name`` from the target.

        :param Mapping mapping: the mapping the target is governed by.
        :param Any target: a native object.
        :param str name: the name of the property.
        :return: The fetched value.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def public_properties(self, target: typing.Any) -> typing.Iterable[typing.Tuple[str, typing.Any]]:
        """
        Enumerates the public properties of an object no mapping governs,
        which is then flattened into a plain dictionary.
        """
        ...  # pragma: nocover
