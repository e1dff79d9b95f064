import abc
import typing

from .serde.utils import english_enumerate


class TransformerException(Exception, metaclass=abc.ABCMeta):
    message: str

    def __str__(self):
        return self.message


class EmptyRegistryError(TransformerException):
    @property
    def message(self):
        return "no mappings configured"


class MappingNotFoundError(TransformerException):
    class_: type

    @property
    def message(self):
        return f"no mapping found for {self.class_.__module__}.{self.class_.__qualname__}"

    def __init__(self, class_: type):
        self.class_ = class_


class UnsupportedIdentifierError(TransformerException):
    class_: type
    id_property_names: typing.Sequence[str]

    @property
    def message(self):
        return f"{self.class_.__name__} is identified by {english_enumerate(self.id_property_names)}, while composite identifiers are not supported"

    def __init__(self, class_: type, id_property_names: typing.Sequence[str]):
        self.class_ = class_
        self.id_property_names = id_property_names


class InvalidIdentifierError(TransformerException):
    message: str

    def __init__(self, message: str):
        self.message = message


class InvalidDeclarationError(TransformerException):
    message: str

    def __init__(self, message: str):
        self.message = message


class InvalidStructureError(TransformerException):
    message: str

    def __init__(self, message: str):
        self.message = message
