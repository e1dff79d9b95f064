from .exceptions import (  # noqa
    EmptyRegistryError,
    InvalidDeclarationError,
    InvalidIdentifierError,
    InvalidStructureError,
    MappingNotFoundError,
    TransformerException,
    UnsupportedIdentifierError,
)
from .filters import FieldFilter, IncludeFilter  # noqa
from .links import LinkBuilder  # noqa
from .models import Mapping  # noqa
from .naming import normalize_name, type_name_for_class  # noqa
from .registry import MappingRegistry  # noqa
from .serializer import JsonApiSerializer  # noqa
from .transformer import JsonApiTransformer  # noqa
