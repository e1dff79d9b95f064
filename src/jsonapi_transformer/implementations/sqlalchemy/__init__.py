from .declarative import (  # noqa
    SQLADeclarative,
    build_mapping_for_class,
    declarative_with_defaults,
)
