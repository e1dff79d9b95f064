import re
import typing

_separators = re.compile(r"[\s\-]+")
_acronym_boundary = re.compile(r"([A-Z]+)([A-Z][a-z])")
_word_boundary = re.compile(r"([a-z\d])([A-Z])")


def normalize_name(name: str) -> str:
    """
    Converts a property or type name into snake_case.

    .. code-block:: python

       normalize_name("postId")  # "post_id"
       normalize_name("HTTPResponse")  # "http_response"
       normalize_name("created-at")  # "created_at"
       normalize_name("post_id")  # "post_id"
    """
    name = _separators.sub("_", name.strip())
    name = _acronym_boundary.sub(r"\1_\2", name)
    name = _word_boundary.sub(r"\1_\2", name)
    return name.lower()


def type_name_for_class(class_: type, alias: typing.Optional[str] = None) -> str:
    return normalize_name(alias if alias else class_.__name__)
