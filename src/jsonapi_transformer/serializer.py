import json
import typing

from .transformer import FieldsSpec, IncludesSpec, JsonApiTransformer, LinksSpec


class JsonApiSerializer:
    """
    :py:class:`JsonApiSerializer` encodes the documents produced by a :py:class:`JsonApiTransformer` into JSON text.

    :param JsonApiTransformer transformer: the transformer building the documents.
    :param dump_options: keyword arguments passed through to :py:func:`json.dumps`.
    """

    _transformer: JsonApiTransformer
    _dump_options: typing.Dict[str, typing.Any]

    @property
    def transformer(self) -> JsonApiTransformer:
        return self._transformer

    def serialize(
        self,
        value: typing.Any,
        fields: typing.Optional[FieldsSpec] = None,
        includes: typing.Optional[IncludesSpec] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        links: typing.Optional[LinksSpec] = None,
    ) -> str:
        return json.dumps(
            self._transformer.serialize(value, fields, includes, meta, links),
            **self._dump_options,
        )

    def __init__(self, transformer: JsonApiTransformer, **dump_options: typing.Any):
        self._transformer = transformer
        self._dump_options = dump_options
