import json

from .testing import complex_mappings, complex_post


def test_serialize():
    from ..registry import MappingRegistry
    from ..serializer import JsonApiSerializer
    from ..transformer import JsonApiTransformer

    transformer = JsonApiTransformer(MappingRegistry(complex_mappings()))
    target = JsonApiSerializer(transformer, sort_keys=True)
    assert target.transformer is transformer

    result = target.serialize(complex_post(), fields={"post": "title"}, meta={"total": 1})
    assert result == json.dumps(
        transformer.serialize(complex_post(), fields={"post": "title"}, meta={"total": 1}),
        sort_keys=True,
    )
    assert json.loads(result)["data"] == {
        "type": "post",
        "id": "9",
        "attributes": {"title": "Hello World"},
        "links": {
            "self": {"href": "http://example.com/posts/9"},
            "comments": {"href": "http://example.com/posts/9/comments"},
        },
    }
