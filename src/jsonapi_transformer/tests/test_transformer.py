import dataclasses
import datetime
import types
import typing

import pytest

from .testing import (
    Comment,
    Node,
    Point,
    Post,
    SimpleComment,
    SimplePost,
    User,
    complex_mappings,
    complex_post,
    simple_comments_attribute,
    simple_post,
)

META = {
    "author": {
        "name": "Nil Portugués Calderó",
        "email": "contact@nilportugues.com",
    },
    "is_devel": True,
}


def user_resource(id: int, name: str) -> typing.Dict[str, typing.Any]:
    return {
        "type": "user",
        "id": str(id),
        "attributes": {"name": name},
        "links": {
            "self": {"href": f"http://example.com/users/{id}"},
            "friends": {"href": f"http://example.com/users/{id}/friends"},
            "comments": {"href": f"http://example.com/users/{id}/comments"},
        },
    }


def post_resource(relationships: bool = True) -> typing.Dict[str, typing.Any]:
    retval: typing.Dict[str, typing.Any] = {
        "type": "post",
        "id": "9",
        "attributes": {
            "post_id": 9,
            "title": "Hello World",
            "content": "Your first post",
        },
        "links": {
            "self": {"href": "http://example.com/posts/9"},
            "comments": {"href": "http://example.com/posts/9/comments"},
        },
    }
    if relationships:
        retval["relationships"] = {
            "author": {
                "links": {
                    "self": {"href": "http://example.com/posts/9/relationships/author"},
                    "related": {"href": "http://example.com/posts/9/author"},
                },
                "data": {"type": "user", "id": "1"},
            },
            "comments": {
                "data": [{"type": "comment", "id": "1000"}],
            },
        }
    return retval


DOCUMENT_LINKS = {
    "self": {"href": "http://example.com/posts/9"},
    "comments": {"href": "http://example.com/posts/9/comments"},
}


@pytest.fixture
def complex_transformer():
    from ..registry import MappingRegistry
    from ..transformer import JsonApiTransformer

    return JsonApiTransformer(MappingRegistry(complex_mappings()))


def simple_transformer(**kwargs):
    from ..models import Mapping
    from ..registry import MappingRegistry
    from ..transformer import JsonApiTransformer

    kwargs.setdefault("type_alias", "post")
    return JsonApiTransformer(
        MappingRegistry(
            [
                Mapping(
                    class_=SimplePost,
                    url_template=kwargs.pop("url_template", "/post/{post_id}"),
                    id_property_names=["post_id"],
                    **kwargs,
                ),
            ]
        )
    )


class TestComplexObject:
    def test_default_includes_everything(self, complex_transformer):
        result = complex_transformer.serialize(complex_post(), meta=META)
        assert result == {
            "data": post_resource(),
            "included": [
                user_resource(1, "Post Author"),
                user_resource(3, "First Liker"),
                user_resource(4, "Second Liker"),
                user_resource(2, "Barristan Selmy"),
                {
                    "type": "comment",
                    "id": "1000",
                    "attributes": {
                        "dates": {
                            "created_at": "2015-07-18T12:13:00+00:00",
                            "accepted_at": "2015-07-19T00:00:00+00:00",
                        },
                        "comment": "Have no fear, sers, your king is safe.",
                    },
                    "relationships": {
                        "likes": {
                            "data": [
                                {"type": "user", "id": "3"},
                                {"type": "user", "id": "4"},
                            ],
                        },
                        "user": {
                            "data": {"type": "user", "id": "2"},
                        },
                    },
                    "links": {
                        "self": {"href": "http://example.com/comments/1000"},
                    },
                },
            ],
            "links": DOCUMENT_LINKS,
            "meta": META,
            "jsonapi": {"version": "1.0"},
        }

    @pytest.mark.parametrize("include", ["user", "user.post"])
    def test_include_by_type(self, complex_transformer, include):
        result = complex_transformer.serialize(complex_post(), includes=[include], meta=META)
        assert result == {
            "data": post_resource(),
            "included": [
                user_resource(1, "Post Author"),
            ],
            "links": DOCUMENT_LINKS,
            "meta": META,
            "jsonapi": {"version": "1.0"},
        }

    def test_include_by_relationship_path(self, complex_transformer):
        result = complex_transformer.serialize(complex_post(), includes="comments.user")
        assert [(r["type"], r["id"]) for r in result["included"]] == [
            ("user", "2"),
            ("comment", "1000"),
        ]

    def test_include_nothing(self, complex_transformer):
        result = complex_transformer.serialize(complex_post(), includes=[])
        assert "included" not in result
        assert result["data"] == post_resource()

    def test_include_by_unrelated_type_path(self, complex_transformer):
        result = complex_transformer.serialize(complex_post(), includes=["user.comment"])
        # the likers and the commenter are reached from a comment,
        # which is not included, hence never traversed
        assert "included" not in result

    def test_fields(self, complex_transformer):
        from ..filters import FieldFilter

        fields = FieldFilter()
        fields.add_field("post", "title")
        result = complex_transformer.serialize(complex_post(), fields=fields, meta=META)
        assert result == {
            "data": {
                "type": "post",
                "id": "9",
                "attributes": {
                    "title": "Hello World",
                },
                "links": {
                    "self": {"href": "http://example.com/posts/9"},
                    "comments": {"href": "http://example.com/posts/9/comments"},
                },
            },
            "links": DOCUMENT_LINKS,
            "meta": META,
            "jsonapi": {"version": "1.0"},
        }

    def test_fields_keep_relationship(self, complex_transformer):
        result = complex_transformer.serialize(
            complex_post(), fields={"post": "title,author"}, includes=None
        )
        assert result["data"]["attributes"] == {"title": "Hello World"}
        assert list(result["data"]["relationships"]) == ["author"]
        assert result["included"] == [user_resource(1, "Post Author")]

    def test_fields_do_not_apply_to_included(self, complex_transformer):
        result = complex_transformer.serialize(
            complex_post(), fields={"user": "nonexistent"}, includes=["author"]
        )
        assert result["included"] == [user_resource(1, "Post Author")]

    def test_fields_idempotent(self, complex_transformer):
        fields = {"post": ["title", "title"]}
        assert complex_transformer.serialize(
            complex_post(), fields=fields
        ) == complex_transformer.serialize(complex_post(), fields={"post": "title"})

    def test_fields_listing_everything(self, complex_transformer):
        unfiltered = complex_transformer.serialize(complex_post())
        result = complex_transformer.serialize(
            complex_post(), fields={"post": "post_id,title,content,author,comments"}
        )
        assert result["data"]["attributes"] == unfiltered["data"]["attributes"]
        assert result["data"]["relationships"] == unfiltered["data"]["relationships"]
        assert result == unfiltered

    def test_deterministic(self, complex_transformer):
        post = complex_post()
        assert complex_transformer.serialize(post) == complex_transformer.serialize(post)

    def test_caller_links(self, complex_transformer):
        result = complex_transformer.serialize(
            complex_post(), includes=[], links={"describedby": "http://example.com/schema"}
        )
        assert result["links"] == {
            "self": {"href": "http://example.com/posts/9"},
            "comments": {"href": "http://example.com/posts/9/comments"},
            "describedby": {"href": "http://example.com/schema"},
        }


class TestSimpleObject:
    def expected(self, attributes, type_="post", href="/post/1"):
        return {
            "data": {
                "type": type_,
                "id": "1",
                "attributes": attributes,
                "links": {"self": {"href": href}},
            },
            "links": {"self": {"href": href}},
            "jsonapi": {"version": "1.0"},
        }

    def test_unmapped_values_are_attributes(self):
        result = simple_transformer().serialize(simple_post())
        assert result == self.expected(
            {
                "post_id": 1,
                "title": "post title",
                "body": "post body",
                "author_id": 2,
                "comments": simple_comments_attribute(),
            }
        )

    def test_attribute_filter(self):
        result = simple_transformer(
            properties=["post_id", "title", "body", "author_id", "comments"],
            attribute_filter={"body"},
        ).serialize(simple_post())
        assert result == self.expected({"body": "post body"})

    def test_aliases(self):
        result = simple_transformer(
            property_aliases={"title": "headline", "body": "post", "post_id": "someId"},
        ).serialize(simple_post())
        assert result == self.expected(
            {
                "some_id": 1,
                "headline": "post title",
                "post": "post body",
                "author_id": 2,
                "comments": simple_comments_attribute(),
            }
        )

    def test_hidden_properties(self):
        result = simple_transformer(hidden_properties={"title", "body"}).serialize(simple_post())
        assert result == self.expected(
            {
                "post_id": 1,
                "author_id": 2,
                "comments": simple_comments_attribute(),
            }
        )

    def test_type_alias(self):
        result = simple_transformer(type_alias="Message").serialize(simple_post())
        assert result == self.expected(
            {
                "post_id": 1,
                "title": "post title",
                "body": "post body",
                "author_id": 2,
                "comments": simple_comments_attribute(),
            },
            type_="message",
        )

    def test_type_name_from_class_name(self):
        result = simple_transformer(type_alias=None, hidden_properties={"comments"}).serialize(
            simple_post()
        )
        assert result["data"]["type"] == "simple_post"

    def test_url_placeholder_named_after_type(self):
        result = simple_transformer(
            url_template="/post/{post}", hidden_properties={"title", "body"}
        ).serialize(simple_post())
        assert result == self.expected(
            {
                "post_id": 1,
                "author_id": 2,
                "comments": simple_comments_attribute(),
            }
        )

    def test_collection(self):
        posts = [
            SimplePost(1, "post title 1", "post body 1", 4),
            SimplePost(2, "post title 2", "post body 2", 5),
        ]
        result = simple_transformer(
            properties=["post_id", "title", "body", "author_id", "comments"],
            attribute_filter={"body", "title"},
        ).serialize(posts, meta=META)
        assert result == {
            "data": [
                {
                    "type": "post",
                    "id": "1",
                    "attributes": {
                        "title": "post title 1",
                        "body": "post body 1",
                    },
                    "links": {"self": {"href": "/post/1"}},
                },
                {
                    "type": "post",
                    "id": "2",
                    "attributes": {
                        "title": "post title 2",
                        "body": "post body 2",
                    },
                    "links": {"self": {"href": "/post/2"}},
                },
            ],
            "meta": META,
            "jsonapi": {"version": "1.0"},
        }

    def test_empty_collection(self):
        result = simple_transformer().serialize([], links={"self": "/posts"})
        assert result == {
            "data": [],
            "links": {"self": {"href": "/posts"}},
            "jsonapi": {"version": "1.0"},
        }


def test_objects_without_mapping_are_flattened():
    from ..models import Mapping
    from ..registry import MappingRegistry
    from ..transformer import JsonApiTransformer

    @dataclasses.dataclass
    class Remark:
        id: int
        created_at: datetime.datetime
        comment: typing.Any
        location: Point

    transformer = JsonApiTransformer(
        MappingRegistry(
            [Mapping(Remark, "/comment/{id}", type_alias="comment")],
        )
    )
    remark = Remark(
        id=1,
        created_at=datetime.datetime(2015, 11, 20, 21, 43, 31, tzinfo=datetime.timezone.utc),
        comment=types.SimpleNamespace(userName="Joe", commentBody="Hello World"),
        location=Point(1, 2),
    )
    result = transformer.serialize(remark)
    assert result == {
        "data": {
            "type": "comment",
            "id": "1",
            "attributes": {
                "id": 1,
                "created_at": "2015-11-20T21:43:31+00:00",
                "comment": {
                    "user_name": "Joe",
                    "comment_body": "Hello World",
                },
                "location": {"x": 1, "y": 2},
            },
            "links": {"self": {"href": "/comment/1"}},
        },
        "links": {"self": {"href": "/comment/1"}},
        "jsonapi": {"version": "1.0"},
    }


@pytest.fixture
def node_transformer():
    from ..models import Mapping
    from ..registry import MappingRegistry
    from ..transformer import JsonApiTransformer

    return JsonApiTransformer(
        MappingRegistry([Mapping(Node, "/nodes/{id}", relationships={"peer"})])
    )


class TestGraph:
    def test_cycle(self, node_transformer):
        a = Node(1, "a")
        b = Node(2, "b", a)
        a.peer = b
        result = node_transformer.serialize(a)
        assert result["data"]["relationships"]["peer"]["data"] == {"type": "node", "id": "2"}
        assert result["included"] == [
            {
                "type": "node",
                "id": "2",
                "attributes": {"id": 2, "label": "b"},
                "relationships": {"peer": {"data": {"type": "node", "id": "1"}}},
                "links": {"self": {"href": "/nodes/2"}},
            },
        ]

    def test_self_reference(self, node_transformer):
        a = Node(1, "a")
        a.peer = a
        result = node_transformer.serialize(a)
        assert result["data"]["relationships"] == {
            "peer": {
                "links": {
                    "self": {"href": "/nodes/1/relationships/peer"},
                    "related": {"href": "/nodes/1/peer"},
                },
                "data": {"type": "node", "id": "1"},
            },
        }
        assert "included" not in result

    def test_null_to_one(self, node_transformer):
        result = node_transformer.serialize(Node(1, "a"))
        assert result["data"]["relationships"]["peer"]["data"] is None
        assert "included" not in result

    def test_primary_resources_never_included(self, node_transformer):
        a = Node(1, "a")
        b = Node(2, "b", a)
        a.peer = b
        result = node_transformer.serialize([a, b])
        assert [r["id"] for r in result["data"]] == ["1", "2"]
        assert "included" not in result
        assert "links" not in result

    def test_unordered_collections_by_identity(self, node_transformer):
        peers = {Node(10, "j"), Node(3, "c"), Node(2, "b")}
        result = node_transformer.serialize(Node(1, "a", peers))  # type: ignore
        assert result["data"]["relationships"]["peer"]["data"] == [
            {"type": "node", "id": "10"},
            {"type": "node", "id": "2"},
            {"type": "node", "id": "3"},
        ]
        assert [r["id"] for r in result["included"]] == ["10", "2", "3"]

        result = node_transformer.serialize(frozenset([Node(5, "e"), Node(4, "d")]))
        assert [r["id"] for r in result["data"]] == ["4", "5"]

    def test_dedup_by_identity(self, node_transformer):
        # distinct objects sharing the same type and id
        a = Node(1, "a", Node(3, "c"))
        b = Node(2, "b", Node(3, "c"))
        result = node_transformer.serialize([a, b])
        assert [(r["type"], r["id"]) for r in result["included"]] == [("node", "3")]

    def test_included_once_per_document(self, complex_transformer):
        author = User(1, "Post Author")
        post = complex_post()
        post.author = author
        post.comments[0].likes.append(User(1, "Post Author"))
        result = complex_transformer.serialize(post)
        identities = [(r["type"], r["id"]) for r in result["included"]]
        assert identities == [
            ("user", "1"),
            ("user", "3"),
            ("user", "4"),
            ("user", "2"),
            ("comment", "1000"),
        ]
        assert len(set(identities)) == len(identities)

    def test_subclass_of_mapped_class(self, complex_transformer):
        class Admin(User):
            pass

        post = complex_post()
        post.author = Admin(1, "Post Author")
        result = complex_transformer.serialize(post, includes=["author"])
        assert result["included"] == [user_resource(1, "Post Author")]


class TestRelationships:
    def test_declared_empty_to_many(self):
        from ..models import Mapping
        from ..registry import MappingRegistry
        from ..transformer import JsonApiTransformer

        transformer = JsonApiTransformer(
            MappingRegistry(
                [
                    Mapping(
                        Post,
                        "/posts/{post_id}",
                        id_property_names=["post_id"],
                        relationships={"author", "comments"},
                    ),
                    Mapping(Comment, "/comments/{comment_id}", id_property_names=["comment_id"]),
                    Mapping(User, "/users/{user_id}", id_property_names=["user_id"]),
                ]
            )
        )
        result = transformer.serialize(Post(1, "title", "content"))
        assert result["data"]["attributes"] == {
            "post_id": 1,
            "title": "title",
            "content": "content",
        }
        assert result["data"]["relationships"]["author"]["data"] is None
        assert result["data"]["relationships"]["comments"]["data"] == []

    def test_undeclared_empty_values_are_attributes(self, complex_transformer):
        result = complex_transformer.serialize(Post(1, "title", "content"))
        assert result["data"]["attributes"] == {
            "post_id": 1,
            "title": "title",
            "content": "content",
            "author": None,
            "comments": [],
        }
        assert "relationships" not in result["data"]

    def test_aliased_relationship(self):
        from ..models import Mapping
        from ..registry import MappingRegistry
        from ..transformer import JsonApiTransformer

        transformer = JsonApiTransformer(
            MappingRegistry(
                [
                    Mapping(
                        Post,
                        "/posts/{post_id}",
                        id_property_names=["post_id"],
                        property_aliases={"author": "writer"},
                        hidden_properties={"comments"},
                    ),
                    Mapping(User, "/users/{user_id}", id_property_names=["user_id"]),
                ]
            )
        )
        result = transformer.serialize(complex_post(), fields={"post": "writer"})
        assert result["data"]["relationships"] == {
            "writer": {
                "links": {
                    "self": {"href": "/posts/9/relationships/writer"},
                    "related": {"href": "/posts/9/writer"},
                },
                "data": {"type": "user", "id": "1"},
            },
        }

    def test_mixed_sequence(self, complex_transformer):
        from ..exceptions import MappingNotFoundError

        post = complex_post()
        post.comments.append("not a comment")  # type: ignore
        with pytest.raises(MappingNotFoundError) as e:
            complex_transformer.serialize(post)
        assert e.value.class_ is str


class TestErrors:
    def test_missing_property(self):
        from ..exceptions import InvalidDeclarationError
        from ..models import Mapping
        from ..registry import MappingRegistry
        from ..transformer import JsonApiTransformer

        transformer = JsonApiTransformer(
            MappingRegistry(
                [
                    Mapping(
                        User,
                        "/users/{user_id}",
                        id_property_names=["user_id"],
                        properties=["name", "nickname"],
                    )
                ]
            )
        )
        with pytest.raises(InvalidDeclarationError) as e:
            transformer.serialize(User(1, "a"))
        assert "nickname" in str(e.value)

    def test_empty_registry(self):
        from ..exceptions import EmptyRegistryError, TransformerException
        from ..registry import MappingRegistry
        from ..transformer import JsonApiTransformer

        with pytest.raises(EmptyRegistryError) as e:
            JsonApiTransformer(MappingRegistry()).serialize(object())
        assert isinstance(e.value, TransformerException)
        assert str(e.value) == "no mappings configured"

    def test_mapping_not_found(self, complex_transformer):
        from ..exceptions import MappingNotFoundError

        with pytest.raises(MappingNotFoundError):
            complex_transformer.serialize(simple_post())

    def test_composite_identifier(self):
        from ..exceptions import UnsupportedIdentifierError
        from ..models import Mapping
        from ..registry import MappingRegistry
        from ..transformer import JsonApiTransformer

        transformer = JsonApiTransformer(
            MappingRegistry(
                [Mapping(User, "/users/{user_id}", id_property_names=["user_id", "name"])]
            )
        )
        with pytest.raises(UnsupportedIdentifierError):
            transformer.serialize(User(1, "a"))

    def test_null_identifier(self, complex_transformer):
        from ..exceptions import InvalidIdentifierError

        with pytest.raises(InvalidIdentifierError):
            complex_transformer.serialize(User(None, "a"))  # type: ignore

    def test_cyclic_nested_value(self):
        from ..exceptions import InvalidStructureError

        node = Node(1, "a")
        node.peer = node
        post = simple_post()
        post.comments = [node]  # type: ignore
        with pytest.raises(InvalidStructureError):
            simple_transformer().serialize(post)


def test_build_document(complex_transformer):
    from ..serde.models import SingletonDocumentRepr

    result = complex_transformer.build_document(complex_post(), includes=["author"])
    assert isinstance(result, SingletonDocumentRepr)
    assert result.data is not None
    assert result.data.identity == ("post", "9")
    assert [r.identity for r in result.included] == [("user", "1")]
    assert result.links is not None
    assert result.links.self_.href == "http://example.com/posts/9"
