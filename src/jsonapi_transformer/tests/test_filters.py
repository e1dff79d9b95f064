import pytest


class TestFieldFilter:
    def test_empty(self):
        from ..filters import FieldFilter

        target = FieldFilter()
        assert not target
        assert target.allows("post", "title")
        assert target.fields_for("post") == ()

    def test_allows(self):
        from ..filters import FieldFilter

        target = FieldFilter({"post": "title, authorId", "user": ["name"]})
        assert target
        assert target.allows("post", "title")
        assert target.allows("post", "author_id")
        assert target.allows("Post", "authorId")
        assert not target.allows("post", "body")
        assert target.allows("comment", "body")
        assert target.fields_for("user") == ("name",)

    def test_add_field_is_idempotent(self):
        from ..filters import FieldFilter

        target = FieldFilter()
        target.add_field("post", "title")
        target.add_field("post", "title")
        assert target.fields_for("post") == ("title",)


class TestIncludeFilter:
    def test_paths(self):
        from ..filters import IncludeFilter

        target = IncludeFilter("comments.user, author,,comments.user")
        assert target.paths == ("comments.user", "author")
        assert target
        assert not IncludeFilter()

    @pytest.mark.parametrize(
        ("paths", "type_name", "chain", "ancestors", "expected"),
        [
            (["comments.user"], "comment", ["comments"], ["post"], True),
            (["comments.user"], "user", ["comments", "user"], ["comment", "post"], True),
            (["comments.user"], "user", ["comments", "likes"], ["comment", "post"], False),
            (["comments"], "user", ["comments", "user"], ["comment", "post"], False),
            (["user"], "user", ["author"], ["post"], True),
            (["user.post"], "user", ["author"], ["post"], True),
            (["user.post"], "user", ["comments", "user"], ["comment", "post"], False),
            (["user.comment.post"], "user", ["comments", "user"], ["comment", "post"], True),
            (["author"], "user", ["author"], ["post"], True),
            ([], "user", ["author"], ["post"], False),
        ],
    )
    def test_matches(self, paths, type_name, chain, ancestors, expected):
        from ..filters import IncludeFilter

        assert IncludeFilter(paths).matches(type_name, chain, ancestors) is expected
