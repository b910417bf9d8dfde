"""Post and comment CRUD plus thread ordering."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from forum.models.user import Role
from forum.services._shared.dto import PaginationIn
from forum.services._shared.errors import (
    CommentNotFound,
    Forbidden,
    InvalidParentComment,
    NotLoggedIn,
    PostNotFound,
)
from forum.services.content import (
    CommentIn,
    CommentService,
    PostIn,
    PostService,
    PostUpdateIn,
    thread_order,
)
from tests.factories.content import CommentFactory, CommentLikeFactory, PostFactory, PostLikeFactory
from tests.factories.user import UserFactory
from tests.helpers.services import ctx_for


@pytest.fixture()
def author(session):
    u = UserFactory(name="Author")
    session.commit()
    return u


# ------------------------------ thread_order ------------------------------ #
def _c(id_, parent_id=None):
    return SimpleNamespace(id=id_, parent_id=parent_id)


def test_thread_order_nests_replies_under_their_parent():
    comments = [_c(1), _c(2), _c(3, 1), _c(4, 3), _c(5, 1)]

    ordered = [(c.id, depth) for c, depth in thread_order(comments)]

    assert ordered == [(1, 0), (3, 1), (4, 2), (5, 1), (2, 0)]


def test_thread_order_treats_orphans_as_roots():
    ordered = [(c.id, d) for c, d in thread_order([_c(1), _c(9, 77)])]
    assert ordered == [(1, 0), (9, 0)]


# --------------------------------- Posts ---------------------------------- #
def test_create_and_get_post(author):
    svc = PostService(ctx=ctx_for(author))

    created = svc.create_post(PostIn(title="Hello", content="First post"))
    fetched = PostService().get_post(created.id)

    assert fetched.title == "Hello"
    assert fetched.user_id == author.id
    assert fetched.author_name == "Author"
    assert fetched.likes == 0


def test_create_post_requires_identity():
    with pytest.raises(NotLoggedIn):
        PostService().create_post(PostIn(title="t", content="c"))


def test_get_missing_post():
    with pytest.raises(PostNotFound):
        PostService().get_post(999)


def test_list_posts_pages_newest_first_with_like_counts(session, author):
    posts = PostFactory.create_batch(5, author=author)
    PostLikeFactory.create_batch(2, post=posts[-1])
    session.commit()

    page = PostService().list_posts(PaginationIn(page=1, limit=2))

    assert page.meta.total == 5
    assert page.meta.has_next and not page.meta.has_prev
    assert len(page.items) == 2
    assert page.items[0].id == posts[-1].id
    assert page.items[0].likes == 2

    last = PostService().list_posts(PaginationIn(page=3, limit=2))
    assert [p.id for p in last.items] == [posts[0].id]
    assert last.meta.has_prev and not last.meta.has_next


def test_update_post_partially(session, author):
    post = PostFactory(author=author, title="Old", content="Body")
    session.commit()

    out = PostService(ctx=ctx_for(author)).update_post(post.id, PostUpdateIn(title="New"))

    assert (out.title, out.content) == ("New", "Body")


def test_update_post_by_stranger_is_forbidden(session, author):
    post = PostFactory(author=author)
    stranger = UserFactory()
    session.commit()

    with pytest.raises(Forbidden, match="author or an administrator"):
        PostService(ctx=ctx_for(stranger)).update_post(post.id, PostUpdateIn(title="Hijack"))


def test_admin_may_update_any_post(session, author):
    post = PostFactory(author=author)
    admin = UserFactory(role=Role.ADMIN)
    session.commit()

    out = PostService(ctx=ctx_for(admin)).update_post(post.id, PostUpdateIn(content="Moderated"))
    assert out.content == "Moderated"


def test_delete_post_delegates_to_tree_deletion(session, author):
    post = PostFactory(author=author)
    CommentFactory(post=post)
    session.commit()

    result = PostService(ctx=ctx_for(author)).delete_post(post.id)

    assert result.post_id == post.id
    assert len(result.comment_ids) == 1
    with pytest.raises(PostNotFound):
        PostService().get_post(post.id)


# -------------------------------- Comments -------------------------------- #
def test_create_root_comment_and_reply(session, author):
    post = PostFactory()
    session.commit()
    svc = CommentService(ctx=ctx_for(author))

    root = svc.create_comment(post.id, CommentIn(content="root"))
    reply = svc.create_comment(post.id, CommentIn(content="reply", parent_id=root.id))

    assert root.parent_id is None
    assert reply.parent_id == root.id
    assert reply.post_id == post.id


def test_reply_to_comment_of_another_post_is_invalid(session, author):
    post = PostFactory()
    foreign = CommentFactory()
    session.commit()

    with pytest.raises(InvalidParentComment):
        CommentService(ctx=ctx_for(author)).create_comment(
            post.id, CommentIn(content="x", parent_id=foreign.id)
        )


def test_reply_to_unknown_parent_is_invalid(session, author):
    post = PostFactory()
    session.commit()

    with pytest.raises(InvalidParentComment):
        CommentService(ctx=ctx_for(author)).create_comment(
            post.id, CommentIn(content="x", parent_id=123456)
        )


def test_comment_on_missing_post(author):
    with pytest.raises(PostNotFound):
        CommentService(ctx=ctx_for(author)).create_comment(5555, CommentIn(content="x"))


def test_list_comments_in_thread_order_with_depth_and_likes(session):
    post = PostFactory()
    first = CommentFactory(post=post)
    second = CommentFactory(post=post)
    reply = CommentFactory(parent=first)
    CommentLikeFactory(comment=reply)
    session.commit()

    listed = CommentService().list_comments(post.id)

    assert [(c.id, c.depth) for c in listed] == [(first.id, 0), (reply.id, 1), (second.id, 0)]
    assert [c.likes for c in listed] == [0, 1, 0]


def test_only_author_edits_comment_even_admin_cannot(session, author):
    comment = CommentFactory(author=author)
    admin = UserFactory(role=Role.ADMIN)
    session.commit()

    out = CommentService(ctx=ctx_for(author)).update_comment(comment.id, CommentIn(content="edited"))
    assert out.content == "edited"

    with pytest.raises(Forbidden):
        CommentService(ctx=ctx_for(admin)).update_comment(comment.id, CommentIn(content="nope"))


def test_update_missing_comment(author):
    with pytest.raises(CommentNotFound):
        CommentService(ctx=ctx_for(author)).update_comment(1, CommentIn(content="x"))
