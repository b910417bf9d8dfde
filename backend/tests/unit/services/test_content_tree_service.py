# tests/unit/services/test_content_tree_service.py
from __future__ import annotations

import pytest
from forum.models.comment import Comment, CommentLike
from forum.models.post import Post, PostLike
from forum.models.user import Role
from forum.services._shared.errors import CommentNotFound, Forbidden, NotLoggedIn, PostNotFound
from forum.services.content import ContentTreeService, plan_subtree_deletion
from sqlalchemy import func, select
from tests.factories.content import (
    CommentFactory,
    CommentLikeFactory,
    PostFactory,
    PostLikeFactory,
)
from tests.factories.user import UserFactory
from tests.helpers.services import ctx_for
from tests.helpers.utils import not_raises


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


# ----------------------------- Planning ----------------------------------- #
class TestPlanSubtreeDeletion:
    def test_leaf_is_its_own_plan(self):
        assert plan_subtree_deletion(7, lambda _: []) == [7]

    def test_children_precede_parents(self):
        tree = {1: [2, 3], 2: [4], 3: [], 4: []}

        order = plan_subtree_deletion(1, tree.__getitem__)

        assert order == [4, 2, 3, 1]
        for parent, children in tree.items():
            for child in children:
                assert order.index(child) < order.index(parent)

    def test_siblings_keep_lookup_order(self):
        tree = {1: [5, 3, 9], 5: [], 3: [], 9: []}
        assert plan_subtree_deletion(1, tree.__getitem__) == [5, 3, 9, 1]

    def test_cycle_terminates_and_lists_each_node_once(self):
        tree = {1: [2], 2: [3], 3: [1]}

        order = plan_subtree_deletion(1, tree.__getitem__)

        assert sorted(order) == [1, 2, 3]
        assert order[-1] == 1

    def test_very_deep_chain_does_not_recurse(self):
        depth = 20_000
        children = {i: [i + 1] for i in range(depth)}
        children[depth] = []

        with not_raises(RecursionError):
            order = plan_subtree_deletion(0, children.__getitem__)

        assert order[0] == depth
        assert order[-1] == 0
        assert len(order) == depth + 1


# ----------------------------- Fixtures ----------------------------------- #
@pytest.fixture()
def thread(session):
    """
    A post with one root comment and a small reply tree::

        root
        ├── a
        │   └── a1
        └── b

    Replies are written by other users; each node carries one like.
    """
    owner = UserFactory()
    post = PostFactory(author=owner)
    root = CommentFactory(post=post, author=owner)
    a = CommentFactory(parent=root)
    a1 = CommentFactory(parent=a)
    b = CommentFactory(parent=root)
    for node in (root, a, a1, b):
        CommentLikeFactory(comment=node)
    session.commit()
    return {"owner": owner, "post": post, "root": root, "a": a, "a1": a1, "b": b}


# --------------------------- delete_comment ------------------------------- #
def test_author_deletes_subtree_with_likes(session, thread):
    ids = {k: thread[k].id for k in ("root", "a", "a1", "b")}
    svc = ContentTreeService(ctx=ctx_for(thread["owner"]))

    result = svc.delete_comment(ids["root"])

    assert result.comment_ids == [ids["a1"], ids["a"], ids["b"], ids["root"]]
    assert result.likes_removed == 4
    assert _count(session, Comment) == 0
    assert _count(session, CommentLike) == 0


def test_deleting_reply_leaves_siblings_and_ancestors(session, thread):
    ids = {k: thread[k].id for k in ("root", "a", "a1", "b")}
    author_of_a = session.get(Comment, ids["a"]).author

    result = ContentTreeService(ctx=ctx_for(author_of_a)).delete_comment(ids["a"])

    assert result.comment_ids == [ids["a1"], ids["a"]]
    remaining = set(session.execute(select(Comment.id)).scalars())
    assert remaining == {ids["root"], ids["b"]}
    assert _count(session, CommentLike) == 2


def test_stranger_is_forbidden_and_nothing_is_deleted(session, thread):
    stranger = UserFactory()
    session.commit()

    with pytest.raises(Forbidden):
        ContentTreeService(ctx=ctx_for(stranger)).delete_comment(thread["root"].id)

    assert _count(session, Comment) == 4
    assert _count(session, CommentLike) == 4


def test_admin_may_delete_someone_elses_thread(session, thread):
    admin = UserFactory(role=Role.ADMIN)
    session.commit()

    result = ContentTreeService(ctx=ctx_for(admin)).delete_comment(thread["root"].id)

    assert len(result.comment_ids) == 4
    assert _count(session, Comment) == 0


def test_many_descendants_are_all_removed(session):
    """
    GIVEN a root comment with 30 replies in a chain, each with two likes
    WHEN the author deletes the root
    THEN every comment and every like in the chain is gone
    """
    owner = UserFactory()
    parent = CommentFactory(author=owner)
    root_id = parent.id
    for _ in range(30):
        parent = CommentFactory(parent=parent)
        CommentLikeFactory.create_batch(2, comment=parent)
    session.commit()

    result = ContentTreeService(ctx=ctx_for(owner)).delete_comment(root_id)

    assert len(result.comment_ids) == 31
    assert result.comment_ids[-1] == root_id
    assert result.likes_removed == 60
    assert _count(session, Comment) == 0


def test_missing_comment(session):
    user = UserFactory()
    session.commit()
    with pytest.raises(CommentNotFound):
        ContentTreeService(ctx=ctx_for(user)).delete_comment(987654)


def test_anonymous_caller_cannot_delete(session, thread):
    with pytest.raises(NotLoggedIn):
        ContentTreeService().delete_comment(thread["root"].id)


# ----------------------------- delete_post -------------------------------- #
def test_delete_post_removes_likes_comments_and_post(session, thread):
    post_id = thread["post"].id
    PostLikeFactory.create_batch(3, post=thread["post"])
    other_post = PostFactory()
    CommentFactory(post=other_post)
    session.commit()

    result = ContentTreeService(ctx=ctx_for(thread["owner"])).delete_post(post_id)

    assert result.post_id == post_id
    assert len(result.comment_ids) == 4
    assert result.likes_removed == 3 + 4
    assert session.get(Post, post_id) is None
    assert _count(session, PostLike) == 0
    assert _count(session, Comment) == 1


def test_delete_post_by_stranger_is_forbidden(session, thread):
    stranger = UserFactory()
    session.commit()

    with pytest.raises(Forbidden):
        ContentTreeService(ctx=ctx_for(stranger)).delete_post(thread["post"].id)

    assert _count(session, Post) == 1
    assert _count(session, Comment) == 4


def test_delete_missing_post(session):
    user = UserFactory()
    session.commit()
    with pytest.raises(PostNotFound):
        ContentTreeService(ctx=ctx_for(user)).delete_post(424242)
