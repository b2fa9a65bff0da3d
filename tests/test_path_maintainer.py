import uuid

import pytest

from catalog_api.config import get_settings
from catalog_api.core.exceptions import ConflictException, CycleRejectedException, NotFoundException
from catalog_api.models.category import encode_path, decode_path
from catalog_api.schemas.category import CategoryUpdate
from catalog_api.services import category_service, path_maintainer


def test_path_round_trip_keeps_order() -> None:
    ids = [uuid.uuid4(), uuid.uuid4()]
    assert encode_path([]) == ""
    assert decode_path(encode_path(ids)) == ids


def test_compute_path_for_root(db) -> None:
    assert path_maintainer.compute_path(db, None) == ([], 0)


def test_compute_path_unknown_parent(db) -> None:
    with pytest.raises(NotFoundException):
        path_maintainer.compute_path(db, uuid.uuid4())


def test_compute_path_rejects_self_parent(db, create) -> None:
    a = create("A")
    with pytest.raises(CycleRejectedException):
        path_maintainer.compute_path(db, a.id, a.id)


def test_create_derives_ancestors_and_depth(chain, assert_tree_consistent) -> None:
    a, b, c = chain

    assert (a.ancestors, a.depth) == ([], 0)
    assert (b.ancestors, b.depth) == ([a.id], 1)
    assert (c.ancestors, c.depth) == ([a.id, b.id], 2)
    assert_tree_consistent()


def test_reparent_root_under_descendant_is_rejected(db, chain, actor, assert_tree_consistent) -> None:
    a, b, c = chain
    before = {n.id: (n.parent_id, n.path, n.depth) for n in (a, b, c)}

    with pytest.raises(CycleRejectedException):
        category_service.update_category(db, a.id, CategoryUpdate(parent_id=str(c.id)), actor)

    db.expire_all()
    assert {n.id: (n.parent_id, n.path, n.depth) for n in (a, b, c)} == before
    assert_tree_consistent()


def test_reparent_to_itself_is_rejected(db, chain, actor) -> None:
    _, b, _ = chain
    with pytest.raises(CycleRejectedException):
        category_service.update_category(db, b.id, CategoryUpdate(parent_id=str(b.id)), actor)


def test_move_to_root_rewrites_descendants(db, chain, actor, assert_tree_consistent) -> None:
    a, b, c = chain

    category_service.update_category(db, b.id, CategoryUpdate(parent_id=None), actor)

    assert (b.parent_id, b.ancestors, b.depth) == (None, [], 0)
    db.refresh(c)
    assert (c.ancestors, c.depth) == ([b.id], 1)
    assert_tree_consistent()


def test_move_subtree_deeper_rewrites_descendants(db, create, actor, assert_tree_consistent) -> None:
    a = create("A")
    b = create("B", parent=a)
    c = create("C", parent=b)
    d = create("D", parent=c)
    x = create("X")
    y = create("Y", parent=x)

    category_service.update_category(db, b.id, CategoryUpdate(parent_id=str(y.id)), actor)

    db.expire_all()
    assert b.ancestors == [x.id, y.id]
    assert c.ancestors == [x.id, y.id, b.id]
    assert (d.ancestors, d.depth) == ([x.id, y.id, b.id, c.id], 4)
    assert a.ancestors == []
    assert_tree_consistent()


def test_rewrite_descendants_counts_rewritten_nodes(db, chain) -> None:
    a, b, _ = chain
    new_root = uuid.uuid4()

    rewritten = path_maintainer.rewrite_descendants(
        db, a.descendant_prefix, encode_path([new_root, a.id]), 1
    )

    assert rewritten == 2
    db.rollback()


def test_reject_policy_refuses_moving_a_node_with_children(
    db, chain, create, actor, monkeypatch
) -> None:
    monkeypatch.setattr(get_settings(), "REPARENT_POLICY", "reject")
    _, b, c = chain
    other = create("Other")

    with pytest.raises(ConflictException):
        category_service.update_category(db, b.id, CategoryUpdate(parent_id=str(other.id)), actor)

    # A leaf can still move
    moved = category_service.update_category(db, c.id, CategoryUpdate(parent_id=str(other.id)), actor)
    assert moved.ancestors == [other.id]


def test_field_edit_does_not_touch_path(db, chain, actor) -> None:
    _, _, c = chain
    path_before, depth_before = c.path, c.depth

    updated = category_service.update_category(
        db, c.id, CategoryUpdate(name="C renamed", sort_order=5, is_active=False), actor
    )

    assert updated.name == "C renamed"
    assert (updated.path, updated.depth) == (path_before, depth_before)
