import uuid

import pytest

from catalog_api.core.exceptions import ConflictException, InvalidArgumentException, NotFoundException
from catalog_api.crud.category import category as crud_category
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate
from catalog_api.services import category_service


def test_create_derives_slug_from_name(create) -> None:
    node = create("Điện thoại Di động")
    assert node.slug == "dien-thoai-di-dong"
    assert node.name == "Điện thoại Di động"


def test_create_trims_name_and_normalizes_given_slug(create) -> None:
    node = create("  Laptops  ", slug=" Gaming-Laptops ")
    assert node.name == "Laptops"
    assert node.slug == "gaming-laptops"


def test_create_with_duplicate_slug_conflicts(create) -> None:
    create("Phones", slug="phones")
    with pytest.raises(ConflictException):
        create("Mobile phones", slug="phones")


def test_create_with_duplicate_derived_slug_conflicts(create) -> None:
    create("Home Audio")
    with pytest.raises(ConflictException):
        create("home audio")


def test_create_with_unsluggable_name_is_invalid(create) -> None:
    with pytest.raises(InvalidArgumentException):
        create("!!!")


def test_create_with_malformed_parent_is_invalid(db, actor) -> None:
    with pytest.raises(InvalidArgumentException):
        category_service.create_category(db, CategoryCreate(name="X", parent_id="nope"), actor)


def test_create_with_unknown_parent_is_not_found(db, actor) -> None:
    category_in = CategoryCreate(name="X", parent_id=str(uuid.uuid4()))
    with pytest.raises(NotFoundException):
        category_service.create_category(db, category_in, actor)


def test_create_records_creator(create) -> None:
    node = create("Audited")
    assert node.created_by == {"id": "admin-1", "email": "admin@example.com"}
    assert node.updated_by is None


def test_update_slug_revalidates_uniqueness(db, create, actor) -> None:
    create("Cameras")
    lenses = create("Lenses")

    with pytest.raises(ConflictException):
        category_service.update_category(db, lenses.id, CategoryUpdate(slug="cameras"), actor)

    # Keeping its own slug is not a conflict
    updated = category_service.update_category(db, lenses.id, CategoryUpdate(slug="lenses"), actor)
    assert updated.slug == "lenses"


def test_update_unknown_category(db, actor) -> None:
    with pytest.raises(NotFoundException):
        category_service.update_category(db, uuid.uuid4(), CategoryUpdate(name="X"), actor)


def test_update_ignores_null_for_required_fields(db, create, actor) -> None:
    node = create("Keep me")

    updated = category_service.update_category(db, node.id, CategoryUpdate(name=None, slug=None), actor)

    assert (updated.name, updated.slug) == ("Keep me", "keep-me")
    assert updated.updated_by == {"id": "admin-1", "email": "admin@example.com"}


def test_update_without_parent_keeps_parent(db, chain, actor) -> None:
    a, b, _ = chain
    updated = category_service.update_category(db, b.id, CategoryUpdate(description="desc"), actor)
    assert updated.parent_id == a.id
    assert updated.description == "desc"


def test_remove_leaf(db, chain, actor) -> None:
    _, _, c = chain
    c_id = c.id

    assert category_service.remove_category(db, str(c_id), actor) == c_id

    with pytest.raises(NotFoundException):
        category_service.get_category(db, c_id)


def test_remove_with_children_is_rejected(db, chain, actor) -> None:
    a, _, _ = chain
    with pytest.raises(ConflictException):
        category_service.remove_category(db, a.id, actor)
    assert category_service.get_category(db, a.id).id == a.id


def test_remove_unknown(db, actor) -> None:
    with pytest.raises(NotFoundException):
        category_service.remove_category(db, uuid.uuid4(), actor)


def test_get_category_malformed_id(db) -> None:
    with pytest.raises(InvalidArgumentException):
        category_service.get_category(db, "xyz")


def test_list_filters(db, chain, create) -> None:
    a, b, c = chain
    create("Other root")

    roots = category_service.list_categories(db, parent="null")
    assert [n.name for n in roots["result"]] == ["A", "Other root"]

    children = category_service.list_categories(db, parent=str(a.id))
    assert [n.id for n in children["result"]] == [b.id]

    descendants = category_service.list_categories(db, ancestor=str(a.id))
    assert {n.id for n in descendants["result"]} == {b.id, c.id}

    found = category_service.list_categories(db, q="oth")
    assert [n.name for n in found["result"]] == ["Other root"]


def test_list_filters_by_active_state(db, create) -> None:
    create("On")
    create("Off", is_active=False)

    result = category_service.list_categories(db, is_active=False)["result"]
    assert [n.name for n in result] == ["Off"]


def test_list_pagination_meta(db, create) -> None:
    for i in range(5):
        create(f"Cat {i}", sort_order=i)

    page = category_service.list_categories(db, page=2, page_size=2)

    assert page["meta"].model_dump() == {"current": 2, "page_size": 2, "pages": 3, "total": 5}
    assert [n.name for n in page["result"]] == ["Cat 2", "Cat 3"]


def test_list_rejects_malformed_parent(db) -> None:
    with pytest.raises(InvalidArgumentException):
        category_service.list_categories(db, parent="bad-id")


def test_create_makes_supplied_slug_url_safe(create) -> None:
    node = create("Phones", slug="Phones & Tablets/2024")
    assert node.slug == "phones-tablets-2024"


def test_create_with_unsluggable_supplied_slug_is_invalid(create) -> None:
    with pytest.raises(InvalidArgumentException):
        create("Phones", slug="&&&")


def test_update_makes_supplied_slug_url_safe(db, create, actor) -> None:
    node = create("Phones")

    updated = category_service.update_category(db, node.id, CategoryUpdate(slug="Smart Phones/Ñandú"), actor)

    assert updated.slug == "smart-phones-nandu"


def test_update_with_unsluggable_supplied_slug_is_invalid(db, create, actor) -> None:
    node = create("Phones")
    with pytest.raises(InvalidArgumentException):
        category_service.update_category(db, node.id, CategoryUpdate(slug="///"), actor)
    assert category_service.get_category(db, node.id).slug == "phones"


def test_update_with_blank_parent_keeps_parent(db, chain, actor) -> None:
    a, b, c = chain
    category_in = CategoryUpdate.model_validate({"parent_id": "", "name": "B2"})

    updated = category_service.update_category(db, b.id, category_in, actor)

    assert updated.name == "B2"
    assert updated.parent_id == a.id
    assert updated.depth == 1
    assert category_service.get_category(db, c.id).ancestors == [a.id, b.id]


def test_duplicate_slug_caught_by_unique_index_conflicts(db, create, monkeypatch) -> None:
    create("Phones")
    # Simulate a concurrent writer that passed the availability check
    monkeypatch.setattr(crud_category, "get_by_slug", lambda *args, **kwargs: None)

    with pytest.raises(ConflictException):
        create("Phones")

    # The session was rolled back and stays usable
    tablets = create("Tablets")
    assert tablets.slug == "tablets"
    assert category_service.list_categories(db)["meta"].total == 2


def test_list_search_matches_wildcards_literally(db, create) -> None:
    create("Half_Price")
    create("Hardware")

    assert [n.name for n in category_service.list_categories(db, q="_")["result"]] == ["Half_Price"]
    assert category_service.list_categories(db, q="%")["result"] == []
    assert [n.name for n in category_service.list_categories(db, q="ha")["result"]] == ["Half_Price", "Hardware"]
