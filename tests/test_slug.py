from catalog_api.utils.slug import slugify, normalize_slug


def test_slugify_transliterates_vietnamese() -> None:
    assert slugify("Điện thoại & Máy tính") == "dien-thoai-may-tinh"


def test_slugify_strips_accents_and_spaces() -> None:
    assert slugify("  Ropa de Niños ") == "ropa-de-ninos"


def test_slugify_handles_letters_without_decomposition() -> None:
    assert slugify("Straße Ærø") == "strasse-aero"


def test_slugify_collapses_separators() -> None:
    assert slugify("TV -- Audio / Video!!") == "tv-audio-video"


def test_slugify_returns_empty_when_nothing_is_left() -> None:
    assert slugify("!!! ???") == ""


def test_normalize_slug() -> None:
    assert normalize_slug("  Home-Appliances ") == "home-appliances"


def test_normalize_slug_makes_it_url_safe() -> None:
    assert normalize_slug("Phones & Tablets/2024") == "phones-tablets-2024"
