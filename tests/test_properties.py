"""Tests for notion_content.properties and notion_content.extract."""

import pytest

from notion_content.extract import extract_rich_text
from notion_content.properties import (
    get_checkbox,
    get_cover,
    get_date,
    get_emoji,
    get_first,
    get_icon,
    get_multi_select,
    get_number,
    get_property_value,
    get_rich_text,
    get_select,
    get_slug,
    get_title,
    get_url,
    slugify,
)

from .conftest import (
    date_prop,
    make_page,
    multi_select_prop,
    number_prop,
    rich_text,
    select_prop,
    text_prop,
    title_prop,
)


@pytest.fixture
def page():
    return make_page(
        "page-1",
        {
            "Name": title_prop("Mi primer post"),
            "Descripción": text_prop("Resumen"),
            "Categoría": select_prop("Productividad"),
            "Etiquetas": multi_select_prop("notion", "ia"),
            "Fecha": date_prop("2025-03-01"),
            "Orden": number_prop(3),
            "Destacado": {"type": "checkbox", "checkbox": True},
            "Enlace": {"type": "url", "url": "https://example.com"},
        },
    )


class TestExtractRichText:
    """Tests for extract_rich_text."""

    def test_concatenates_runs_in_order(self):
        runs = rich_text("Hola ") + [{"type": "text", "plain_text": "mundo", "annotations": {"bold": True}}]
        assert extract_rich_text(runs) == "Hola mundo"

    def test_empty_and_none(self):
        assert extract_rich_text([]) == ""
        assert extract_rich_text(None) == ""


class TestProjection:
    """Tests for typed getters and their defaults."""

    def test_present_values(self, page):
        assert get_title(page) == "Mi primer post"
        assert get_rich_text(page, "Descripción") == "Resumen"
        assert get_select(page, "Categoría") == "Productividad"
        assert get_multi_select(page, "Etiquetas") == ["notion", "ia"]
        assert get_date(page, "Fecha") == "2025-03-01"
        assert get_number(page, "Orden") == 3
        assert get_checkbox(page, "Destacado") is True
        assert get_url(page, "Enlace") == "https://example.com"

    def test_missing_properties_default(self, page):
        assert get_title(page, "Título") == ""
        assert get_rich_text(page, "Nope") == ""
        assert get_select(page, "Nope") == ""
        assert get_multi_select(page, "Nope") == []
        assert get_date(page, "Nope") == ""
        assert get_number(page, "Nope") == 0
        assert get_checkbox(page, "Nope") is False
        assert get_url(page, "Nope") == ""

    def test_mismatched_type_tag_defaults(self, page):
        # "Categoría" is a select, not rich text; "Name" is a title, not a number
        assert get_rich_text(page, "Categoría") == ""
        assert get_number(page, "Name") == 0
        assert get_multi_select(page, "Categoría") == []

    def test_null_payloads_default(self):
        page = make_page("p", {
            "Categoría": select_prop(None),
            "Fecha": date_prop(None),
            "Orden": number_prop(None),
            "Enlace": {"type": "url", "url": None},
        })
        assert get_select(page, "Categoría") == ""
        assert get_date(page, "Fecha") == ""
        assert get_number(page, "Orden") == 0
        assert get_url(page, "Enlace") == ""

    def test_page_without_properties(self):
        assert get_title({"id": "x"}) == ""

    def test_default_list_is_fresh(self, page):
        first = get_multi_select(page, "Nope")
        first.append("mutated")
        assert get_multi_select(page, "Nope") == []

    def test_unsupported_type_raises(self, page):
        with pytest.raises(ValueError, match="Unsupported property type"):
            get_property_value(page, "Name", "formula")

    def test_get_first_uses_alias(self):
        page = make_page("p", {"Description": text_prop("English summary")})
        assert get_first(page, ("Descripción", "Description"), "rich_text") == "English summary"

    def test_get_first_skips_empty_primary(self):
        page = make_page("p", {"Descripción": text_prop(""), "Description": text_prop("fallback")})
        assert get_first(page, ("Descripción", "Description"), "rich_text") == "fallback"

    def test_get_first_all_missing(self):
        assert get_first(make_page("p", {}), ("A", "B"), "multi_select") == []


class TestCoverAndIcon:
    """Tests for cover and icon resolution."""

    def test_external_cover(self):
        page = make_page("p", {}, cover={"type": "external", "external": {"url": "https://img/x.png"}})
        assert get_cover(page) == "https://img/x.png"

    def test_file_cover(self):
        page = make_page("p", {}, cover={"type": "file", "file": {"url": "https://s3/x.jpg", "expiry_time": "..."}})
        assert get_cover(page) == "https://s3/x.jpg"

    def test_no_cover(self):
        assert get_cover(make_page("p", {})) == ""

    def test_emoji_icon(self):
        page = make_page("p", {}, icon={"type": "emoji", "emoji": "🚀"})
        assert get_icon(page) == "🚀"
        assert get_emoji(page) == "🚀"

    def test_image_icon(self):
        page = make_page("p", {}, icon={"type": "external", "external": {"url": "https://img/i.png"}})
        assert get_icon(page) == "https://img/i.png"
        assert get_emoji(page) == ""

    def test_no_icon(self):
        assert get_icon(make_page("p", {})) == ""


class TestSlug:
    """Tests for slugify and get_slug."""

    @pytest.mark.parametrize("text, expected", [
        ("¿Cómo usar Notion?", "como-usar-notion"),
        ("Fórmulas  & Rollups 2.0", "formulas-rollups-2-0"),
        ("--Ya-slug--", "ya-slug"),
        ("Ñandú", "nandu"),
        ("", ""),
    ])
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    def test_title_derived(self):
        page = make_page("p", {"Name": title_prop("¿Cómo usar Notion?")})
        assert get_slug(page) == "como-usar-notion"

    def test_explicit_slug_overrides_title(self):
        page = make_page("p", {
            "Name": title_prop("¿Cómo usar Notion?"),
            "Slug": text_prop("mi-slug-custom"),
        })
        assert get_slug(page) == "mi-slug-custom"

    def test_localized_title_property(self):
        page = make_page("p", {"Título": title_prop("Bases de Datos")})
        assert get_slug(page) == "bases-de-datos"

    def test_falls_back_to_page_id(self):
        page = make_page("2d240e6d-8f97", {"Name": title_prop("???")})
        assert get_slug(page) == "2d240e6d-8f97"
