"""Tests for the bulk import pipeline."""

import pytest
from datetime import datetime, timezone

from editorial.core.errors import PayloadShapeError, ValidationError
from editorial.core.types import ArticleStatus
from editorial.services.articles import create_article
from editorial.services.importer import (
    DEFAULT_AUTHOR,
    EXCERPT_LENGTH,
    coerce_record,
    import_articles,
    parse_payload,
)


class TestParsePayload:
    """Tests for payload shape detection."""

    def test_bare_list(self):
        raw = parse_payload([{"title": "x"}])
        assert raw.shape == "list"
        assert raw.records == [{"title": "x"}]

    def test_wrapped_list(self):
        raw = parse_payload({"articles": [{"title": "x"}]})
        assert raw.shape == "wrapped"
        assert len(raw.records) == 1

    @pytest.mark.parametrize("payload", [
        [],
        {"articles": []},
        {"title": "single object"},
        {"articles": "not a list"},
        "text",
        None,
        42,
    ])
    def test_rejected_shapes(self, payload):
        with pytest.raises(PayloadShapeError):
            parse_payload(payload)


class TestCoerceRecord:
    """Tests for per-record coercion rules."""

    def test_numeric_references(self):
        record = coerce_record({
            "title": "Title", "content": "Long enough content",
            "categoryId": 3, "networkId": 7.0,
        })

        assert record.category_id == "3"
        assert record.network_id == "7"

    def test_category_ids_variants(self):
        base = {"title": "Title", "content": "Long enough content"}

        assert coerce_record({**base, "categoryIds": [1, "2"]}).category_ids == ["1", "2"]
        assert coerce_record({**base, "categoryIds": 5}).category_ids == ["5"]
        assert coerce_record({**base, "categoryIds": None}).category_ids == []

    def test_explicit_list_beats_singular(self):
        record = coerce_record({
            "title": "Title", "content": "Long enough content",
            "categoryIds": ["1"], "categoryId": "2",
        })
        assert record.resolved_category_ids() == ["1"]

    def test_singular_used_when_list_empty(self):
        record = coerce_record({
            "title": "Title", "content": "Long enough content",
            "categoryIds": [], "categoryId": "2",
        })
        assert record.resolved_category_ids() == ["2"]

    @pytest.mark.parametrize("value, expected", [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        ("true", True),
        ("1", True),
        ("yes", False),
        (None, False),
    ])
    def test_featured(self, value, expected):
        record = coerce_record({"title": "Title", "content": "Long enough content", "featured": value})
        assert record.featured is expected

    def test_blank_strings_are_missing(self):
        record = coerce_record({
            "title": "Title", "content": "Long enough content",
            "excerpt": "", "slug": "", "imageUrl": "", "publishedAt": "", "networkId": "",
        })

        assert record.excerpt is None
        assert record.slug is None
        assert record.image_url is None
        assert record.published_at is None
        assert record.network_id is None

    def test_status_defaults_to_draft(self):
        record = coerce_record({"title": "Title", "content": "Long enough content", "status": None})
        assert record.status == ArticleStatus.DRAFT

    def test_structural_failure_message(self):
        with pytest.raises(ValidationError) as exc_info:
            coerce_record({"title": "ab", "content": "short"})

        assert "[title]" in exc_info.value.message
        assert "[content]" in exc_info.value.message

    def test_non_object_record(self):
        with pytest.raises(ValidationError):
            coerce_record("just a string")


class TestImportArticles:
    """Tests for import_articles."""

    def test_imports_all_valid(self, seeded_store, import_records):
        result = import_articles(seeded_store, import_records)

        assert result.imported == 3
        assert result.skipped == 0
        assert result.total == 3
        assert result.errors == []
        assert seeded_store.read().articles == result.articles

    def test_wrapped_payload(self, seeded_store, import_records):
        result = import_articles(seeded_store, {"articles": import_records})
        assert result.imported == 3

    def test_canonical_fields(self, seeded_store, import_records):
        budget, cup, chip = import_articles(seeded_store, import_records).articles

        assert budget.category_ids == ["1"]
        assert budget.network_id == "10"
        assert budget.excerpt == "The assembly votes on the budget tonight."
        assert budget.author_name == DEFAULT_AUTHOR
        assert budget.status == ArticleStatus.DRAFT
        assert budget.published_at is None

        assert cup.excerpt == "Who will lift the cup?"
        assert cup.cover_image_url == "https://cdn.example.com/cup.jpg"
        assert cup.featured is True

        assert chip.category_ids == ["1", "2"]
        assert chip.author_name == "Tech Desk"
        assert chip.published_at is not None

    def test_unknown_category_rejects_only_that_record(self, seeded_store, import_records):
        import_records[1]["categoryIds"] = ["999"]

        result = import_articles(seeded_store, import_records)

        assert result.imported == 2
        assert result.skipped == 1
        assert [e.index for e in result.errors] == [1]
        assert "999" in result.errors[0].error

        stored = {a.title for a in seeded_store.read().articles}
        assert stored == {"Budget vote tonight", "New chip announced"}

    def test_unknown_network_rejected(self, seeded_store, import_records):
        import_records[0]["networkId"] = 404

        result = import_articles(seeded_store, import_records)

        assert [e.index for e in result.errors] == [0]
        assert "404" in result.errors[0].error

    def test_structural_failure_isolated(self, seeded_store, import_records):
        import_records.insert(1, {"title": "No", "content": "tiny"})

        result = import_articles(seeded_store, import_records)

        assert result.imported == 3
        assert result.total == 4
        assert [e.index for e in result.errors] == [1]

    def test_errors_in_input_order(self, seeded_store, import_records):
        import_records[0]["categoryId"] = 77
        import_records[2]["title"] = "x"

        result = import_articles(seeded_store, import_records)

        assert [e.index for e in result.errors] == [0, 2]

    def test_in_batch_slug_collision(self, store):
        records = [
            {"title": "Same Title", "content": "First body text here."},
            {"title": "Same Title", "content": "Second body text here."},
        ]

        result = import_articles(store, records)

        assert [a.slug for a in result.articles] == ["same-title", "same-title-1"]

    def test_slug_collision_with_store(self, store, article_data):
        create_article(store, article_data(title="Same Title"))

        result = import_articles(store, [{"title": "Same Title", "content": "Body text here."}])

        assert result.articles[0].slug == "same-title-1"

    def test_explicit_slug(self, store):
        result = import_articles(store, [
            {"title": "Some title", "content": "Body text here.", "slug": "custom-slug"},
            {"title": "Other title", "content": "Body text here.", "slug": "custom-slug"},
        ])

        assert [a.slug for a in result.articles] == ["custom-slug", "custom-slug-1"]

    def test_rejected_record_does_not_reserve_slug(self, seeded_store):
        result = import_articles(seeded_store, [
            {"title": "Same Title", "content": "Body text here.", "categoryId": "999"},
            {"title": "Same Title", "content": "Body text here."},
        ])

        assert result.articles[0].slug == "same-title"

    def test_derived_excerpt_truncated(self, store):
        content = "<div>" + "word " * 100 + "</div>"

        article = import_articles(store, [{"title": "Long one", "content": content}]).articles[0]

        assert len(article.excerpt) <= EXCERPT_LENGTH
        assert "<" not in article.excerpt

    def test_explicit_published_at(self, store):
        article = import_articles(store, [{
            "title": "Dated", "content": "Body text here.",
            "status": "published", "publishedAt": "2022-03-04T05:06:07Z",
        }]).articles[0]

        assert article.published_at == datetime(2022, 3, 4, 5, 6, 7, tzinfo=timezone.utc)

    def test_cover_image_url_preferred(self, store):
        article = import_articles(store, [{
            "title": "Pictures", "content": "Body text here.",
            "imageUrl": "https://a.example.com/1.jpg",
            "coverImageUrl": "https://b.example.com/2.jpg",
        }]).articles[0]

        assert article.cover_image_url == "https://b.example.com/2.jpg"

    def test_no_write_when_nothing_accepted(self, seeded_store):
        before = seeded_store.path.read_bytes()

        result = import_articles(seeded_store, [{"title": "x", "content": "y"}])

        assert result.imported == 0
        assert result.skipped == 1
        assert seeded_store.path.read_bytes() == before

    def test_no_write_creates_no_file(self, store):
        import_articles(store, [{"title": "x", "content": "y"}])

        assert not store.exists()

    def test_empty_list_is_hard_failure(self, seeded_store):
        before = seeded_store.path.read_bytes()

        with pytest.raises(PayloadShapeError):
            import_articles(seeded_store, [])

        assert seeded_store.path.read_bytes() == before

    @pytest.mark.parametrize("stamp", [
        "0001-01-01T00:00:00+01:00",
        "9999-12-31T23:59:59-01:00",
    ])
    def test_out_of_range_published_at_rejects_only_that_record(self, store, stamp):
        result = import_articles(store, [
            {"title": "Good date", "content": "Body text here."},
            {"title": "Bad date", "content": "Body text here.", "publishedAt": stamp},
        ])

        assert result.imported == 1
        assert [e.index for e in result.errors] == [1]
        assert "[publishedAt]" in result.errors[0].error
        assert [a.title for a in store.read().articles] == ["Good date"]
