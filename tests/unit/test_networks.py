"""Tests for network services."""

import pytest

from editorial.core.errors import ConflictError, NotFoundError
from editorial.services.articles import create_article, update_article
from editorial.services.networks import (
    create_network,
    delete_network,
    get_network,
    list_networks,
    update_network,
)


class TestNetworks:
    """Tests for network CRUD."""

    def test_create_network(self, store):
        network = create_network(store, {"name": "Radio Nord", "logoUrl": "https://example.com/logo.png"})

        assert network.id.startswith("net_")
        assert network.slug == "radio-nord"
        assert network.logo_url == "https://example.com/logo.png"
        assert get_network(store, network.id) == network

    def test_explicit_slug_normalized(self, store):
        network = create_network(store, {"name": "Radio Nord", "slug": " Radio-NORD-FM "})

        assert network.slug == "radio-nord-fm"

    def test_slug_conflict(self, seeded_store):
        with pytest.raises(ConflictError):
            create_network(seeded_store, {"name": "Le Monde"})

    def test_slug_conflict_ignores_case(self, seeded_store):
        with pytest.raises(ConflictError):
            create_network(seeded_store, {"name": "Other", "slug": "LE-MONDE"})

    def test_update_name_rederives_slug(self, seeded_store):
        updated = update_network(seeded_store, "10", {"name": "Le Monde Diplo"})

        assert updated.slug == "le-monde-diplo"

    def test_update_conflict(self, seeded_store):
        other = create_network(seeded_store, {"name": "Radio Nord"})

        with pytest.raises(ConflictError):
            update_network(seeded_store, other.id, {"slug": "le-monde"})

    def test_update_missing(self, seeded_store):
        with pytest.raises(NotFoundError):
            update_network(seeded_store, "99", {"name": "Nope"})

    def test_get_missing(self, seeded_store):
        with pytest.raises(NotFoundError):
            get_network(seeded_store, "99")


class TestDeleteNetwork:
    """Tests for the in-use guard."""

    def test_delete_unused(self, seeded_store):
        delete_network(seeded_store, "10")

        assert list_networks(seeded_store) == []

    def test_delete_in_use_conflict(self, seeded_store, article_data):
        create_article(seeded_store, article_data(networkId="10"))
        before = seeded_store.path.read_bytes()

        with pytest.raises(ConflictError):
            delete_network(seeded_store, "10")

        assert seeded_store.path.read_bytes() == before
        assert [n.id for n in list_networks(seeded_store)] == ["10"]

    def test_delete_after_reference_cleared(self, seeded_store, article_data):
        article = create_article(seeded_store, article_data(networkId="10"))
        update_article(seeded_store, article.id, {"networkId": None})

        delete_network(seeded_store, "10")

        assert list_networks(seeded_store) == []

    def test_delete_missing(self, seeded_store):
        with pytest.raises(NotFoundError):
            delete_network(seeded_store, "99")
