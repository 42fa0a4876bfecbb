"""
Network services.

Network slugs are unique. An explicit slug goes through ``slugify`` like
a derived one, so "Le-Monde " and "le-monde" collide. A network that is
still referenced by an article cannot be deleted.
"""

from typing import Any

from editorial.core.errors import ConflictError
from editorial.core.types import Network, NetworkCreate, NetworkUpdate
from editorial.core.utils import generate_id, slugify, touch
from editorial.services.base import find_index, logger, parse_input
from editorial.storage.document import DocumentStore


def _ensure_slug_free(networks: list[Network], slug: str, exclude_id: str | None = None) -> str:
    if any(n.slug == slug and n.id != exclude_id for n in networks):
        raise ConflictError(f'A network with the slug "{slug}" already exists')
    return slug


def list_networks(store: DocumentStore) -> list[Network]:
    return store.read().networks


def get_network(store: DocumentStore, network_id: str) -> Network:
    db = store.read()
    return db.networks[find_index(db.networks, network_id, "Network")]


def create_network(store: DocumentStore, data: NetworkCreate | dict[str, Any]) -> Network:
    payload = parse_input(NetworkCreate, data)
    db = store.read()

    slug = _ensure_slug_free(db.networks, slugify(payload.slug or payload.name))
    now = touch()
    network = Network(
        **payload.model_dump(exclude={"slug"}),
        id=generate_id("net"),
        slug=slug,
        created_at=now,
        updated_at=now,
    )

    db.networks.append(network)
    store.write(db)
    logger.info(f"Created network {network.id} ({network.slug})")
    return network


def update_network(
    store: DocumentStore,
    network_id: str,
    data: NetworkUpdate | dict[str, Any],
) -> Network:
    """
    Update a network. A new name re-derives the slug unless a slug is
    given explicitly in the same call.
    """
    payload = parse_input(NetworkUpdate, data)
    db = store.read()
    index = find_index(db.networks, network_id, "Network")
    existing = db.networks[index]
    changes = payload.changes()

    if "slug" in changes:
        changes["slug"] = slugify(changes["slug"])
    elif "name" in changes and changes["name"] != existing.name:
        changes["slug"] = slugify(changes["name"])

    if changes.get("slug", existing.slug) != existing.slug:
        _ensure_slug_free(db.networks, changes["slug"], exclude_id=network_id)

    updated = existing.model_copy(update={**changes, "updated_at": touch(existing.updated_at)})
    db.networks[index] = updated
    store.write(db)
    logger.info(f"Updated network {network_id}")
    return updated


def delete_network(store: DocumentStore, network_id: str) -> None:
    """
    Delete a network.

    Raises:
        NotFoundError: unknown id
        ConflictError: at least one article still references the network;
            nothing is written
    """
    db = store.read()
    index = find_index(db.networks, network_id, "Network")

    in_use = sum(1 for a in db.articles if a.network_id == network_id)
    if in_use:
        raise ConflictError(
            f'Network "{network_id}" is referenced by {in_use} article(s) and cannot be deleted'
        )

    del db.networks[index]
    store.write(db)
    logger.info(f"Deleted network {network_id}")
