"""
Unit tests for MemoryService (policy applied on top of the store).
"""

from datetime import datetime, timezone

import pytest

from memories_api.memory.errors import Forbidden, NotFound, Unauthorized
from memories_api.memory.schemas import excerpt


# ============================================================================
# Excerpt
# ============================================================================

def test_excerpt_truncates_long_content():
    content = "x" * 200
    assert excerpt(content) == content[:115] + "..."
    assert len(excerpt(content)) == 118


def test_excerpt_always_appends_ellipsis():
    content = "0123456789"
    assert excerpt(content) == "0123456789..."


def test_excerpt_of_exact_length_content():
    content = "y" * 115
    assert excerpt(content) == content + "..."


# ============================================================================
# Own feed
# ============================================================================

def test_list_own_requires_actor(service):
    with pytest.raises(Unauthorized):
        service.list_own(None)


def test_list_own_returns_excerpts_oldest_first(service, alice, bob, sample_content):
    first = service.create(alice.id, sample_content, "https://img.example/1.jpg")
    second = service.create(alice.id, "short", "https://img.example/2.jpg", is_public=True)
    service.create(bob.id, "not alice's", "https://img.example/3.jpg")

    listed = service.list_own(alice.id)

    assert [m.id for m in listed] == [first.id, second.id]
    assert listed[0].excerpt == sample_content[:115] + "..."
    assert listed[1].excerpt == "short..."
    assert listed[0].cover_url == "https://img.example/1.jpg"


# ============================================================================
# Public feed
# ============================================================================

def test_public_feed_only_public(service, alice):
    service.create(alice.id, "private", "https://img.example/1.jpg")
    public = service.create(alice.id, "public", "https://img.example/2.jpg", is_public=True)

    profile, memories = service.public_feed(alice.id)

    assert profile.name == "Alice"
    assert profile.avatar_url == alice.avatar_url
    assert [m.id for m in memories] == [public.id]


def test_public_feed_empty_for_user_without_public_memories(service, alice):
    service.create(alice.id, "private", "https://img.example/1.jpg")

    profile, memories = service.public_feed(alice.id)

    assert profile.name == "Alice"
    assert memories == []


def test_public_feed_unknown_user(service, missing_id):
    with pytest.raises(NotFound):
        service.public_feed(missing_id)


# ============================================================================
# Create / get
# ============================================================================

def test_create_sets_owner_to_actor(service, alice):
    memory = service.create(alice.id, "mine", "https://img.example/1.jpg")
    assert memory.user_id == alice.id


def test_create_requires_actor(service, count_memories):
    with pytest.raises(Unauthorized):
        service.create(None, "anon", "https://img.example/1.jpg")
    assert count_memories() == 0


def test_create_for_unknown_user_is_unauthorized(service, missing_id, count_memories):
    with pytest.raises(Unauthorized):
        service.create(missing_id, "ghost", "https://img.example/1.jpg")
    assert count_memories() == 0


def test_round_trip(service, alice, bob):
    date = datetime(2023, 1, 14, tzinfo=timezone.utc)
    created = service.create(alice.id, "C", "U", date=date, is_public=True)

    fetched = service.get(bob.id, created.id)

    assert fetched.content == "C"
    assert fetched.cover_url == "U"
    assert fetched.is_public is True
    assert fetched.date == date
    assert fetched.id == created.id
    assert fetched.created_at == created.created_at


def test_get_private_by_stranger_forbidden(service, alice, bob):
    memory = service.create(alice.id, "secret", "https://img.example/1.jpg")

    with pytest.raises(Forbidden):
        service.get(bob.id, memory.id)
    with pytest.raises(Forbidden):
        service.get(None, memory.id)
    assert service.get(alice.id, memory.id).content == "secret"


def test_get_missing(service, alice, missing_id):
    with pytest.raises(NotFound):
        service.get(alice.id, missing_id)


# ============================================================================
# Update / delete
# ============================================================================

def test_update_by_owner(service, alice):
    memory = service.create(alice.id, "before", "https://img.example/1.jpg")

    updated = service.update(alice.id, memory.id, "after", "https://img.example/2.jpg", is_public=True)

    assert updated.content == "after"
    assert updated.is_public is True
    assert updated.user_id == alice.id


def test_update_by_stranger_forbidden(service, store, alice, bob):
    memory = service.create(alice.id, "before", "https://img.example/1.jpg", is_public=True)

    with pytest.raises(Forbidden):
        service.update(bob.id, memory.id, "hijacked", "https://img.example/2.jpg")

    assert store.get_memory(memory.id).content == "before"


def test_delete_by_stranger_forbidden(service, store, alice, bob):
    memory = service.create(alice.id, "keep me", "https://img.example/1.jpg", is_public=True)

    with pytest.raises(Forbidden):
        service.delete(bob.id, memory.id)

    assert store.get_memory(memory.id) is not None


def test_delete_by_owner(service, store, alice):
    memory = service.create(alice.id, "bye", "https://img.example/1.jpg")

    service.delete(alice.id, memory.id)

    assert store.get_memory(memory.id) is None


@pytest.mark.parametrize("operation", ["get", "update", "delete"])
def test_missing_memory_not_found_for_every_operation(service, alice, missing_id, operation):
    with pytest.raises(NotFound):
        if operation == "get":
            service.get(alice.id, missing_id)
        elif operation == "update":
            service.update(alice.id, missing_id, "x", "y")
        else:
            service.delete(alice.id, missing_id)


def test_update_after_concurrent_delete_is_not_found(service, store, alice, monkeypatch):
    memory = service.create(alice.id, "racing", "https://img.example/1.jpg")
    original_get = store.get_memory

    def get_then_delete(memory_id):
        found = original_get(memory_id)
        store.delete_memory(memory_id)
        return found

    monkeypatch.setattr(store, "get_memory", get_then_delete)

    with pytest.raises(NotFound):
        service.update(alice.id, memory.id, "too late", "https://img.example/2.jpg")
