"""Unit tests for the placeholder user registry."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from sandbox_tasks.users.store import UserStore, issue_token


def test_register_then_duplicate_is_rejected(user_store: UserStore) -> None:
    assert user_store.register("alice", "pw") is True
    assert user_store.register("alice", "other") is False
    assert len(user_store) == 1

    # The first password is kept.
    assert user_store.login("alice", "pw") is True
    assert user_store.login("alice", "other") is False


def test_login_requires_exact_match(user_store: UserStore) -> None:
    user_store.register("bob", "Secret")

    assert user_store.login("bob", "Secret") is True
    assert user_store.login("bob", "secret") is False
    assert user_store.login("carol", "Secret") is False


def test_empty_credentials_are_stored_as_is(user_store: UserStore) -> None:
    assert user_store.register("", "") is True
    assert user_store.login("", "") is True


def test_concurrent_registration_of_one_name_succeeds_once(user_store: UserStore) -> None:
    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(lambda i: user_store.register("dave", str(i)), range(100)))

    assert outcomes.count(True) == 1
    assert len(user_store) == 1


def test_issue_token_embeds_username() -> None:
    assert issue_token("alice") == "fake-token-alice"
