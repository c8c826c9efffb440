"""tests for placeholder protection."""

from texsync.core.protection import ProtectedBlockStore


def test_protect_returns_sequential_tokens() -> None:
    """tokens embed sequential indices starting at 0."""
    store = ProtectedBlockStore()
    assert store.protect("<pre>a</pre>") == "__PROTECTED_BLOCK_0__"
    assert store.protect("<pre>b</pre>") == "__PROTECTED_BLOCK_1__"
    assert len(store) == 2


def test_restore_all_replaces_tokens() -> None:
    """restores every token with its stored content."""
    store = ProtectedBlockStore()
    first = store.protect("<code>x</code>")
    second = store.protect("<code>y</code>")
    text = f"a {first} b {second} c {first}"
    assert store.restore_all(text) == (
        "a <code>x</code> b <code>y</code> c <code>x</code>"
    )


def test_restore_all_keeps_unknown_tokens() -> None:
    """tokens that were never issued are left alone."""
    store = ProtectedBlockStore()
    store.protect("x")
    assert store.restore_all("__PROTECTED_BLOCK_7__") == "__PROTECTED_BLOCK_7__"


def test_restore_all_expands_nested_tokens() -> None:
    """a block wrapping an earlier token is fully restored."""
    store = ProtectedBlockStore()
    inner = store.protect("<span>math</span>")
    outer = store.protect(f"<code>{inner}</code>")
    restored = store.restore_all(outer)
    assert restored == "<code><span>math</span></code>"
    assert "__PROTECTED_BLOCK_" not in restored


def test_restored_content_is_not_rescanned_for_later_tokens() -> None:
    """a block only expands tokens created before it."""
    store = ProtectedBlockStore()
    literal = store.protect("__PROTECTED_BLOCK_0__ literal")
    assert store.restore_all(literal) == "__PROTECTED_BLOCK_0__ literal"


def test_stores_are_independent() -> None:
    """each store starts from index 0."""
    assert ProtectedBlockStore().protect("a") == ProtectedBlockStore().protect("b")


def test_restore_all_without_nesting_is_verbatim() -> None:
    """flat restore never expands token text inside a stored block."""
    store = ProtectedBlockStore()
    store.protect("first")
    second = store.protect("__PROTECTED_BLOCK_0__")
    assert store.restore_all(second, nested=False) == "__PROTECTED_BLOCK_0__"
    assert store.restore_all(second) == "first"
