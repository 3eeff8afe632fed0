"""
tests/test_tree.py
Tree access layer and the in-memory adapter.
Every test ends by proving that acquires and releases balance.
"""

import pytest

from chatlens import widgets
from chatlens.errors import HandleError
from chatlens.tree.access import find_all, find_by_exact_text, find_by_view_id
from chatlens.tree.memory import HandleLedger, open_tree
from chatlens.tree.node import acquired, released_all


def tv(text, **extra):
    return {"class": widgets.TEXT_VIEW, "text": text, **extra}


def layout(*children, **extra):
    return {"class": "android.widget.LinearLayout", "children": list(children), **extra}


TREE = layout(
    tv("A"),
    layout(tv("B"), layout(tv("C", id="app:id/c"))),
    tv("D"),
)


def _texts(nodes):
    return [n.text for n in nodes]


# ── SEARCH ───────────────────────────────────────────────────

class TestFindAll:

    def test_document_order(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        with released_all(find_all(root, lambda c: c == widgets.TEXT_VIEW)) as nodes:
            assert _texts(nodes) == ["A", "B", "C", "D"]
        root.release()
        assert ledger.balanced

    def test_parent_precedes_its_descendants(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        with released_all(find_all(root, lambda c: c.endswith("LinearLayout"))) as nodes:
            assert len(nodes) == 3
            assert nodes[1].child_count == 2
            assert nodes[2].child_count == 1
        root.release()
        assert ledger.balanced

    def test_matching_root_is_duplicated(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        nodes  = find_all(root, lambda c: c.endswith("LinearLayout"))
        assert nodes[0] is not root
        for n in nodes:
            n.release()
        root.release()
        assert ledger.balanced

    def test_no_match_releases_everything(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        assert find_all(root, lambda c: c == widgets.LIST_VIEW) == []
        assert ledger.outstanding == 1   # root only
        root.release()
        assert ledger.balanced

    def test_none_root(self):
        assert find_all(None, lambda c: True) == []

    def test_stale_subtree_skipped_siblings_kept(self):
        tree = layout(
            tv("before"),
            layout(tv("hidden"), stale=True),
            tv("after"),
        )
        ledger = HandleLedger()
        root   = open_tree(tree, ledger)
        with released_all(find_all(root, lambda c: c == widgets.TEXT_VIEW)) as nodes:
            assert _texts(nodes) == ["before", "after"]
        root.release()
        assert ledger.balanced

    def test_missing_child_skipped(self):
        tree   = layout(tv("A"), None, tv("B"))
        ledger = HandleLedger()
        root   = open_tree(tree, ledger)
        with released_all(find_all(root, lambda c: c == widgets.TEXT_VIEW)) as nodes:
            assert _texts(nodes) == ["A", "B"]
        root.release()
        assert ledger.balanced

    def test_predicate_error_releases_partial_results(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        seen   = []

        def predicate(cls):
            seen.append(cls)
            if len(seen) == 4:
                raise RuntimeError("boom")
            return cls == widgets.TEXT_VIEW

        with pytest.raises(RuntimeError):
            find_all(root, predicate)
        root.release()
        assert ledger.balanced


class TestFindFirst:

    def test_by_view_id(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        with acquired(find_by_view_id(root, "app:id/c")) as node:
            assert node.text == "C"
        root.release()
        assert ledger.balanced

    def test_by_exact_text_requires_exact(self):
        ledger = HandleLedger()
        root   = open_tree(layout(tv("GROUP INFO extra"), tv(" GROUP INFO ")), ledger)
        with acquired(find_by_exact_text(root, "GROUP INFO")) as node:
            assert node is not None
            assert node.text == " GROUP INFO "
        root.release()
        assert ledger.balanced

    def test_not_found(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        assert find_by_view_id(root, "app:id/missing") is None
        assert find_by_exact_text(root, "Z") is None
        root.release()
        assert ledger.balanced


# ── HANDLES ──────────────────────────────────────────────────

class TestHandles:

    def test_double_release_rejected(self):
        root = open_tree(tv("x"))
        root.release()
        with pytest.raises(HandleError):
            root.release()

    def test_use_after_release_rejected(self):
        root = open_tree(tv("x"))
        root.release()
        with pytest.raises(HandleError):
            root.text

    def test_acquired_releases_on_exception(self):
        ledger = HandleLedger()
        root   = open_tree(TREE, ledger)
        with pytest.raises(ValueError):
            with acquired(root.child(0)):
                raise ValueError("early exit")
        root.release()
        assert ledger.balanced

    def test_child_out_of_range_is_none(self):
        root = open_tree(tv("x"))
        assert root.child(3) is None
        root.release()

    def test_long_keys_accepted(self):
        root = open_tree({
            "class_name": widgets.IMAGE_VIEW,
            "content_description": "Read",
            "view_id": "app:id/status",
        })
        assert root.class_name == widgets.IMAGE_VIEW
        assert root.content_description == "Read"
        assert root.view_id == "app:id/status"
        root.release()
