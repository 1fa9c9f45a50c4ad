"""Tests for the navigation block"""
from git_pr_train.models.pull_request import NavigationEntry, PRRecord, PRStatus
from git_pr_train.services.navigation import (
    build_entries,
    format_entry,
    has_navigation,
    render_navigation,
    upsert_navigation,
)


def make_records():
    return {
        "feat-1": PRRecord("feat-1", 101, "Add parser", "", "master", PRStatus.NEW),
        "feat-2": PRRecord("feat-2", 102, "Wire parser", "", "feat-1", PRStatus.NEW),
        "feat-3": PRRecord("feat-3", 103, "Parser feature", "", "master", PRStatus.NEW),
    }


class TestRenderNavigation:
    """Test rendering the block."""

    def test_entry_formats(self):
        assert format_entry(NavigationEntry(101, "Add parser")) == "#101 (Add parser)"
        assert format_entry(NavigationEntry(103, "Tip", combined=True)) == "#103 **[combined branch]** (Tip)"
        assert format_entry(NavigationEntry(102, " Wire ", current=True)) == "👉 #102 (Wire) 👈 **YOU ARE HERE**"

    def test_block_for_middle_branch(self):
        entries = build_entries(make_records(), "feat-2", "feat-3")
        assert render_navigation(entries) == (
            "<pr-train-toc>\n"
            "\n"
            "#### PR chain:\n"
            "#101 (Add parser)\n"
            "👉 #102 (Wire parser) 👈 **YOU ARE HERE**\n"
            "#103 **[combined branch]** (Parser feature)\n"
            "\n"
            "</pr-train-toc>"
        )

    def test_entries_follow_train_order(self):
        entries = build_entries(make_records(), "feat-3", "feat-3")
        assert [entry.number for entry in entries] == [101, 102, 103]
        assert [entry.current for entry in entries] == [False, False, True]
        assert entries[2].combined


class TestUpsertNavigation:
    """Test inserting and replacing the block in a PR body."""

    def test_appends_when_missing(self):
        navigation = render_navigation(build_entries(make_records(), "feat-1"))
        assert upsert_navigation(navigation, "Body text") == "Body text\n" + navigation

    def test_appends_to_empty_body(self):
        navigation = render_navigation(build_entries(make_records(), "feat-1"))
        assert upsert_navigation(navigation, None) == "\n" + navigation

    def test_replaces_existing_block(self):
        records = make_records()
        old = render_navigation(build_entries(records, "feat-1"))
        body = "Intro\n" + old + "\nFooter"

        records["feat-2"].title = "Renamed"
        new = render_navigation(build_entries(records, "feat-1"))
        updated = upsert_navigation(new, body)

        assert updated == "Intro\n" + new + "\nFooter"
        assert updated.count("<pr-train-toc>") == 1
        assert "Renamed" in updated

    def test_idempotent(self):
        navigation = render_navigation(build_entries(make_records(), "feat-2", "feat-3"))
        once = upsert_navigation(navigation, "Some description")
        twice = upsert_navigation(navigation, once)
        assert twice == once

    def test_stray_start_marker_in_text_is_kept(self):
        navigation = render_navigation(build_entries(make_records(), "feat-1"))
        body = "This PR documents the <pr-train-toc> tag.\nKeep this paragraph."
        once = upsert_navigation(navigation, body)
        twice = upsert_navigation(navigation, once)

        assert once == body + "\n" + navigation
        assert twice == once

    def test_only_last_block_is_replaced(self):
        records = make_records()
        old = render_navigation(build_entries(records, "feat-1"))
        body = "Quoted:\n" + old + "\nCurrent:\n" + old

        records["feat-1"].title = "Renamed"
        new = render_navigation(build_entries(records, "feat-1"))

        assert upsert_navigation(new, body) == "Quoted:\n" + old + "\nCurrent:\n" + new

    def test_titles_with_backslashes_kept_literally(self):
        records = make_records()
        records["feat-1"].title = r"Escape \1 and \n"
        navigation = render_navigation(build_entries(records, "feat-1"))
        body = upsert_navigation(navigation, upsert_navigation(navigation, ""))
        assert r"Escape \1 and \n" in body

    def test_has_navigation(self):
        assert has_navigation("x <pr-train-toc>\n</pr-train-toc>")
        assert not has_navigation("no block here")
        assert not has_navigation(None)
