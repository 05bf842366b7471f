"""Tests for the workflow reference parser."""

import logging
import os

import pytest

from gha_pin.errors import WorkflowReadError
from gha_pin.parser import (
    ActionReference,
    is_commit_sha,
    parse_workflow,
    parse_workflow_text,
    scan_workflows,
    split_uses_line,
)
from tests._helpers import CHECKOUT_LATEST, SETUP_PYTHON_V5


# ---------------------------------------------------------------------------
# split_uses_line
# ---------------------------------------------------------------------------

class TestSplitUsesLine:
    def test_tag_ref_with_comment(self):
        parts = split_uses_line("    uses: actions/checkout@v4  # checkout")
        assert parts.prefix == "    uses: "
        assert parts.repo_path == "actions/checkout"
        assert parts.ref == "v4"
        assert parts.suffix == "  # checkout"
        assert parts.comment == "checkout"

    def test_list_item_without_comment(self):
        parts = split_uses_line("      - uses: actions/setup-python@v5")
        assert parts.prefix == "      - uses: "
        assert parts.ref == "v5"
        assert parts.suffix == ""
        assert parts.comment == ""

    def test_sha_ref(self):
        parts = split_uses_line(f"      - uses: actions/checkout@{CHECKOUT_LATEST} # v4.2.2")
        assert parts.ref == CHECKOUT_LATEST
        assert parts.comment == "v4.2.2"

    def test_subpath(self):
        parts = split_uses_line("        uses: github/codeql-action/init@v3")
        assert parts.repo_path == "github/codeql-action/init"

    def test_quoted_value(self):
        parts = split_uses_line('      - uses: "actions/checkout@v4"')
        assert parts.quote == '"'
        assert parts.ref == "v4"
        assert parts.suffix == '"'

    @pytest.mark.parametrize("line", [
        "      - uses: ./.github/actions/local-thing",
        "      - uses: docker://alpine:3.19",
        "      - uses: actions/checkout",
        "      # uses: actions/checkout@v4",
        '        run: echo "uses: actions/checkout@v4"',
        "name: CI",
        "",
    ])
    def test_non_reference_lines(self, line):
        assert split_uses_line(line) is None

    @pytest.mark.parametrize("line", [
        "    uses: actions/checkout@v4  # checkout",
        "      - uses: actions/setup-python@v5",
        f"      - uses: actions/checkout@{CHECKOUT_LATEST} # v4.2.2",
        "        uses: github/codeql-action/upload-sarif@main   #   pinned later  ",
        "      - uses: 'actions/cache@v4' # cache",
        "    uses: actions/checkout@v4\r",
    ])
    def test_pieces_reassemble_to_original_line(self, line):
        parts = split_uses_line(line)
        assert parts.prefix + parts.repo_path + "@" + parts.ref + parts.suffix == line


# ---------------------------------------------------------------------------
# ActionReference
# ---------------------------------------------------------------------------

class TestActionReference:
    def _ref(self, repo_path="actions/checkout", current_ref="v4"):
        return ActionReference(
            repo_path=repo_path,
            current_ref=current_ref,
            line_number=1,
            original_line=f"uses: {repo_path}@{current_ref}",
            source_file="ci.yml",
        )

    def test_symbolic_ref_has_no_commit(self):
        ref = self._ref(current_ref="v4")
        assert ref.current_commit == ""
        assert ref.is_pinned is False

    def test_sha_ref_sets_commit(self):
        ref = self._ref(current_ref=CHECKOUT_LATEST)
        assert ref.current_commit == CHECKOUT_LATEST
        assert ref.is_pinned is True

    def test_owner_and_repo_ignore_subpath(self):
        ref = self._ref(repo_path="github/codeql-action/upload-sarif")
        assert ref.owner == "github"
        assert ref.repo == "codeql-action"

    def test_location(self):
        assert self._ref().location == "ci.yml:1"


class TestIsCommitSha:
    def test_full_sha(self):
        assert is_commit_sha(CHECKOUT_LATEST)

    def test_short_sha(self):
        assert not is_commit_sha("a" * 39)

    def test_uppercase_sha(self):
        assert not is_commit_sha(CHECKOUT_LATEST.upper())

    def test_tag(self):
        assert not is_commit_sha("v4")


# ---------------------------------------------------------------------------
# parse_workflow_text / parse_workflow
# ---------------------------------------------------------------------------

class TestParseWorkflow:
    def test_finds_references_in_order(self, fixtures_dir):
        refs = parse_workflow(os.path.join(fixtures_dir, "unpinned.yml"))
        assert [(r.repo_path, r.current_ref) for r in refs] == [
            ("actions/checkout", "v4"),
            ("actions/setup-python", "v5"),
            ("actions/checkout", CHECKOUT_LATEST),
            ("github/codeql-action/init", "v3"),
        ]

    def test_line_numbers_are_one_based(self, fixtures_dir):
        refs = parse_workflow(os.path.join(fixtures_dir, "unpinned.yml"))
        assert [r.line_number for r in refs] == [9, 10, 18, 20]

    def test_original_line_and_source(self, fixtures_dir):
        path = os.path.join(fixtures_dir, "unpinned.yml")
        ref = parse_workflow(path)[0]
        assert ref.original_line == "        uses: actions/checkout@v4  # checkout"
        assert ref.source_file == path
        assert ref.comment == "checkout"

    def test_current_commit_only_for_sha_refs(self, fixtures_dir):
        refs = parse_workflow(os.path.join(fixtures_dir, "pinned.yml"))
        assert [r.current_commit for r in refs] == [CHECKOUT_LATEST, SETUP_PYTHON_V5]

    def test_crlf_text(self):
        refs = parse_workflow_text("steps:\r\n  - uses: actions/checkout@v4\r\n", "ci.yml")
        assert len(refs) == 1
        assert refs[0].current_ref == "v4"
        assert refs[0].line_number == 2

    def test_no_references(self):
        assert parse_workflow_text("name: CI\non: push\n", "ci.yml") == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkflowReadError) as exc:
            parse_workflow(str(tmp_path / "missing.yml"))
        assert "missing.yml" in str(exc.value)


# ---------------------------------------------------------------------------
# scan_workflows
# ---------------------------------------------------------------------------

class TestScanWorkflows:
    def test_finds_all_workflows(self, fixtures_dir):
        result = scan_workflows(fixtures_dir)
        assert sorted(os.path.basename(p) for p in result.actions) == ["pinned.yml", "unpinned.yml"]
        assert result.errors == []

    def test_skips_files_without_references(self, tmp_path):
        (tmp_path / "empty.yml").write_text("name: nothing\non: push\n")
        result = scan_workflows(str(tmp_path))
        assert result.actions == {}

    def test_yaml_extension(self, tmp_path):
        (tmp_path / "ci.yaml").write_text("    - uses: actions/checkout@v4\n")
        result = scan_workflows(str(tmp_path))
        assert list(result.actions) == [str(tmp_path / "ci.yaml")]

    def test_exclude_patterns(self, fixtures_dir):
        result = scan_workflows(fixtures_dir, exclude=["pinned.yml"])
        assert [os.path.basename(p) for p in result.actions] == ["unpinned.yml"]

    def test_unreadable_file_does_not_stop_scan(self, workflows_dir):
        (workflows_dir / "broken.yml").write_bytes(b"\xff\xfe uses: actions/checkout@v4\n")
        result = scan_workflows(str(workflows_dir))
        assert len(result.actions) == 2
        assert len(result.errors) == 1
        assert result.errors[0].path.endswith("broken.yml")

    def test_unreadable_file_not_logged_as_warning(self, workflows_dir, caplog):
        (workflows_dir / "broken.yml").write_bytes(b"\xff\xfe uses: actions/checkout@v4\n")
        caplog.set_level(logging.INFO, logger="gha_pin.parser.workflow_parser")
        scan_workflows(str(workflows_dir))
        assert any("broken.yml" in r.getMessage() for r in caplog.records)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(WorkflowReadError):
            scan_workflows(str(tmp_path / "nope"))
