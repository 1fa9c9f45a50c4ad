"""Tests for configuration loading"""
import pytest

from git_pr_train.config import (
    Config,
    init_config,
    load_train_config,
    parse_branch_entry,
    read_github_token,
)
from git_pr_train.constants import CONFIG_FILENAME
from git_pr_train.exceptions import ConfigError, PreconditionError
from git_pr_train.models.train import BranchWithOptions, SimpleBranch


class TestConfig:
    """Test the Config dataclass."""

    def test_defaults(self):
        config = Config()
        assert config.stable_branch is None
        assert config.remote == "origin"
        assert config.reviewers == []

    def test_blank_stable_branch_rejected(self):
        with pytest.raises(ConfigError):
            Config(stable_branch="  ")

    def test_blank_remote_rejected(self):
        with pytest.raises(ConfigError):
            Config(remote="")

    def test_reviewers_normalised(self):
        config = Config(reviewers=["@alice", " bob ", ""])
        assert config.reviewers == ["alice", "bob"]

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"remote": "upstream", "bogus": 1})
        assert config.remote == "upstream"
        assert config.get("bogus") is None


class TestBranchEntries:
    """Test parsing heterogeneous branch entries."""

    def test_bare_name(self):
        assert parse_branch_entry("feat-1", "t") == SimpleBranch("feat-1")

    def test_name_with_options(self):
        entry = parse_branch_entry({"feat-3": {"combined": True, "initSha": "deadbeef"}}, "t")
        assert entry == BranchWithOptions("feat-3", combined=True, init_sha="deadbeef")

    def test_name_with_empty_options(self):
        assert parse_branch_entry({"feat-3": None}, "t") == BranchWithOptions("feat-3")

    def test_unrecognised_entry(self):
        with pytest.raises(ConfigError):
            parse_branch_entry(["a", "b"], "t")


class TestLoadTrainConfig:
    """Test reading .pr-train.yml."""

    def test_load(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(
            "prs:\n"
            "  main-branch-name: develop\n"
            "  draft-by-default: true\n"
            "trains:\n"
            "  feature:\n"
            "    - feat-1\n"
            "    - feat-2:\n"
            "        combined: true\n"
        )
        train_config = load_train_config(tmp_path)

        train = train_config.trains["feature"]
        assert train.names == ["feat-1", "feat-2"]
        assert train.combined_branch.name == "feat-2"
        assert train_config.main_branch_name == "develop"
        assert train_config.draft_by_default is True

    def test_find_train(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(
            "trains:\n  one:\n    - a\n    - b\n  two:\n    - c\n"
        )
        train_config = load_train_config(tmp_path)
        assert train_config.find_train("c").name == "two"
        assert train_config.find_train("zzz") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="--init"):
            load_train_config(tmp_path)

    def test_malformed_yaml(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("trains: [unclosed\n")
        with pytest.raises(ConfigError, match="error in"):
            load_train_config(tmp_path)

    def test_no_trains(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("prs: {}\n")
        with pytest.raises(ConfigError, match="No trains"):
            load_train_config(tmp_path)


class TestInitConfig:
    """Test writing the template configuration."""

    def test_template_is_loadable(self, tmp_path):
        path = init_config(tmp_path)
        assert path.exists()
        train_config = load_train_config(tmp_path)
        assert train_config.trains["my-feature"].combined_branch.name == "my-feature-combined"

    def test_refuses_to_overwrite(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("trains: {}\n")
        with pytest.raises(ConfigError, match="already exists"):
            init_config(tmp_path)


class TestGithubToken:
    """Test reading the credential file."""

    def test_reads_trimmed_token(self, tmp_path):
        token_file = tmp_path / ".pr-train"
        token_file.write_text("  ghp_secret\n")
        assert read_github_token(token_file) == "ghp_secret"

    def test_missing_file(self, tmp_path):
        with pytest.raises(PreconditionError) as exc_info:
            read_github_token(tmp_path / "missing")
        assert exc_info.value.exit_code == 4

    def test_empty_file(self, tmp_path):
        token_file = tmp_path / ".pr-train"
        token_file.write_text("\n")
        with pytest.raises(PreconditionError):
            read_github_token(token_file)
