"""Integration tests for the diff and comment workflows."""

import json
from unittest.mock import patch

import pytest

from azdo_tools.azure_devops.client import AzureDevOpsClient
from azdo_tools.azure_devops.errors import RepositoryNotFoundError
from azdo_tools.cli import main


@pytest.fixture
def client(sample_config, fake_git_client):
    """Client wired to the in-memory Git client."""
    with AzureDevOpsClient(sample_config.azure_devops, sample_config.diff, git_client=fake_git_client) as c:
        yield c


@pytest.mark.integration
class TestDiffWorkflow:
    """Test reading pull request changes end-to-end."""

    def test_modified_file_diff(self, client):
        """Test a one-line change is shown with commentable line markers."""
        result = client.get_pull_request_file_changes("Contoso.Web", 42, "/src/app.py")

        assert result.disclosure == "1 of 1 files shown"
        diff = result.changes[0].diff_content
        assert "--- a/src/app.py" in diff
        assert "+++ b/src/app.py" in diff
        assert "@@ -1,3 +1,3 @@" in diff
        for line in (" a  [line 1, right]", "-b  [line 2, left]", "+x  [line 2, right]", " c  [line 3, right]"):
            assert line in diff.split("\n")

    def test_overview_renders_every_kind(self, client):
        """Test the overview covers modified, added and deleted files."""
        result = client.get_pull_request_file_changes("Contoso.Web", 42)

        kinds = [change.entry.change_kind.value for change in result.changes]
        assert kinds == ["edit", "add", "delete"]
        assert result.to_dict()["processedChanges"] == 3

    def test_repository_name_resolved_once(self, client, fake_git_client):
        """Test the repository list is fetched once for repeated calls."""
        client.get_pull_request_changes_count("Contoso.Web", 42)
        client.get_pull_request_changed_files("Contoso.Web", 42)

        assert fake_git_client.calls["list_repositories"] == 1

    def test_changed_files(self, client):
        """Test changed file paths are listed."""
        assert client.get_pull_request_changed_files("Contoso.Web", 42) == [
            "/src/app.py", "/src/new.py", "/src/old.py",
        ]

    def test_unknown_repository(self, client):
        """Test unknown names report the available repositories."""
        with pytest.raises(RepositoryNotFoundError) as exc_info:
            client.get_pull_request_file_changes("Contoso.Api", 42)

        assert "Contoso.Web, Contoso.Worker" in str(exc_info.value)


@pytest.mark.integration
class TestCommentWorkflow:
    """Test commenting on lines found in a rendered diff."""

    def test_comment_on_added_file_line(self, client, fake_git_client):
        """Test a line from an added file's rendering can be commented on."""
        rendered = client.get_pull_request_file_changes("Contoso.Web", 42, "src/new.py")
        assert "[line 2, right]" in rendered.changes[0].diff_content

        thread = client.add_inline_comment("Contoso.Web", 42, "src/new.py", "Name this constant", 2)

        context = fake_git_client.created_threads[0]["threadContext"]
        assert context["leftFileStart"] is None
        assert context["rightFileStart"] == {"line": 2, "offset": 1}
        assert fake_git_client.created_threads[0]["pullRequestThreadContext"]["changeTrackingId"] == 12
        assert thread.line_number == 2

    def test_comment_on_removed_line(self, client, fake_git_client):
        """Test a left-side line of a deleted file can be commented on."""
        client.add_inline_comment("Contoso.Web", 42, "/src/old.py", "Still used in docs", 2)

        context = fake_git_client.created_threads[0]["threadContext"]
        assert context["leftFileStart"] == {"line": 2, "offset": 1}
        assert context["rightFileStart"] is None


@pytest.mark.integration
class TestCommandLine:
    """Test the command line entry point."""

    @pytest.fixture(autouse=True)
    def wired(self, sample_config, fake_git_client):
        def build_client(azdo_config, diff_config):
            return AzureDevOpsClient(azdo_config, diff_config, git_client=fake_git_client)

        with patch("azdo_tools.cli.load_configuration", return_value=sample_config), \
                patch("azdo_tools.cli.AzureDevOpsClient", side_effect=build_client):
            yield

    def test_changes_for_one_file(self, capsys):
        """Test the diff of one file is printed."""
        exit_code = main(["changes", "--repository", "Contoso.Web", "--pr-id", "42", "--path", "src/app.py"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "=== /src/app.py (edit) ===" in out
        assert "+x  [line 2, right]" in out
        assert "1 of 1 files shown" in out

    def test_changes_as_json(self, capsys):
        """Test JSON output of the overview."""
        assert main(["changes", "--repository", "Contoso.Web", "--pr-id", "42", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["totalChanges"] == 3
        assert [e["path"] for e in data["changeEntries"]] == ["/src/app.py", "/src/new.py", "/src/old.py"]

    def test_count(self, capsys):
        """Test per-kind totals are printed as JSON."""
        assert main(["count", "--repository", "Contoso.Web", "--pr-id", "42"]) == 0

        assert json.loads(capsys.readouterr().out)["deletedFiles"] == 1

    def test_files_page(self, capsys):
        """Test paging through changed files."""
        assert main(["files", "--repository", "Contoso.Web", "--pr-id", "42", "--skip", "1"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["add      /src/new.py", "delete   /src/old.py", "2 of 3 changes"]

    def test_inline_comment(self, capsys, fake_git_client):
        """Test posting an inline comment."""
        exit_code = main([
            "comment", "--repository", "Contoso.Web", "--pr-id", "42",
            "--path", "/src/app.py", "--line", "2", "--text", "Typo",
        ])

        assert exit_code == 0
        assert "Created comment thread #1" in capsys.readouterr().out
        assert fake_git_client.created_threads[0]["comments"][0]["content"] == "Typo"

    def test_line_without_path(self, capsys, fake_git_client):
        """Test --line requires --path."""
        exit_code = main(["comment", "--repository", "Contoso.Web", "--pr-id", "42", "--line", "2", "--text", "x"])

        assert exit_code == 1
        assert "--line requires --path" in capsys.readouterr().err
        assert fake_git_client.calls["create_comment_thread"] == 0

    def test_unknown_repository(self, capsys):
        """Test lookup failures exit non-zero with a readable error."""
        assert main(["count", "--repository", "Contoso.Api", "--pr-id", "42"]) == 1
        assert "Available repositories" in capsys.readouterr().err
