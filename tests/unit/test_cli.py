"""Tests for the click-based CLI."""

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests
from click.testing import CliRunner

from storyblok_exporter.cli.commands import cli, handle_exception
from storyblok_exporter.cli.export_cmd import run_export
from storyblok_exporter.core.config import DrupalConfig, ExporterConfig, StoryblokConfig
from storyblok_exporter.exceptions import ConfigError, SourceError
from storyblok_exporter.services.dry_run_client import DryRunStoryblokClient
from storyblok_exporter.services.storyblok_client import StoryblokClient
from storyblok_exporter.types import (
    EntityRef,
    FileEntity,
    MigrationSummary,
    Result,
    SourceRecord,
    UploadedAsset,
)

EXPORT_CMD = "storyblok_exporter.cli.export_cmd"


def _config(dry_run_only=False):
    storyblok = (
        StoryblokConfig()
        if dry_run_only
        else StoryblokConfig(oauth_token="tok", space_id="1", datasource_id="2")
    )
    return ExporterConfig(
        drupal=DrupalConfig(
            base_url="https://drupal.example.com", public_files_path="/srv/files"
        ),
        storyblok=storyblok,
    )


def _records():
    return [
        SourceRecord(
            title="Hello, World!",
            body="<p>Hi</p>",
            created_at=1709634030,
            author="Alice",
            image_ref=EntityRef("file--file", "f1"),
            tag_refs=[EntityRef("taxonomy_term--tags", "t1")],
        ),
        SourceRecord(title="Second", body="", created_at=1700000000, author="Bob"),
    ]


@pytest.fixture()
def fake_reader():
    reader = MagicMock()
    reader.find_published.return_value = _records()
    reader.resolve_file.return_value = FileEntity(
        uri="public://2024-03/hello.jpg", filename="hello.jpg"
    )
    reader.resolve_term.return_value = "news"
    return reader


class TestCLIGroup:
    """Tests for the CLI group structure."""

    def test_cli_has_all_subcommands(self):
        assert set(cli.commands.keys()) == {"export", "sbe", "init-config"}

    def test_sbe_is_an_alias_of_export(self):
        assert cli.commands["sbe"] is cli.commands["export"]

    def test_version_flag(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "storyblok-exporter" in result.output

    def test_help_output(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "export" in result.output
        assert "init-config" in result.output

    def test_short_help_flag(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "Export Drupal articles to Storyblok" in result.output

    def test_no_subcommand_prints_help(self):
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_export_help_lists_options(self):
        result = CliRunner().invoke(cli, ["export", "--help"])
        assert result.exit_code == 0
        for option in ("--limit", "--config", "--dry_run", "--strict", "--debug_api"):
            assert option in result.output

    def test_limit_must_be_an_integer(self):
        result = CliRunner().invoke(cli, ["export", "--limit", "ten"])
        assert result.exit_code == 2


@patch(f"{EXPORT_CMD}.generate_report")
@patch(f"{EXPORT_CMD}.setup_logger")
@patch(f"{EXPORT_CMD}.create_output_directory", return_value="out/run_test")
class TestExportCommand:
    def _invoke(self, args, summary):
        with patch(f"{EXPORT_CMD}.load_config", return_value=_config()), patch(
            f"{EXPORT_CMD}.create_migrator"
        ), patch(
            f"{EXPORT_CMD}.run_export", return_value=(summary, summary.attempted)
        ) as run:
            result = CliRunner().invoke(cli, args)
        return result, run

    def test_success_exits_zero(self, _out, _setup, report):
        summary = MigrationSummary(attempted=2, migrated=2)

        result, run = self._invoke(["export", "--limit", "2"], summary)

        assert result.exit_code == 0
        run.assert_called_once()
        assert run.call_args.kwargs["limit"] == 2
        assert run.call_args.kwargs["dry_run"] is False
        report.assert_called_once()
        assert report.call_args.args[1] == "out/run_test"

    def test_alias_runs_the_same_command(self, _out, _setup, _report):
        result, run = self._invoke(["sbe", "--dry_run"], MigrationSummary())

        assert result.exit_code == 0
        assert run.call_args.kwargs["dry_run"] is True

    def test_failures_exit_zero_without_strict(self, _out, _setup, _report):
        summary = MigrationSummary(attempted=2, migrated=1, failed=["b"])

        result, _ = self._invoke(["export"], summary)

        assert result.exit_code == 0

    def test_failures_exit_one_with_strict(self, _out, _setup, _report):
        summary = MigrationSummary(attempted=2, migrated=1, failed=["b"])

        result, _ = self._invoke(["export", "--strict"], summary)

        assert result.exit_code == 1

    def test_strict_success_exits_zero(self, _out, _setup, _report):
        summary = MigrationSummary(attempted=1, migrated=1)

        result, _ = self._invoke(["export", "--strict"], summary)

        assert result.exit_code == 0

    def test_verbose_and_debug_api_reach_logger(self, _out, setup, _report):
        self._invoke(["export", "-v", "--debug_api"], MigrationSummary())

        setup.assert_called_once_with(True, True, "out/run_test")

    def test_fatal_error_exits_one(self, _out, _setup, report):
        with patch(f"{EXPORT_CMD}.load_config", return_value=_config()), patch(
            f"{EXPORT_CMD}.create_migrator"
        ) as create, patch(
            f"{EXPORT_CMD}.run_export", side_effect=SourceError("Drupal is down")
        ), patch(f"{EXPORT_CMD}.handle_exception") as handler:
            create.return_value.summary = MigrationSummary()
            result = CliRunner().invoke(cli, ["export"])

        assert result.exit_code == 1
        assert isinstance(handler.call_args.args[0], SourceError)
        report.assert_not_called()

    def test_interrupt_is_handled_and_writes_partial_report(
        self, _out, _setup, report, caplog
    ):
        migrator = MagicMock()
        migrator.summary = MigrationSummary(attempted=2, migrated=1, failed=["b"])

        with patch(f"{EXPORT_CMD}.load_config", return_value=_config()), patch(
            f"{EXPORT_CMD}.create_migrator", return_value=migrator
        ), patch(f"{EXPORT_CMD}.run_export", side_effect=KeyboardInterrupt()):
            with caplog.at_level(logging.INFO, logger="storyblok_exporter"):
                result = CliRunner().invoke(cli, ["export"])

        assert result.exit_code == 1
        assert "Aborted!" not in result.output
        assert "Export interrupted by user." in caplog.text
        report.assert_called_once()
        written, output_dir = report.call_args.args
        assert output_dir == "out/run_test"
        assert written["interrupted"] is True
        assert written["outcome"] == "partial"
        assert written["summary"]["migrated"] == 1
        assert written["summary"]["fetched"] is None
        assert written["failed_articles"] == ["b"]

    def test_interrupt_before_any_article_writes_no_report(
        self, _out, _setup, report
    ):
        with patch(f"{EXPORT_CMD}.load_config", side_effect=KeyboardInterrupt()), patch(
            f"{EXPORT_CMD}.handle_exception"
        ) as handler:
            result = CliRunner().invoke(cli, ["export"])

        assert result.exit_code == 1
        assert isinstance(handler.call_args.args[0], KeyboardInterrupt)
        report.assert_not_called()


class TestInitConfig:
    def test_creates_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem(), patch(
            "storyblok_exporter.cli.config_cmd.setup_logger"
        ):
            result = runner.invoke(cli, ["init-config", "--output", "my.yaml"])

            assert result.exit_code == 0
            with open("my.yaml", encoding="utf-8") as f:
                assert "storyblok" in f.read()
        assert "STORYBLOK_OAUTH_TOKEN" in result.output

    def test_existing_file_exits_one(self):
        runner = CliRunner()
        with runner.isolated_filesystem(), patch(
            "storyblok_exporter.cli.config_cmd.setup_logger"
        ):
            with open("config.yaml", "w", encoding="utf-8") as f:
                f.write("content_type: page\n")

            result = runner.invoke(cli, ["init-config"])

            assert result.exit_code == 1
            with open("config.yaml", encoding="utf-8") as f:
                assert f.read() == "content_type: page\n"


class TestRunExport:
    def test_wires_reader_projector_and_client(self, fake_reader):
        client = MagicMock()
        client.upload_asset.return_value = Result.success(
            UploadedAsset(id=7, filename="https://a.storyblok.com/f/1/hello.jpg")
        )
        client.create_tag.return_value = Result.success()
        client.create_story.return_value = Result.success(100)

        with patch(f"{EXPORT_CMD}.DrupalJsonApiReader", return_value=fake_reader), patch(
            f"{EXPORT_CMD}.StoryblokClient", return_value=client
        ) as client_cls:
            summary, fetched = run_export(_config(), limit=2)

        fake_reader.find_published.assert_called_once_with("article", 2)
        client_cls.assert_called_once()
        assert fetched == 2
        assert summary.migrated == 2
        assert summary.outcome == "success"
        client.upload_asset.assert_called_once()
        assert str(client.upload_asset.call_args.args[0]).endswith("2024-03/hello.jpg")
        client.create_tag.assert_called_once_with("news")
        payloads = [c.args[0] for c in client.create_story.call_args_list]
        assert [p["story"]["slug"] for p in payloads] == ["hello-world-", "second"]
        assert payloads[0]["story"]["created_at"] == "2024-03-05 10:20:30"

    def test_dry_run_uses_dry_run_client(self, fake_reader):
        with patch(f"{EXPORT_CMD}.DrupalJsonApiReader", return_value=fake_reader), patch(
            f"{EXPORT_CMD}.StoryblokClient"
        ) as client_cls, patch(
            f"{EXPORT_CMD}.DrupalToStoryblokMigrator"
        ) as migrator_cls:
            migrator_cls.return_value.summary = MigrationSummary(attempted=2, migrated=2)
            run_export(_config(dry_run_only=True), dry_run=True)

        client_cls.assert_not_called()
        assert isinstance(migrator_cls.call_args.args[0], DryRunStoryblokClient)

    def test_uses_given_migrator(self, fake_reader):
        migrator = MagicMock()
        migrator.summary = MigrationSummary(attempted=2, migrated=2)

        with patch(f"{EXPORT_CMD}.DrupalJsonApiReader", return_value=fake_reader), patch(
            f"{EXPORT_CMD}.StoryblokClient"
        ) as client_cls:
            summary, _ = run_export(_config(), migrator=migrator)

        client_cls.assert_not_called()
        items = migrator.migrate.call_args.args[0]
        assert [i.title for i in items] == ["Hello, World!", "Second"]
        assert summary is migrator.summary

    def test_invalid_config_raises_before_reading(self, fake_reader):
        with patch(
            f"{EXPORT_CMD}.DrupalJsonApiReader", return_value=fake_reader
        ) as reader_cls:
            with pytest.raises(ConfigError):
                run_export(_config(dry_run_only=True), dry_run=False)

        reader_cls.assert_not_called()

    def test_empty_source(self, fake_reader):
        fake_reader.find_published.return_value = []

        with patch(f"{EXPORT_CMD}.DrupalJsonApiReader", return_value=fake_reader), patch(
            f"{EXPORT_CMD}.StoryblokClient"
        ) as client_cls:
            summary, fetched = run_export(_config())

        assert fetched == 0
        assert summary.outcome == "nothing_to_export"
        client_cls.return_value.create_story.assert_not_called()


class TestHandleException:
    def test_config_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="storyblok_exporter"):
            handle_exception(ConfigError("Invalid configuration: x"))
        assert "Invalid configuration: x" in caplog.text

    def test_source_error_with_http_cause(self, caplog):
        response = MagicMock(status_code=401)
        cause = requests.exceptions.HTTPError("401 Unauthorized", response=response)
        error = SourceError("Failed to read")
        error.__cause__ = cause

        with caplog.at_level(logging.INFO, logger="storyblok_exporter"):
            handle_exception(error)

        assert "Failed to read" in caplog.text
        assert "Access denied" in caplog.text

    def test_rate_limit(self, caplog):
        response = MagicMock(status_code=429)

        with caplog.at_level(logging.ERROR, logger="storyblok_exporter"):
            handle_exception(
                requests.exceptions.HTTPError("429", response=response)
            )

        assert "Rate limit exceeded" in caplog.text

    def test_server_error(self, caplog):
        response = MagicMock(status_code=503)

        with caplog.at_level(logging.ERROR, logger="storyblok_exporter"):
            handle_exception(requests.exceptions.HTTPError("503", response=response))

        assert "Server error" in caplog.text

    def test_network_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="storyblok_exporter"):
            handle_exception(requests.exceptions.ConnectionError("refused"))
        assert "Network error" in caplog.text

    def test_keyboard_interrupt(self, caplog):
        with caplog.at_level(logging.WARNING, logger="storyblok_exporter"):
            handle_exception(KeyboardInterrupt())
        assert "interrupted" in caplog.text

    def test_unexpected_error_logs_traceback(self, caplog):
        with caplog.at_level(logging.ERROR, logger="storyblok_exporter"):
            try:
                raise RuntimeError("kaboom")
            except RuntimeError as e:
                handle_exception(e)

        assert "Export failed: kaboom" in caplog.text
        assert caplog.records[0].exc_info is not None
