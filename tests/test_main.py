"""
tests/test_main.py - OpsToolkit orchestration
"""

import json
from unittest.mock import MagicMock

import pytest

from aws_ops_toolkit.config import GlobalOptions
from aws_ops_toolkit.errors import (
    FixtureNotFoundError,
    ConfigError,
    InputFileNotFoundError,
    PartialDeleteError,
    ToolNotFoundError,
    UsageError,
)
from aws_ops_toolkit.main import OpsToolkit
from aws_ops_toolkit.sources import FixtureSource, LiveSource


@pytest.fixture
def structured():
    return GlobalOptions(output_format="structured")


class TestDataSource:
    def test_mock_mode_uses_fixture(self, config):
        source = OpsToolkit(GlobalOptions(), config).data_source("s3_list_objects.json", "s3api")

        assert isinstance(source, FixtureSource)
        assert source.path == config.fixture_path("s3_list_objects.json")

    def test_live_mode_builds_aws_command(self, fake_aws, config, live_options):
        source = OpsToolkit(live_options, config).data_source(
            "ec2_describe_instances.json", "ec2", "describe-instances"
        )

        assert isinstance(source, LiveSource)
        assert source.command[1:3] == ["ec2", "describe-instances"]
        assert "--profile" in source.command

    def test_live_mode_without_cli_fails_before_spawning(self, config, live_options):
        with pytest.raises(ToolNotFoundError):
            OpsToolkit(live_options, config).data_source("x.json", "ec2", "describe-instances")

    def test_fixture_dir_override(self, fixtures_dir, config):
        with pytest.raises(FixtureNotFoundError):
            OpsToolkit(GlobalOptions(), config).ec2_list()


class TestEc2:
    def test_list_table(self, config):
        output = OpsToolkit(GlobalOptions(), config).ec2_list()

        assert output.startswith("EC2 INSTANCES\n")
        assert "i-0a1b2c3d4e5f60001" in output
        assert "api-server-1" in output

    def test_list_is_deterministic(self, config):
        toolkit = OpsToolkit(GlobalOptions(), config)

        assert toolkit.ec2_list() == toolkit.ec2_list()

    def test_health_formats_describe_the_same_records(self, config, structured):
        table = OpsToolkit(GlobalOptions(), config).ec2_health()
        records = json.loads(OpsToolkit(structured, config).ec2_health())

        assert len(records) == 4
        for record in records:
            assert record["InstanceId"] in table
            assert record["Health"] in table
        assert "4 instance(s) checked" in table

    def test_live_health_reads_aws_output(self, fake_aws, config, live_options):
        output = OpsToolkit(live_options, config).ec2_health()

        assert "i-0a1b2c3d4e5f60003" in output
        assert fake_aws.calls == [
            "ec2 describe-instances --profile ops --region eu-west-1 --output json"
        ]


class TestS3Clean:
    def test_dry_run_is_default(self, config, structured, now):
        client = MagicMock()
        toolkit = OpsToolkit(structured, config, aws_client=client)

        result = json.loads(toolkit.s3_clean("example-ops-bucket", 365, now=now))

        assert result["apply"] is False
        assert result["total_objects"] == 4
        assert {obj["Action"] for obj in result["objects"]} == {"would-delete"}
        client.delete_objects.assert_not_called()

    def test_dry_run_never_deletes_in_live_mode(self, fake_aws, config, now):
        options = GlobalOptions(mode="real", output_format="structured")
        result = json.loads(OpsToolkit(options, config).s3_clean("b", 0, now=now))

        assert result["total_objects"] == 5
        assert not [call for call in fake_aws.calls if "delete-objects" in call]

    def test_apply_in_mock_mode_only_reports(self, config, structured, now):
        client = MagicMock()
        toolkit = OpsToolkit(structured, config, aws_client=client)

        result = json.loads(toolkit.s3_clean("b", 365, apply=True, now=now))

        assert {obj["Action"] for obj in result["objects"]} == {"deleted (mock)"}
        client.delete_objects.assert_not_called()

    def test_apply_in_live_mode_deletes(self, fake_aws, config, now):
        options = GlobalOptions(mode="real", output_format="structured")

        result = json.loads(OpsToolkit(options, config).s3_clean("b", 365, apply=True, now=now))

        assert {obj["Action"] for obj in result["objects"]} == {"deleted"}
        deletes = [call for call in fake_aws.calls if "delete-objects" in call]
        assert len(deletes) == 1
        assert "backups/db-2021-01-05.sql.gz" in deletes[0]
        assert "logs/app-2026-10-01.log" not in deletes[0]

    def test_apply_marks_keys_s3_refused(self, fake_aws, config, now, monkeypatch):
        monkeypatch.setenv(
            "FAKE_AWS_DELETE_RESPONSE",
            json.dumps(
                {"Errors": [{"Key": "backups/db-2021-01-05.sql.gz", "Code": "AccessDenied"}]}
            ),
        )
        options = GlobalOptions(mode="real", output_format="structured")

        with pytest.raises(PartialDeleteError) as exc_info:
            OpsToolkit(options, config).s3_clean("b", 365, apply=True, now=now)

        assert exc_info.value.exit_code == 1
        assert exc_info.value.failures == {"backups/db-2021-01-05.sql.gz": "AccessDenied"}
        actions = {
            obj["Key"]: obj["Action"] for obj in json.loads(exc_info.value.report)["objects"]
        }
        assert actions["backups/db-2021-01-05.sql.gz"] == "failed: AccessDenied"
        assert actions["backups/db-2021-06-05.sql.gz"] == "deleted"

    def test_apply_with_nothing_selected(self, config, now):
        client = MagicMock()
        output = OpsToolkit(GlobalOptions(), config, aws_client=client).s3_clean(
            "b", 100000, apply=True, now=now
        )

        assert "(no records)" in output
        client.delete_objects.assert_not_called()

    def test_table_footer(self, config, now):
        output = OpsToolkit(GlobalOptions(), config).s3_clean("b", 365, now=now)

        assert "4 object(s), 108023808 bytes" in output
        assert "dry-run, nothing deleted" in output

    def test_missing_bucket(self, config):
        with pytest.raises(UsageError, match="Missing bucket"):
            OpsToolkit(GlobalOptions(), config).s3_clean("", 30)


class TestLogsAnalyze:
    def test_missing_file(self, config, tmp_path):
        with pytest.raises(InputFileNotFoundError, match="Log file not found"):
            OpsToolkit(GlobalOptions(), config).logs_analyze(tmp_path / "missing.log")

    def test_structured_output(self, config, structured, sample_log):
        result = json.loads(OpsToolkit(structured, config).logs_analyze(sample_log, top=1))

        assert result["top"] == 1
        assert result["since_min"] == 0
        assert result["entries"][0]["Count"] == 3

    def test_default_top_from_environment(self, monkeypatch, structured, sample_log):
        monkeypatch.setenv("OPS_LOG_TOP_DEFAULT", "2")

        result = json.loads(OpsToolkit(structured).logs_analyze(sample_log))

        assert result["top"] == 2
        assert len(result["entries"]) == 2

    def test_non_positive_default_top_is_rejected(self, monkeypatch):
        monkeypatch.setenv("OPS_LOG_TOP_DEFAULT", "-1")

        with pytest.raises(ConfigError, match="OPS_LOG_TOP_DEFAULT"):
            OpsToolkit(GlobalOptions())

    def test_explicit_zero_top_is_rejected(self, config, sample_log):
        with pytest.raises(UsageError, match="--top"):
            OpsToolkit(GlobalOptions(), config).logs_analyze(sample_log, top=0)
