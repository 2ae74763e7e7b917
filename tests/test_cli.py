"""Tests for the ossclient command-line interface."""

from unittest import mock

import pytest

from ossclient import cli
from ossclient.client import DEFAULT_PART_SIZE
from ossclient.errors import NoSuchUpload
from ossclient.models import InitiateMultipartUploadResult, PartListing, PartSummary


class TestParseArgs:
    """Tests for parse_args()."""

    def test_upload_defaults(self):
        """The upload command defaults its part size."""
        args = cli.parse_args(["upload", "bucket", "key", "/tmp/file"])
        assert args.command == "upload"
        assert args.part_size == DEFAULT_PART_SIZE
        assert args.config is None

    def test_global_options(self):
        """Global options precede the sub-command."""
        args = cli.parse_args(
            ["--log-level", "DEBUG", "--log-format", "json", "abort", "b", "k", "u1"]
        )
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"
        assert (args.bucket, args.key, args.upload_id) == ("b", "k", "u1")

    def test_command_required(self):
        """A sub-command is mandatory."""
        with pytest.raises(SystemExit):
            cli.parse_args([])


class TestMain:
    """Tests for main() with a mocked client."""

    def test_initiate_prints_upload_id(self, capsys):
        """initiate prints the new upload id."""
        with mock.patch.object(cli, "OSSClient") as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.initiate_multipart_upload.return_value = InitiateMultipartUploadResult(
                "bucket", "key", "UP1"
            )
            cli.main(["initiate", "bucket", "key"])
        assert capsys.readouterr().out.strip() == "UP1"
        request = client.initiate_multipart_upload.call_args.args[0]
        assert (request.bucket_name, request.key) == ("bucket", "key")

    def test_list_parts_output(self, capsys):
        """list-parts prints one line per part."""
        with mock.patch.object(cli, "OSSClient") as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.list_parts.return_value = PartListing(
                bucket_name="bucket",
                key="key",
                upload_id="u1",
                parts=(PartSummary(1, "e1", 10), PartSummary(2, "e2", 5)),
            )
            cli.main(["list-parts", "bucket", "key", "u1", "--max-parts", "2"])
        assert capsys.readouterr().out.splitlines() == ["1\t10\te1", "2\t5\te2"]
        assert client.list_parts.call_args.args[0].max_parts == 2

    def test_service_error_exits_1(self):
        """Operation failures exit with status 1."""
        with mock.patch.object(cli, "OSSClient") as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.abort_multipart_upload.side_effect = NoSuchUpload("NoSuchUpload", "gone", 404)
            with pytest.raises(SystemExit) as exc_info:
                cli.main(["abort", "bucket", "key", "u1"])
        assert exc_info.value.code == 1

    def test_missing_config_exits_1(self, tmp_path):
        """A missing config file exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--config", str(tmp_path / "missing.yaml"), "abort", "b", "k", "u"])
        assert exc_info.value.code == 1
