"""Tests for the command line interface."""
from unittest.mock import patch

from rich.console import Console
from typer.testing import CliRunner

from cloudkit.cli.main import app, format_size
from cloudkit.providers import AliyunDriveProvider
from conftest import make_result, session_body
from test_aliyun_provider import DRIVE_INFO, RoutedTransport

runner = CliRunner()


def provider_factory(transport):
    def make(token, drive_id):
        from cloudkit import Credential
        return AliyunDriveProvider(Credential(access_token=token), drive_id=drive_id, transport=transport)
    return make


class TestFormatSize:
    """Test suite for format_size."""

    def test_units(self):
        """Test human readable sizes."""
        assert format_size(-1) == "-"
        assert format_size(512) == "512 B"
        assert format_size(2048) == "2.0 KB"
        assert format_size(10 * 1024 * 1024) == "10.0 MB"


class TestCommands:
    """Test suite for CLI commands."""

    def test_vendors(self):
        """Test the vendor table lists every vendor."""
        with patch("cloudkit.cli.main.console", Console(width=200)):
            result = runner.invoke(app, ["vendors"])

        assert result.exit_code == 0
        assert "aliyundrive" in result.output
        assert "premiumize" in result.output

    def test_token_required(self):
        """Test commands needing the API fail without a token."""
        result = runner.invoke(app, ["info"], env={"CLOUDKIT_ACCESS_TOKEN": None})

        assert result.exit_code != 0

    def test_info(self):
        """Test drive info output."""
        transport = RoutedTransport({'/adrive/v1.0/user/getDriveInfo': [make_result(200, DRIVE_INFO)]})

        with patch('cloudkit.cli.main.make_drive', provider_factory(transport)):
            result = runner.invoke(app, ["info", "--token", "t"])

        assert result.exit_code == 0
        assert "drive-default" in result.output

    def test_ls(self, sample_item_data):
        """Test listing prints item names."""
        transport = RoutedTransport({'/adrive/v1.0/openFile/list': [
            make_result(200, {'items': [sample_item_data], 'next_marker': ''}),
        ]})

        with patch('cloudkit.cli.main.make_drive', provider_factory(transport)):
            result = runner.invoke(app, ["ls", "--token", "t", "--drive", "drive-1"])

        assert result.exit_code == 0
        assert "report.pdf" in result.output

    def test_upload(self, make_file):
        """Test uploading reports the file id."""
        path = make_file(b'hello', name='hello.txt')
        transport = RoutedTransport({
            '/adrive/v1.0/openFile/create': [make_result(200, session_body(1))],
            '/adrive/v1.0/openFile/complete': [make_result(200, {'file_id': 'file-1', 'name': 'hello.txt'})],
        })

        with patch('cloudkit.cli.main.make_drive', provider_factory(transport)):
            result = runner.invoke(app, ["upload", str(path), "--token", "t", "--drive", "drive-1"])

        assert result.exit_code == 0
        assert "file-1" in result.output

    def test_upload_service_error(self, make_file):
        """Test vendor errors exit with status 1."""
        path = make_file(b'hello', name='hello.txt')
        transport = RoutedTransport({
            '/adrive/v1.0/openFile/create': [make_result(200, {'code': 'QuotaExhausted', 'message': 'drive full'})],
        })

        with patch('cloudkit.cli.main.make_drive', provider_factory(transport)):
            result = runner.invoke(app, ["upload", str(path), "--token", "t", "--drive", "drive-1"])

        assert result.exit_code == 1
        assert "drive full" in result.output
