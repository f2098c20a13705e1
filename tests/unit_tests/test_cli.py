import pytest
from click.testing import CliRunner

from content_api.cli import cli
from content_api.config.settings import get_settings


@pytest.fixture
def cli_env(tmp_path, seed_file, monkeypatch):
    monkeypatch.setenv("PERSISTENT_DISK_PATH", str(tmp_path / "disk"))
    monkeypatch.setenv("LOCAL_STORAGE_DIR", str(tmp_path / "local"))
    monkeypatch.setenv("SEED_FILE_PATH", str(seed_file))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_where__reports_seeded_read(cli_env):
    result = CliRunner().invoke(cli, ["where"])

    assert result.exit_code == 0
    assert "local fallback" in result.output
    assert "Read outcome: seeded (2 service(s))" in result.output


def test_translate__without_translator_reports_failures(cli_env):
    result = CliRunner().invoke(cli, ["translate"])

    assert result.exit_code == 0
    assert "Translated 2 service(s)" in result.output
    assert "TRANSLATOR_URL is not set" in result.output


def test_translate__unknown_service(cli_env):
    result = CliRunner().invoke(cli, ["translate", "--id", "nope"])

    assert result.exit_code != 0
    assert "Service not found" in result.output


def test_where__does_not_create_the_data_file(cli_env):
    CliRunner().invoke(cli, ["where"])

    assert not (cli_env / "local" / "services-data.json").exists()
