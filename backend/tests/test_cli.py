"""
Tests for the options CLI.
"""

from typer.testing import CliRunner

from options_api.cli import app

runner = CliRunner()


class TestCli:
    """Tests for options-cli commands"""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_entities(self, db_session, gender_service):
        gender_service.create_one({"name": "Female"})

        result = runner.invoke(app, ["entities"])

        assert result.exit_code == 0
        assert "gender_option" in result.output

    def test_purge_requires_confirmation(self, db_session):
        result = runner.invoke(app, ["purge", "gender_option"])

        assert result.exit_code == 1

    def test_purge_unknown_kind(self, db_session):
        result = runner.invoke(app, ["purge", "no_such_option", "--yes"])

        assert result.exit_code == 1

    def test_purge(self, db_session, gender_service):
        gender_service.create_many([{"name": "A"}, {"name": "B"}])

        result = runner.invoke(app, ["purge", "gender_option", "--yes"])

        assert result.exit_code == 0
        assert "Removed 2" in result.output
        assert gender_service.count(include_deleted=True) == 0

    def test_export_countries(self, db_session, country_service, rwanda, tmp_path):
        country_service.create_one(rwanda)
        target = tmp_path / "countries.xlsx"

        result = runner.invoke(app, ["export-countries", "--output", str(target)])

        assert result.exit_code == 0
        assert target.exists()

    def test_process_outbox(self, db_session, country_service, rwanda, tmp_path, monkeypatch):
        from shared.config.settings import settings

        monkeypatch.setattr(settings, "export_dir", tmp_path)
        country_service.create_one(rwanda)

        result = runner.invoke(app, ["process-outbox"])

        assert result.exit_code == 0
        assert "Published" in result.output
        assert (tmp_path / settings.export_filename).exists()
