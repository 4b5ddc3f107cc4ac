"""Tests for the folio command line."""

import pytest

from folio.cli import main


def _write_env(tmp_path) -> str:
    path = tmp_path / ".env"
    path.write_text(
        "ADMIN_EMAIL=admin@example.com\nADMIN_PASSWORD=correct-horse\nSECRET_KEY=test-secret\n"
    )
    return str(path)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ("ADMIN_EMAIL", "ADMIN_PASSWORD", "SECRET_KEY"):
        monkeypatch.delenv(key, raising=False)


class TestCLI:
    def test_no_command_prints_help(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "folio" in capsys.readouterr().out

    def test_routes(self, tmp_path, capsys) -> None:
        main(["--env", _write_env(tmp_path), "routes"])
        out = capsys.readouterr().out
        assert "METHOD" in out
        assert "/admin/messages/{id}/toggle-read" in out
        assert out.index("/contact") < out.index("/login")

    def test_missing_env_file(self, tmp_path, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--env", str(tmp_path / "missing.env"), "routes"])
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_migrate(self, tmp_path, capsys) -> None:
        main(["--env", _write_env(tmp_path), "migrate"])
        assert "001_create_messages_table" in capsys.readouterr().out
        assert (tmp_path / "database" / "database.sqlite").is_file()

        main(["--env", _write_env(tmp_path), "migrate"])
        assert "Already up to date" in capsys.readouterr().out

    def test_hash_password(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("getpass.getpass", lambda prompt="": "correct-horse")
        main(["hash-password"])
        assert capsys.readouterr().out.startswith("$argon2id$")

    def test_hash_password_mismatch(self, monkeypatch, capsys) -> None:
        answers = iter(["correct-horse", "other-horse"])
        monkeypatch.setattr("getpass.getpass", lambda prompt="": next(answers))
        with pytest.raises(SystemExit):
            main(["hash-password"])
        assert "do not match" in capsys.readouterr().err
