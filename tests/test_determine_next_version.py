import importlib.util
import pathlib

import pytest

SCRIPT = pathlib.Path(__file__).resolve().parents[1] / "scripts" / "determine_next_version.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("determine_next_version", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_usage_on_wrong_arguments(script, capsys):
    assert script.main(["owner/repo"]) == 1
    assert "Usage: determine_next_version.py" in capsys.readouterr().err


def test_missing_token(script, monkeypatch, capsys):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    assert script.main(["owner/repo", "refs/heads/main"]) == 1
    err = capsys.readouterr().err
    assert "GITHUB_TOKEN is not set" in err
    assert "Usage:" in err


def test_bad_repository_is_reported(script, monkeypatch, capsys):
    monkeypatch.setenv("GITHUB_TOKEN", "tok")
    assert script.main(["just-a-name", "refs/heads/main"]) == 1
    assert "owner/name" in capsys.readouterr().err


def test_prints_new_version(script, monkeypatch, capsys):
    monkeypatch.setenv("GITHUB_TOKEN", "tok")

    async def fake_determine(token, repository, target, sha):
        assert (token, repository, target, sha) == ("tok", "owner/repo", "refs/heads/dev", "abc")
        return "1.3.0-abc"

    monkeypatch.setattr(script, "determine", fake_determine)
    assert script.main(["owner/repo", "refs/heads/dev", "abc"]) == 0
    assert capsys.readouterr().out == "1.3.0-abc\n"
