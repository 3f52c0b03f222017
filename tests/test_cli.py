import json

from truesign_auth.cli import main

from conftest import IV, KEY


def _output(capsys) -> dict:
    return json.loads(capsys.readouterr().out)


def test_mint_then_decrypt(capsys, claims):
    assert main(["--key", KEY, "mint", json.dumps(claims), "--iv", IV]) == 0
    minted = _output(capsys)
    assert minted["ok"] is True
    assert minted["token"].startswith(IV)

    assert main(["--key", KEY, "decrypt", minted["token"]]) == 0
    decrypted = _output(capsys)["token"]
    assert decrypted["country"] == "ES"
    assert decrypted["schema"] == "ordinal"
    assert decrypted["email"] == {
        "address": "jane@example.com",
        "disposable": False,
        "not_deliverable": False,
        "typo": None,
        "fake": False,
    }
    assert decrypted["ip"] == {"ipv4": "203.0.113.7", "ipv6": None}


def test_key_from_env(monkeypatch, capsys, claims):
    monkeypatch.setenv("TRUESIGN_ENCRYPTION_KEY", KEY)
    assert main(["mint", json.dumps(claims)]) == 0
    token = _output(capsys)["token"]

    assert main(["decrypt", token, "--schema", "boolean"]) == 0
    assert _output(capsys)["token"]["schema"] == "boolean"


def test_decrypt_failure(capsys):
    assert main(["--key", KEY, "decrypt", "not-a-token"]) == 1
    out = _output(capsys)
    assert out == {"ok": False, "error": "Token could not be decrypted"}


def test_missing_key(monkeypatch, capsys):
    monkeypatch.delenv("TRUESIGN_ENCRYPTION_KEY", raising=False)
    assert main(["decrypt", "whatever"]) == 1
    assert _output(capsys)["ok"] is False


def test_mint_rejects_non_object(capsys):
    assert main(["--key", KEY, "mint", "[1, 2]"]) == 1
    assert _output(capsys)["ok"] is False


def test_key_after_subcommand(monkeypatch, capsys, claims):
    monkeypatch.delenv("TRUESIGN_ENCRYPTION_KEY", raising=False)

    assert main(["mint", json.dumps(claims), "--key", KEY, "--iv", IV]) == 0
    token = _output(capsys)["token"]
    assert token.startswith(IV)

    assert main(["decrypt", token, "-k", KEY]) == 0
    assert _output(capsys)["token"]["country"] == "ES"


def test_key_before_subcommand_is_kept(monkeypatch, capsys, claims):
    monkeypatch.delenv("TRUESIGN_ENCRYPTION_KEY", raising=False)

    assert main(["--key", KEY, "mint", json.dumps(claims), "--iv", IV]) == 0
    assert _output(capsys)["ok"] is True
