import json

import pytest

from zkchacha import cli
from zkchacha.program import load_program

KEY_HEX = "42" * 32


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("ENCRYPTION_KEY", "ZKCHACHA_PROVER", "ZKCHACHA_HASH", "ZKCHACHA_INPUT", "ZKCHACHA_KEY_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENCRYPTION_KEY", KEY_HEX)
    return tmp_path


def _fail_run(*args, **kwargs):
    raise AssertionError("run must not be called")


@pytest.mark.parametrize("flags", [[], ["--execute", "--prove"]])
def test_mode_flags_are_exclusive(env, monkeypatch, flags):
    monkeypatch.setattr(cli, "run", _fail_run)

    assert cli.main(flags) == 1


def test_missing_key(env, monkeypatch):
    monkeypatch.delenv("ENCRYPTION_KEY")
    monkeypatch.setattr(cli, "run", _fail_run)

    assert cli.main(["--execute"]) == 1


def test_execute(env, capsys):
    plaintext = env / "plain.bin"
    plaintext.write_bytes(b"test")

    assert cli.main(["--execute", "--input", str(plaintext)]) == 0

    out = capsys.readouterr().out
    assert "Plaintext hash: 0x9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08" in out
    assert "Number of instructions:" in out
    assert KEY_HEX not in out


def test_execute_missing_input(env):
    assert cli.main(["--execute", "--input", str(env / "missing.bin")]) == 1


def test_prove_mock(env, capsys):
    proof_out = env / "proof.json"

    assert cli.main(["--prove", "--prover", "mock", "--hash", "keccak256", "--proof-out", str(proof_out)]) == 0

    out = capsys.readouterr().out
    assert "Program vkey: 0x" in out
    assert "Proof written to" in out

    data = json.loads(proof_out.read_text())
    assert data["hash_algorithm"] == "keccak256"
    assert data["proof"] == ""


def test_prove_mock_with_key_dir(env):
    key_dir = env / "keys"

    assert cli.main(["--prove", "--prover", "mock", "--key-dir", str(key_dir)]) == 0
    assert len(list(key_dir.iterdir())) == 2


def test_vkey(capsys):
    assert cli.vkey_main([]) == 0

    assert capsys.readouterr().out.strip() == load_program().bytes32()


def test_prove_recovers_from_corrupt_key_dir(env):
    key_dir = env / "keys"
    assert cli.main(["--prove", "--prover", "mock", "--key-dir", str(key_dir)]) == 0

    for path in key_dir.iterdir():
        if path.suffix == ".vk":
            path.write_bytes(b"garbage")

    assert cli.main(["--prove", "--prover", "mock", "--key-dir", str(key_dir)]) == 0


def test_unwritable_proof_out(env):
    proof_out = env / "no-such-dir" / "proof.json"

    assert cli.main(["--prove", "--prover", "mock", "--proof-out", str(proof_out)]) == 1
    assert not proof_out.exists()


def test_invalid_parallel_cpu(env, monkeypatch):
    monkeypatch.setenv("ZKCHACHA_PARALLEL_CPU", "many")

    assert cli.main(["--prove", "--key-dir", str(env / "keys")]) == 1


def test_help_warns_about_cpu_keys(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--help"])

    assert "forge" in capsys.readouterr().out
