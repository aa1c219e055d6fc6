# tests/test_cli.py
"""keyring-tlv command line tests."""

from keyring_tlv.algorithms import ChaCha20Poly1305, Curve25519
from keyring_tlv.cli import main


CURVE_HEX = Curve25519(bytes([6] * 32)).pack().hex()


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out.strip(), err


def test_derive(capsys):
    code, out, _ = run(capsys, "derive", "spl_keyring_program:keystore_entry")
    assert code == 0
    assert out == "1634f21fc1351af3"


def test_encode_curve25519(capsys):
    code, out, _ = run(capsys, "encode", "curve25519", "06" * 32)
    assert code == 0
    assert out == CURVE_HEX


def test_encode_chacha(capsys):
    code, out, _ = run(
        capsys, "encode", "chacha20-poly1305", "08" * 32,
        "--nonce", "01" * 12, "--aad", "02" * 12,
    )
    expected = ChaCha20Poly1305(bytes([8] * 32), bytes([1] * 12), bytes([2] * 12))
    assert code == 0
    assert out == expected.pack().hex()


def test_encode_missing_config(capsys):
    code, _, err = run(capsys, "encode", "chacha20-poly1305", "08" * 32)
    assert code == 1
    assert "error:" in err


def test_add_and_inspect(capsys):
    code, out, _ = run(capsys, "add", "-", CURVE_HEX)
    assert code == 0
    assert out == CURVE_HEX

    code, out, _ = run(capsys, "inspect", out)
    assert code == 0
    assert "1 record(s), 57 bytes" in out
    assert "key:curve25519" in out


def test_remove(capsys):
    code, out, _ = run(capsys, "remove", CURVE_HEX + CURVE_HEX, CURVE_HEX)
    assert code == 0
    assert out == ""


def test_remove_from_empty(capsys):
    code, _, err = run(capsys, "remove", "-", CURVE_HEX)
    assert code == 1
    assert "Keystore entry not found" in err


def test_inspect_malformed(capsys):
    code, _, err = run(capsys, "inspect", "00" * 20)
    assert code == 1
    assert "Invalid format for keystore entry: Entry" in err
