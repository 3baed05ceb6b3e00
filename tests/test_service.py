import pytest

from sm2_cipher import (
    MODE_C1C2C3,
    DecryptionFailed,
    InvalidCiphertextLength,
    InvalidEncoding,
    InvalidKey,
    SM2Service,
    decrypt,
    encrypt,
    generate_key_pair,
)
from sm2_cipher.crypto.sm2 import SM2_N
from sm2_cipher.crypto.utils import SM2Crypto


def test_hello_world_scenario(keypair):
    private_key, public_key = keypair
    plaintext = "Hello, World!"

    first = encrypt(plaintext.encode("utf-8"), public_key)
    second = encrypt(plaintext.encode("utf-8"), public_key)

    assert len(bytes.fromhex(first)) >= 97
    assert first == first.lower()
    assert first != second
    assert decrypt(first, private_key).decode("utf-8") == plaintext
    assert decrypt(second, private_key).decode("utf-8") == plaintext


def test_length_scenario(keypair):
    private_key, public_key = keypair
    plaintext = b"X" * 1024
    ciphertext = bytes.fromhex(encrypt(plaintext, public_key, MODE_C1C2C3))
    assert len(ciphertext[65:-32]) == 1024
    assert decrypt(ciphertext.hex(), private_key) == plaintext


def test_empty_plaintext(keypair):
    private_key, public_key = keypair
    ciphertext = encrypt(b"", public_key)
    assert len(ciphertext) == 2 * 97
    assert decrypt(ciphertext, private_key) == b""


@pytest.mark.parametrize("plaintext", [b" ", b"   \t\n"])
def test_whitespace_plaintext(keypair, plaintext):
    private_key, public_key = keypair
    assert decrypt(encrypt(plaintext, public_key), private_key) == plaintext


def test_uppercase_hex_is_accepted(keypair):
    private_key, public_key = keypair
    ciphertext = encrypt(b"case", public_key.upper())
    assert decrypt(ciphertext.upper(), private_key.upper()) == b"case"


@pytest.mark.parametrize(
    "public_key",
    ["", "04", "zz" * 65, "04" + "00" * 63, "04" + "00" * 65, "04 " + "00" * 64],
)
def test_malformed_public_key(public_key):
    with pytest.raises(InvalidEncoding):
        encrypt(b"data", public_key)


def test_off_curve_public_key(keypair):
    _, public_key = keypair
    last = int(public_key[-2:], 16) ^ 1
    with pytest.raises(InvalidKey):
        encrypt(b"data", public_key[:-2] + f"{last:02x}")


def test_public_key_with_wrong_prefix(keypair):
    _, public_key = keypair
    with pytest.raises(InvalidEncoding):
        encrypt(b"data", "03" + public_key[2:])


@pytest.mark.parametrize("private_key", ["", "abc", "00" * 31, "00" * 33, "g" * 64])
def test_malformed_private_key(keypair, private_key):
    _, public_key = keypair
    ciphertext = encrypt(b"data", public_key)
    with pytest.raises(InvalidEncoding):
        decrypt(ciphertext, private_key)


@pytest.mark.parametrize("d", [0, SM2_N])
def test_private_key_out_of_range(keypair, d):
    _, public_key = keypair
    ciphertext = encrypt(b"data", public_key)
    with pytest.raises(InvalidKey):
        decrypt(ciphertext, f"{d:064x}")


def test_malformed_ciphertext_hex(keypair):
    private_key, _ = keypair
    with pytest.raises(InvalidEncoding):
        decrypt("abc", private_key)
    with pytest.raises(InvalidEncoding):
        decrypt("xy" * 100, private_key)


def test_short_ciphertext_hex(keypair):
    private_key, _ = keypair
    with pytest.raises(InvalidCiphertextLength):
        decrypt("04" * 96, private_key)


def test_encrypt_rejects_unknown_mode(keypair):
    _, public_key = keypair
    with pytest.raises(ValueError):
        encrypt(b"data", public_key, "C3C2C1")


def test_service_round_trip_unicode(keypair):
    private_key, public_key = keypair
    service = SM2Service(private_key, public_key)
    text = "Hello, 世界! 🌍"
    assert service.decrypt(service.encrypt(text)) == text


def test_service_encrypt_with_explicit_key(keypair):
    private_key, public_key = keypair
    service = SM2Service(private_key)
    assert service.decrypt(service.encrypt("explicit", public_key)) == "explicit"


def test_service_mode_is_used(keypair):
    private_key, public_key = keypair
    service = SM2Service(private_key, public_key, mode=MODE_C1C2C3)
    data = bytes.fromhex(service.encrypt(b"mode"))
    assert len(data) == 65 + 4 + 32
    assert SM2Crypto._try_decrypt(data, int(private_key, 16), MODE_C1C2C3) == b"mode"
    assert service.decrypt_bytes(data.hex()) == b"mode"


def test_service_requires_keys():
    with pytest.raises(ValueError):
        SM2Service().encrypt("no key")
    with pytest.raises(ValueError):
        SM2Service().decrypt("00" * 97)


def test_service_rejects_unknown_mode():
    with pytest.raises(ValueError):
        SM2Service(mode="C2C3C1")


def test_service_wrong_key(keypair):
    _, public_key = keypair
    other_private, _ = generate_key_pair()
    ciphertext = SM2Service(public_key=public_key).encrypt("secret")
    with pytest.raises(DecryptionFailed):
        SM2Service(other_private).decrypt(ciphertext)


def test_service_batches_preserve_order(keypair):
    private_key, public_key = keypair
    service = SM2Service(private_key, public_key)
    messages = [f"message {i}".encode() for i in range(6)]

    ciphertexts = service.encrypt_many(messages, max_workers=3)
    assert len(set(ciphertexts)) == len(messages)
    assert service.decrypt_many(ciphertexts, max_workers=3) == messages


def test_service_is_available():
    assert SM2Service.is_available()


def test_static_key_generation():
    private_key, public_key = SM2Service.generate_key_pair()
    assert len(private_key) == 64
    assert len(public_key) == 130
