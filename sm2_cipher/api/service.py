from concurrent.futures import ThreadPoolExecutor

from ..crypto.errors import InvalidEncoding, InvalidKey, PointNotOnCurve, SM2Error
from ..crypto.sm2 import COORD_LEN, POINT_LEN, SM2Math
from ..crypto.utils import MODE_C1C3C2, SM2Crypto, check_mode


def _decode_hex(value, what, length=None):
    if not isinstance(value, str):
        raise InvalidEncoding(f"{what} must be a hex string")
    try:
        raw = bytes.fromhex(value)
    except ValueError as e:
        raise InvalidEncoding(f"{what} is not valid hex: {e}") from e
    # fromhex tolerates whitespace; the wire format has none
    if len(value) != 2 * len(raw):
        raise InvalidEncoding(f"{what} must not contain separators")
    if length is not None and len(raw) != length:
        raise InvalidEncoding(
            f"{what} must be {length} bytes ({2 * length} hex chars), got {len(raw)}"
        )
    return raw


def parse_public_key(public_key_hex: str):
    raw = _decode_hex(public_key_hex, "Public key", POINT_LEN)
    try:
        return SM2Math.decode_point(raw)
    except PointNotOnCurve as e:
        raise InvalidKey(f"Invalid public key: {e}") from e


def parse_private_key(private_key_hex: str) -> int:
    raw = _decode_hex(private_key_hex, "Private key", COORD_LEN)
    d = SM2Math.bytes_to_int(raw)
    SM2Crypto.check_private_key(d)
    return d


def generate_key_pair():
    """
    Returns (private_key_hex, public_key_hex): 64 lowercase hex chars and
    130 lowercase hex chars starting with '04'.
    """
    d, Q = SM2Crypto.generate_keypair()
    return SM2Math.int_to_bytes(d).hex(), SM2Math.encode_point(Q).hex()


def encrypt(plaintext: bytes, public_key_hex: str, mode: str = MODE_C1C3C2) -> str:
    check_mode(mode)
    Q = parse_public_key(public_key_hex)
    return SM2Crypto.encrypt(bytes(plaintext), Q, mode).hex()


def decrypt(ciphertext_hex: str, private_key_hex: str) -> bytes:
    data = _decode_hex(ciphertext_hex, "Ciphertext")
    d = parse_private_key(private_key_hex)
    return SM2Crypto.decrypt(data, d)


class SM2Service:
    """
    SM2 encryption/decryption bound to a key pair.

    Usage:
        priv, pub = SM2Service.generate_key_pair()
        service = SM2Service(priv, pub)
        encrypted = service.encrypt("Hello, World!")
        assert service.decrypt(encrypted) == "Hello, World!"
    """

    DEFAULT_MODE = MODE_C1C3C2

    def __init__(self, private_key=None, public_key=None, mode=None):
        self.private_key = private_key
        self.public_key = public_key
        self.mode = mode or self.DEFAULT_MODE
        check_mode(self.mode)

    @staticmethod
    def generate_key_pair():
        return generate_key_pair()

    def encrypt(self, plaintext, public_key=None) -> str:
        pub_key = public_key or self.public_key
        if not pub_key:
            raise ValueError("Public key is required for encryption")
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        return encrypt(plaintext, pub_key, self.mode)

    def decrypt_bytes(self, ciphertext_hex: str) -> bytes:
        if not self.private_key:
            raise ValueError("Private key is required for decryption")
        return decrypt(ciphertext_hex, self.private_key)

    def decrypt(self, ciphertext_hex: str) -> str:
        return self.decrypt_bytes(ciphertext_hex).decode("utf-8")

    def encrypt_many(self, plaintexts, max_workers=None, public_key=None):
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(
                executor.map(lambda p: self.encrypt(p, public_key), plaintexts)
            )

    def decrypt_many(self, ciphertexts, max_workers=None):
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.decrypt_bytes, ciphertexts))

    @staticmethod
    def is_available() -> bool:
        """Round-trips a probe message through a fresh key pair."""
        try:
            priv, pub = generate_key_pair()
            probe = b"sm2-self-test"
            return decrypt(encrypt(probe, pub), priv) == probe
        except SM2Error:
            return False
