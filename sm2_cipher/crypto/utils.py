import hmac
import secrets
import sys
from typing import NamedTuple, Optional

from .errors import (
    DecryptionFailed,
    InvalidCiphertextLength,
    InvalidKey,
    OperationFailed,
    RngUnavailable,
    SM2Error,
)
from .sm2 import COORD_LEN, POINT_LEN, SM2_G, SM2_N, SM2Math

# Using gmssl for SM3
try:
    from gmssl import sm3, func
except ImportError:
    print("Error: gmssl not installed. Please run: pip install gmssl")
    sys.exit(1)

MODE_C1C2C3 = "C1C2C3"
MODE_C1C3C2 = "C1C3C2"
MODES = (MODE_C1C3C2, MODE_C1C2C3)

DIGEST_LEN = 32
MIN_CIPHERTEXT_LEN = POINT_LEN + DIGEST_LEN

# Retries for degenerate ephemeral keys during encryption
MAX_ATTEMPTS = 10


class Ciphertext(NamedTuple):
    c1: bytes
    c2: bytes
    c3: bytes
    mode: str = MODE_C1C3C2

    def to_bytes(self) -> bytes:
        if self.mode == MODE_C1C2C3:
            return self.c1 + self.c2 + self.c3
        return self.c1 + self.c3 + self.c2

    def hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_bytes(cls, data: bytes, mode: str = MODE_C1C3C2) -> "Ciphertext":
        """Splits raw ciphertext by layout. Does not validate C1."""
        check_mode(mode)
        if len(data) < MIN_CIPHERTEXT_LEN:
            raise InvalidCiphertextLength(
                f"Ciphertext must be at least {MIN_CIPHERTEXT_LEN} bytes, got {len(data)}"
            )
        c1, rest = data[:POINT_LEN], data[POINT_LEN:]
        if mode == MODE_C1C2C3:
            return cls(c1, rest[:-DIGEST_LEN], rest[-DIGEST_LEN:], mode)
        return cls(c1, rest[DIGEST_LEN:], rest[:DIGEST_LEN], mode)


def check_mode(mode: str):
    if mode not in MODES:
        raise ValueError(f"Unknown encoding mode: {mode!r} (expected one of {MODES})")


class SM2Crypto:
    @staticmethod
    def sm3_hash(data: bytes) -> bytes:
        data_list = func.bytes_to_list(data)
        hex_digest = sm3.sm3_hash(data_list)
        return bytes.fromhex(hex_digest)

    @staticmethod
    def xor_bytes(b1: bytes, b2: bytes) -> bytes:
        return bytes(x ^ y for x, y in zip(b1, b2))

    @staticmethod
    def kdf(z: bytes, klen: int) -> bytes:
        """
        Counter mode KDF: H(Z || ct) for ct = 1, 2, ... (32-bit big-endian),
        concatenated and cut to klen bytes.
        """
        if klen < 0:
            raise ValueError("klen must be non-negative")
        out = bytearray()
        ct = 1
        while len(out) < klen:
            out += SM2Crypto.sm3_hash(z + ct.to_bytes(4, "big"))
            ct += 1
        return bytes(out[:klen])

    @staticmethod
    def is_all_zero(t: bytes) -> bool:
        # An empty keystream masks nothing, so it is not degenerate
        return len(t) > 0 and not any(t)

    @staticmethod
    def random_scalar() -> int:
        """Uniform scalar in [1, n-1] by rejection sampling over 256-bit draws"""
        span = SM2_N - 1
        limit = (1 << 256) - ((1 << 256) % span)
        while True:
            try:
                raw = secrets.token_bytes(COORD_LEN)
            except (OSError, NotImplementedError) as e:
                raise RngUnavailable(f"Secure random source unavailable: {e}") from e
            r = SM2Math.bytes_to_int(raw)
            if r < limit:
                return r % span + 1

    @staticmethod
    def generate_keypair():
        d = SM2Crypto.random_scalar()
        Q = SM2Math.point_mul(d, SM2_G)
        return d, Q

    @staticmethod
    def check_private_key(d: int):
        if not 1 <= d <= SM2_N - 1:
            raise InvalidKey("Private key scalar out of range [1, n-1]")

    @staticmethod
    def check_public_key(Q):
        if Q is None or not SM2Math.is_on_curve(Q):
            raise InvalidKey("Public key is not a valid point on the SM2 curve")

    @staticmethod
    def shared_secret_bytes(S) -> tuple:
        x2, y2 = S
        return SM2Math.int_to_bytes(x2), SM2Math.int_to_bytes(y2)

    @staticmethod
    def encrypt(plaintext: bytes, public_key, mode: str = MODE_C1C3C2) -> Ciphertext:
        check_mode(mode)
        SM2Crypto.check_public_key(public_key)

        for _ in range(MAX_ATTEMPTS):
            k = SM2Crypto.random_scalar()

            C1 = SM2Math.point_mul(k, SM2_G)
            if C1 is None:
                continue

            S = SM2Math.point_mul(k, public_key)
            if S is None:
                continue

            x2, y2 = SM2Crypto.shared_secret_bytes(S)
            t = SM2Crypto.kdf(x2 + y2, len(plaintext))
            if SM2Crypto.is_all_zero(t):
                continue

            c2 = SM2Crypto.xor_bytes(plaintext, t)
            c3 = SM2Crypto.sm3_hash(x2 + plaintext + y2)
            return Ciphertext(SM2Math.encode_point(C1), c2, c3, mode)

        raise OperationFailed(f"SM2 encryption failed after {MAX_ATTEMPTS} attempts")

    @staticmethod
    def _try_decrypt(data: bytes, d: int, mode: str) -> Optional[bytes]:
        """One layout attempt. Returns the plaintext, or None on any failure."""
        ct = Ciphertext.from_bytes(data, mode)

        try:
            C1 = SM2Math.decode_point(ct.c1)
        except SM2Error:
            return None

        S = SM2Math.point_mul(d, C1)
        if S is None:
            return None

        x2, y2 = SM2Crypto.shared_secret_bytes(S)
        t = SM2Crypto.kdf(x2 + y2, len(ct.c2))
        if SM2Crypto.is_all_zero(t):
            return None

        plaintext = SM2Crypto.xor_bytes(ct.c2, t)
        mac = SM2Crypto.sm3_hash(x2 + plaintext + y2)
        if not hmac.compare_digest(mac, ct.c3):
            return None
        return plaintext

    @staticmethod
    def decrypt(data: bytes, d: int) -> bytes:
        """Tries C1C3C2 first, then C1C2C3."""
        if len(data) < MIN_CIPHERTEXT_LEN:
            raise InvalidCiphertextLength(
                f"Ciphertext must be at least {MIN_CIPHERTEXT_LEN} bytes, got {len(data)}"
            )
        SM2Crypto.check_private_key(d)

        for mode in MODES:
            plaintext = SM2Crypto._try_decrypt(data, d, mode)
            if plaintext is not None:
                return plaintext

        raise DecryptionFailed("SM2 decryption failed with both C1C3C2 and C1C2C3 modes")
