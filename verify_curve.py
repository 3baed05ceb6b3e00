from sm2_cipher.crypto.sm2 import SM2Math, SM2_G, SM2_N, SM2_P
from sm2_cipher.crypto.utils import SM2Crypto

# SM3("abc") from GB/T 32905 Appendix A
sm3_abc_expected = "66c7f0f462eeedd9d1f2d46bdc10e4e24167c4875cf2f7a2297da02b8f4ba8e0"


def check(label, ok, calc=None, expected=None):
    if ok:
        print(f"[PASS] {label}")
        return True
    print(f"[FAIL] {label}")
    if calc is not None:
        print(f"  Calc: {calc}")
        print(f"  Exp:  {expected}")
    return False


def verify_domain():
    print("[-] Verifying sm2p256v1 domain parameters...")
    results = [
        check("G is on the curve", SM2Math.is_on_curve(SM2_G)),
        check("n * G is the point at infinity", SM2Math.point_mul(SM2_N, SM2_G) is None),
        check("p is 256 bits", SM2_P.bit_length() == 256),
    ]

    Gm = SM2Math.point_mul(SM2_N - 1, SM2_G)
    results.append(check("(n - 1) * G == -G", Gm == SM2Math.point_neg(SM2_G), Gm, SM2Math.point_neg(SM2_G)))
    return all(results)


def verify_sm3():
    print("\n[-] Verifying SM3 provider...")
    calc = SM2Crypto.sm3_hash(b"abc").hex()
    return check("SM3('abc') matches", calc == sm3_abc_expected, calc, sm3_abc_expected)


def verify_round_trip():
    print("\n[-] Verifying encrypt/decrypt round trip...")
    d, Q = SM2Crypto.generate_keypair()
    message = b"Hello, World!"
    ok = True
    for mode in ("C1C3C2", "C1C2C3"):
        data = SM2Crypto.encrypt(message, Q, mode).to_bytes()
        plain = SM2Crypto.decrypt(data, d)
        ok &= check(f"{mode} round trip", plain == message, plain, message)
    return ok


if __name__ == "__main__":
    passed = verify_domain() & verify_sm3() & verify_round_trip()
    raise SystemExit(0 if passed else 1)
