from .errors import InvalidEncoding, PointAtInfinity, PointNotOnCurve

# SM2 Curve Parameters (sm2p256v1)
SM2_P = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFF
SM2_A = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFC
SM2_B = 0x28E9FA9E9D9F5E344D5A9E4BCF6509A7F39789F515AB8F92DDBCBD414D940E93
SM2_N = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFF7203DF6B21C6052B53BBF40939D54123
SM2_Gx = 0x32C4AE2C1F1981195F9904466A39C9948FE30BBFF2660BE1715A4589334C74C7
SM2_Gy = 0xBC3736A2F4F6779C59BDCEE36B692153D0A9877CC62A474002DF32E52139F0A0
SM2_H = 1

SM2_G = (SM2_Gx, SM2_Gy)

COORD_LEN = 32
POINT_LEN = 1 + 2 * COORD_LEN


class SM2Math:
    """
    Pure Python implementation of SM2 Elliptic Curve operations.

    Points are (x, y) tuples of ints; None is the point at infinity.
    """

    @staticmethod
    def inverse(a, n):
        return pow(a, n - 2, n)

    @staticmethod
    def is_on_curve(P):
        if P is None:
            return False
        x, y = P
        if not (0 <= x < SM2_P and 0 <= y < SM2_P):
            return False
        return (y * y - (x * x * x + SM2_A * x + SM2_B)) % SM2_P == 0

    @staticmethod
    def point_neg(P):
        if P is None:
            return None
        x, y = P
        return (x, (-y) % SM2_P)

    @staticmethod
    def point_double(P):
        if P is None:
            return None
        x1, y1 = P
        if y1 == 0:
            return None

        m = (3 * x1 * x1 + SM2_A) * SM2Math.inverse(2 * y1, SM2_P) % SM2_P
        x3 = (m * m - 2 * x1) % SM2_P
        y3 = (m * (x1 - x3) - y1) % SM2_P
        return (x3, y3)

    @staticmethod
    def point_add(P, Q):
        if P is None:
            return Q
        if Q is None:
            return P

        x1, y1 = P
        x2, y2 = Q

        if x1 == x2:
            if (y1 + y2) % SM2_P == 0:
                return None
            return SM2Math.point_double(P)

        m = (y2 - y1) * SM2Math.inverse((x2 - x1) % SM2_P, SM2_P) % SM2_P
        x3 = (m * m - x1 - x2) % SM2_P
        y3 = (m * (x1 - x3) - y1) % SM2_P
        return (x3, y3)

    @staticmethod
    def point_mul(k, P):
        """Scalar multiplication: k * P. Returns None for the point at infinity."""
        k = k % SM2_N
        if k == 0 or P is None:
            return None
        R = None
        for i in range(k.bit_length() - 1, -1, -1):
            R = SM2Math.point_double(R)
            if (k >> i) & 1:
                R = SM2Math.point_add(R, P)
        return R

    @staticmethod
    def bytes_to_int(b):
        return int.from_bytes(b, "big")

    @staticmethod
    def int_to_bytes(i, length=COORD_LEN):
        return i.to_bytes(length, "big")

    @staticmethod
    def encode_point(P):
        """Encodes to the 65-byte uncompressed form 0x04 || X || Y"""
        if P is None:
            raise PointAtInfinity("Cannot encode the point at infinity")
        x, y = P
        return b"\x04" + SM2Math.int_to_bytes(x) + SM2Math.int_to_bytes(y)

    @staticmethod
    def decode_point(b):
        """Decodes an uncompressed point and checks it against the curve equation"""
        if len(b) != POINT_LEN:
            raise InvalidEncoding(
                f"Point must be {POINT_LEN} bytes, got {len(b)}"
            )
        if b[0] != 0x04:
            # Compressed points never appear in SM2 ciphertext or key hex here
            raise InvalidEncoding(f"Unsupported point format: 0x{b[0]:02x}")

        x = SM2Math.bytes_to_int(b[1 : 1 + COORD_LEN])
        y = SM2Math.bytes_to_int(b[1 + COORD_LEN :])
        P = (x, y)
        if not SM2Math.is_on_curve(P):
            raise PointNotOnCurve("Point is not on the SM2 curve")
        return P
