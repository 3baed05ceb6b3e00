class SM2Error(Exception):
    """Base class for every failure raised by the SM2 engine."""


class InvalidEncoding(SM2Error, ValueError):
    """Malformed hex, wrong length or wrong prefix for a key or point."""


class PointNotOnCurve(SM2Error):
    pass


class PointAtInfinity(SM2Error):
    pass


class InvalidKey(SM2Error):
    """Key material that is well-formed but unusable (off-curve point, scalar out of range)."""


class InvalidCiphertextLength(SM2Error):
    pass


class DecryptionFailed(SM2Error):
    pass


class OperationFailed(SM2Error):
    pass


class RngUnavailable(SM2Error):
    pass
