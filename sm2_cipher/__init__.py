from .api import SM2Service, decrypt, encrypt, generate_key_pair
from .crypto.errors import (
    DecryptionFailed,
    InvalidCiphertextLength,
    InvalidEncoding,
    InvalidKey,
    OperationFailed,
    PointAtInfinity,
    PointNotOnCurve,
    RngUnavailable,
    SM2Error,
)
from .crypto.utils import MODE_C1C2C3, MODE_C1C3C2
