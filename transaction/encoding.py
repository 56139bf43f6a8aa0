from math     import floor
from base64   import b64encode, b64decode
from binascii import Error as BinasciiError


def float_to_hex(x):
    """
    Hex encode a non-negative float, fractional digits included.

    ``1.5`` becomes ``"1.8"``, ``0.25`` becomes ``".4"`` and ``0`` becomes
    an empty string. Digits above 9 are upper case.
    """
    result = []
    quotient = floor(x)
    fraction = x - quotient

    while quotient > 0:
        remainder = quotient % 16
        result.insert(0, _hex_digit(remainder))
        quotient //= 16

    if fraction == 0:
        return "".join(result)

    result.append(".")

    while fraction > 0:
        fraction *= 16
        integer = floor(fraction)
        fraction -= integer
        result.append(_hex_digit(integer))

    return "".join(result)


def _hex_digit(value):
    return chr(value + 55) if value > 9 else str(value)


def is_odd(num):
    return -1.0 if num % 2 else 0.0


def base64_encode(data):
    if isinstance(data, str):
        data = data.encode("utf-8")
    return b64encode(bytes(data)).decode("ascii")


def base64_decode(text):
    """Decode base64 to text, or return the UTF-8 bytes of ``text`` when it is not base64."""
    try:
        raw = b64decode(text, validate=True)
    except (BinasciiError, ValueError):
        return list(text.encode("utf-8"))
    return raw.decode("utf-8", errors="replace")
