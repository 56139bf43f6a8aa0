from math    import floor
from random  import randint
from time    import time
from hashlib import sha256
from decimal import Decimal, ROUND_HALF_UP

from transaction.cubic       import Cubic
from transaction.interpolate import interpolate, convert_rotation_to_matrix
from transaction.encoding    import float_to_hex, is_odd, base64_encode
from transaction.extractor   import get_key, get_key_bytes, get_frame
from transaction.errors      import IndicesNotFoundError, InvalidFrameError, NotInitializedError
from observability           import get_logger, metrics

logger = get_logger(__name__)

EPOCH_OFFSET_MS = 1682924400000
TOTAL_TIME = 4096
DEFAULT_KEYWORD = "obfiowerehiring"
ADDITIONAL_RANDOM_NUMBER = 3
ANIMATION_KEY_SUFFIX = "00"

# 3 colour values, 3 more colour values, 1 rotation, 4 curve controls
CURVE_OFFSET = 7
MIN_ANIMATION_FRAME = CURVE_OFFSET + 4


def solve_value(value, min_value, max_value, rounding):
    result = (value * (max_value - min_value)) / 255 + min_value
    return floor(result) if rounding else _to_fixed(result, 2)


def _to_fixed(value, digits):
    # Ties round away from zero on the exact binary value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _js_round(value):
    return floor(value + 0.5)


def get_frame_time(key_bytes, key_byte_indices):
    frame_time = 1
    for index in key_byte_indices:
        if index >= len(key_bytes):
            raise IndicesNotFoundError(f"Invalid key byte at index {index}")
        frame_time *= key_bytes[index] % 16
    return frame_time


def animate(frame, target_time):
    if len(frame) < MIN_ANIMATION_FRAME:
        raise InvalidFrameError(
            f"Invalid frame: expected at least {MIN_ANIMATION_FRAME} values, got {len(frame)}"
        )

    from_color = [value / 255 for value in frame[0:3]]
    to_color = [value / 255 for value in frame[3:6]]
    from_rotation = [0.0]
    to_rotation = [solve_value(frame[6], 60, 360, True)]

    curves = [solve_value(value, is_odd(i), 1, False) for i, value in enumerate(frame[CURVE_OFFSET:])]
    val = Cubic(curves).get_value(target_time)

    color = [max(0, channel) for channel in interpolate(from_color, to_color, val)]
    rotation = interpolate(from_rotation, to_rotation, val)
    matrix = convert_rotation_to_matrix(rotation[0])

    hex_color = "".join(format(_js_round(channel), "02x") for channel in color[:3])
    hex_matrix = "".join(float_to_hex(abs(value)) for value in matrix)

    return f"{hex_color}{hex_matrix}{ANIMATION_KEY_SUFFIX}"


def get_animation_key(key_bytes, indices, document):
    """
    Reduce the animation frame selected by ``key_bytes`` to the animation key.

    Args:
        key_bytes: Decoded site verification key
        indices: ``IndexSet`` read from the on-demand script
        document: Parsed home page holding the ``loading-x-anim`` frames

    Returns:
        Colour hex, rotation matrix hex and the ``00`` suffix, concatenated
    """
    if indices.row_index >= len(key_bytes):
        raise IndicesNotFoundError(f"Invalid row index {indices.row_index}")

    # Read for parity with the web client, the animation does not consume it
    row_index = key_bytes[indices.row_index] % 16
    frame_time = get_frame_time(key_bytes, indices.key_byte_indices)
    target_time = frame_time / TOTAL_TIME
    logger.debug(
        f"Animation row_index={row_index} frame_time={frame_time}",
        extra={"row_index": row_index, "frame_time": frame_time}
    )

    frame = get_frame(key_bytes, document)
    return animate(frame, target_time)


def generate_transaction_id(
    method,
    path,
    session=None,
    document=None,
    indices=None,
    key=None,
    animation_key=None,
    time_now=None,
    random_byte=None
):
    """
    Sign ``method`` and ``path`` into an ``X-Client-Transaction-Id`` value.

    Cached values come from ``session``; ``key`` and ``animation_key`` override
    them. Anything still missing is derived from ``document`` (and ``indices``
    for the animation key). ``time_now`` and ``random_byte`` pin the two
    per-call inputs.

    Raises:
        NotInitializedError: If a prerequisite is missing and cannot be derived
    """
    now = time_now if time_now is not None else floor((int(time() * 1000) - EPOCH_OFFSET_MS) / 1000)
    time_bytes = [(now >> (i * 8)) & 0xFF for i in range(4)]

    if key is not None:
        key_bytes = get_key_bytes(key)
    elif session is not None:
        key_bytes = list(session.key_material.key_bytes)
    elif document is not None:
        key_bytes = get_key_bytes(get_key(document))
    else:
        raise NotInitializedError("No key available: initialize a session or pass the home page document")

    if animation_key is None and session is not None:
        animation_key = session.animation_key
    if animation_key is None:
        if indices is None and session is not None:
            indices = session.indices
        if document is None or indices is None:
            raise NotInitializedError(
                "No animation key available: initialize a session or pass the document and indices"
            )
        animation_key = get_animation_key(key_bytes, indices, document)

    message = f"{method}!{path}!{now}{DEFAULT_KEYWORD}{animation_key}"
    hash_bytes = sha256(message.encode("utf-8")).digest()

    random_num = randint(0, 255) if random_byte is None else random_byte
    byte_array = bytes([
        random_num,
        *[byte ^ random_num for byte in key_bytes],
        *time_bytes,
        *hash_bytes[:16],
        ADDITIONAL_RANDOM_NUMBER,
    ])

    metrics.record_transaction_id(method)
    return base64_encode(byte_array).rstrip("=")
