from math import cos, sin, pi

from transaction.errors import InterpolationError


def interpolate(from_list, to_list, f):
    if len(from_list) != len(to_list):
        raise InterpolationError(f"Mismatched interpolation arguments {from_list}: {to_list}")
    return [_interpolate_value(from_val, to_val, f) for from_val, to_val in zip(from_list, to_list)]


def _interpolate_value(from_val, to_val, f):
    # bool is an int subclass, test it first
    if isinstance(from_val, bool) and isinstance(to_val, bool):
        return from_val if f < 0.5 else to_val

    if _is_number(from_val) and _is_number(to_val):
        return from_val * (1 - f) + to_val * f

    raise InterpolationError(
        f"Unsupported interpolation types: {type(from_val).__name__}, {type(to_val).__name__}"
    )


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def convert_rotation_to_matrix(rotation):
    radians = rotation * pi / 180
    cosv = cos(radians)
    sinv = sin(radians)
    return [cosv, -sinv, sinv, cosv]


def convert_rotation_to_extended_matrix(degrees):
    """Six entry form, as written in a CSS ``matrix(...)`` transform."""
    radians = degrees * pi / 180
    cosv = cos(radians)
    sinv = sin(radians)
    return [cosv, sinv, -sinv, cosv, 0, 0]
