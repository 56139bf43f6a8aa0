"""Cubic Bezier timing function, extrapolated linearly outside [0, 1]."""

TOLERANCE = 0.00001
MAX_ITERATIONS = 64

# curves = (x1, y1, x2, y2); the first rule whose condition holds supplies
# the gradient, no match means a flat gradient.
START_GRADIENT_RULES = (
    (lambda c: c[0] > 0.0, lambda c: c[1] / c[0]),
    (lambda c: c[1] == 0.0 and c[2] > 0.0, lambda c: c[3] / c[2]),
)

END_GRADIENT_RULES = (
    (lambda c: c[2] < 1.0, lambda c: (c[3] - 1.0) / (c[2] - 1.0)),
    (lambda c: c[2] == 1.0 and c[0] < 1.0, lambda c: (c[1] - 1.0) / (c[0] - 1.0)),
)


def _first_gradient(rules, curves):
    for condition, gradient in rules:
        if condition(curves):
            return gradient(curves)
    return 0.0


def start_gradient(curves):
    return _first_gradient(START_GRADIENT_RULES, curves)


def end_gradient(curves):
    return _first_gradient(END_GRADIENT_RULES, curves)


class Cubic:
    def __init__(self, curves):
        if len(curves) < 4:
            raise ValueError(f"Cubic needs 4 control values, got {len(curves)}")
        self.curves = tuple(float(value) for value in curves[:4])

    def get_value(self, time):
        if time <= 0.0:
            return start_gradient(self.curves) * time

        if time >= 1.0:
            return 1.0 + end_gradient(self.curves) * (time - 1.0)

        start = 0.0
        mid = 0.0
        end = 1.0
        iterations = 0

        while start < end and iterations < MAX_ITERATIONS:
            mid = (start + end) / 2
            x_estimate = self._calculate(self.curves[0], self.curves[2], mid)
            if abs(time - x_estimate) < TOLERANCE:
                return self._calculate(self.curves[1], self.curves[3], mid)
            if x_estimate < time:
                start = mid
            else:
                end = mid
            iterations += 1

        return self._calculate(self.curves[1], self.curves[3], mid)

    @staticmethod
    def _calculate(a, b, m):
        return 3.0 * a * (1 - m) * (1 - m) * m + 3.0 * b * (1 - m) * m * m + m * m * m
