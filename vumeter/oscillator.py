"""Driven, damped mass on a spring, used to model a voice-coil meter needle.

A fixed 1 ms explicit-Euler step is used:

    a = (force - k*x - d*v) / m
    v = v + a * 0.001
    x = x + v * 0.001

Critical damping is 2 * sqrt(m * k); anything below that overshoots.
"""

DT = 0.001  # one millisecond, in seconds


class DampedOscillator:
    """A mass on a spring with viscous damping and a constant driving force.

    The mass must be positive.  This is not checked: a zero or negative
    mass simply produces non-finite positions.
    """

    def __init__(self, mass: float, spring: float, damping: float):
        """
        Args:
            mass:    Mass of the suspended object (> 0).
            spring:  Spring constant (force per unit extension).
            damping: Damping coefficient.
        """
        self._m = mass
        self._k = spring
        self._d = damping
        self._x = 0.0
        self._v = 0.0

    @property
    def mass(self) -> float:
        return self._m

    @property
    def spring(self) -> float:
        return self._k

    @property
    def damping(self) -> float:
        return self._d

    @property
    def position(self) -> float:
        return self._x

    @property
    def velocity(self) -> float:
        return self._v

    def integrate(self, force: float, millis: int) -> float:
        """Apply ``force`` for ``millis`` milliseconds and return the extension."""
        m, k, d = self._m, self._k, self._d
        x, v = self._x, self._v
        for _ in range(millis):
            a = (force - k * x - d * v) / m
            v = v + a * DT
            x = x + v * DT
        self._x, self._v = x, v
        return x

    def integrate_bounded(self, force: float, lower: float, upper: float,
                          millis: int) -> float:
        """Like :meth:`integrate`, with end stops at ``lower`` and ``upper``.

        At the start of every step the mass is snapped back inside the
        bounds and its velocity reversed.  The check is made once per
        millisecond only, so within a step the mass may travel past a bound;
        it is reflected at the top of the next step.  The returned value is
        clamped to the bounds, the internal position is not.
        """
        m, k, d = self._m, self._k, self._d
        x, v = self._x, self._v
        for _ in range(millis):
            if x > upper:
                x = upper
                v = -v
            if x < lower:
                x = lower
                v = -v
            a = (force - k * x - d * v) / m
            v = v + a * DT
            x = x + v * DT
        self._x, self._v = x, v
        return min(max(x, lower), upper)
