import unittest

from oscillator import DampedOscillator


def make():
    return DampedOscillator(0.005, 1.0, 0.08)


def reference_run(force, millis, m=0.005, k=1.0, d=0.08, lower=0.0, upper=1.0):
    """Step the bounded meter recurrence by hand, one millisecond at a time.

    Returns the (position, velocity) after every step and the steps at
    which the mass was found past the upper stop.
    """
    x = v = 0.0
    states, clamps = [], []
    for step in range(millis):
        if x > upper:
            x = upper
            v = -v
            clamps.append(step)
        if x < lower:
            x = lower
            v = -v
        a = (force - k * x - d * v) / m
        v = v + a * 0.001
        x = x + v * 0.001
        states.append((x, v))
    return states, clamps


class TestIntegrate(unittest.TestCase):
    def test_starts_at_rest(self) -> None:
        osc = make()
        self.assertEqual((osc.position, osc.velocity), (0.0, 0.0))
        self.assertEqual((osc.mass, osc.spring, osc.damping), (0.005, 1.0, 0.08))

    def test_zero_steps_is_a_no_op(self) -> None:
        osc = make()
        osc.integrate(0.7, 40)
        x, v = osc.position, osc.velocity
        self.assertEqual(osc.integrate(123.0, 0), x)
        self.assertEqual(osc.integrate_bounded(123.0, 0.0, 1.0, 0), x)
        self.assertEqual((osc.position, osc.velocity), (x, v))

    def test_single_step_matches_euler_update(self) -> None:
        osc = make()
        x = osc.integrate(1.0, 1)
        v = (1.0 / 0.005) * 0.001
        self.assertAlmostEqual(osc.velocity, v)
        self.assertAlmostEqual(x, v * 0.001)

    def test_identical_models_have_identical_trajectories(self) -> None:
        a, b = make(), make()
        for force, millis in [(1.0, 7), (0.25, 30), (0.9, 1), (0.0, 120), (0.6, 12)]:
            self.assertEqual(a.integrate_bounded(force, 0.0, 1.0, millis),
                             b.integrate_bounded(force, 0.0, 1.0, millis))
            self.assertEqual((a.position, a.velocity), (b.position, b.velocity))

    def test_converges_to_force_over_spring(self) -> None:
        for force, spring in [(0.5, 1.0), (1.0, 2.0), (0.2, 0.5)]:
            with self.subTest(force=force, spring=spring):
                osc = DampedOscillator(0.005, spring, 0.08)
                osc.integrate(force, 20000)
                self.assertAlmostEqual(osc.position, force / spring, delta=1e-6)
                self.assertAlmostEqual(osc.velocity, 0.0, delta=1e-6)


class TestIntegrateBounded(unittest.TestCase):
    def test_output_stays_inside_bounds(self) -> None:
        osc = make()
        for _ in range(1000):
            x = osc.integrate_bounded(1.0, 0.0, 1.0, 1)
            self.assertTrue(0.0 <= x <= 1.0)

    def test_velocity_reverses_on_the_step_that_clamps(self) -> None:
        osc = make()
        reflections = 0
        for _ in range(1000):
            before, v_before = osc.position, osc.velocity
            osc.integrate_bounded(1.0, 0.0, 1.0, 1)
            if before > 1.0:
                reflections += 1
                self.assertGreater(v_before, 0.0)
                self.assertLess(osc.velocity, 0.0)
            elif reflections == 0:
                self.assertGreater(osc.velocity, 0.0)
        self.assertGreater(reflections, 0)

    def test_full_scale_step_overshoots_then_swings_back(self) -> None:
        osc = make()
        trace = [osc.integrate_bounded(1.0, 0.0, 1.0, 1) for _ in range(1000)]

        first_hit = trace.index(1.0)
        rising = trace[:first_hit]
        self.assertTrue(all(b > a for a, b in zip(rising, rising[1:])))
        self.assertLess(first_hit, 300)
        self.assertLess(min(trace[first_hit:]), 0.95)

    def test_full_scale_step_matches_hand_stepped_recurrence(self) -> None:
        states, clamps = reference_run(1.0, 1000)
        osc = make()
        seen = []
        for _ in range(1000):
            osc.integrate_bounded(1.0, 0.0, 1.0, 1)
            seen.append((osc.position, osc.velocity))

        first_clamp = next(i for i, (x, _) in enumerate(seen) if x > 1.0) + 1
        self.assertEqual(first_clamp, clamps[0])
        for millis in (1, 2, 100, 250, 500, 1000):
            with self.subTest(millis=millis):
                self.assertEqual(seen[millis - 1], states[millis - 1])

    def test_first_steps_from_rest(self) -> None:
        osc = make()
        osc.integrate_bounded(1.0, 0.0, 1.0, 1)
        self.assertAlmostEqual(osc.velocity, 0.2, places=15)
        self.assertAlmostEqual(osc.position, 0.0002, places=15)
        osc.integrate_bounded(1.0, 0.0, 1.0, 1)
        # a = (1 - 0.0002 - 0.08 * 0.2) / 0.005 = 196.76
        self.assertAlmostEqual(osc.velocity, 0.39676, places=13)
        self.assertAlmostEqual(osc.position, 0.00059676, places=15)

    def test_one_long_call_matches_many_short_calls(self) -> None:
        long_run, short_run = make(), make()
        long_run.integrate_bounded(1.0, 0.0, 1.0, 1000)
        for _ in range(1000):
            short_run.integrate_bounded(1.0, 0.0, 1.0, 1)
        self.assertEqual((long_run.position, long_run.velocity),
                         (short_run.position, short_run.velocity))

    def test_bounds_are_checked_only_at_the_start_of_a_step(self) -> None:
        osc = make()
        self.assertEqual(osc.integrate_bounded(1e6, 0.0, 1.0, 1), 1.0)
        # Past the stop within the step...
        self.assertAlmostEqual(osc.position, 200.0)
        self.assertGreater(osc.velocity, 0.0)
        # ...snapped back and reflected on the next one.
        osc.integrate_bounded(0.0, 0.0, 1.0, 1)
        self.assertLess(osc.velocity, 0.0)

    def test_lower_bound_reflects_upward(self) -> None:
        osc = make()
        osc.integrate(-1.0, 50)
        self.assertLess(osc.position, 0.0)
        v = osc.velocity
        osc.integrate_bounded(0.0, 0.0, 1.0, 1)
        self.assertLess(v, 0.0)
        self.assertGreater(osc.velocity, 0.0)


if __name__ == "__main__":
    unittest.main()
