import unittest

from domain.models import DEFAULT_CONFIG, PolicyName
from engine.policies import (
    HIGH_RISK,
    LOW_RISK,
    PredictivePolicy,
    ReactivePolicy,
    get_policy,
)


class TestReorderPolicies(unittest.TestCase):
    def setUp(self):
        self.config = DEFAULT_CONFIG.model_copy(
            update={"fab_capacity": 10000, "reorder_quantity": 1000}
        )

    def test_reactive_orders_below_reorder_level(self):
        p = ReactivePolicy(self.config)
        d = p.decide_order(1999, disrupted=False)
        self.assertTrue(d.triggered)
        self.assertEqual(d.quantity, 1000)
        self.assertEqual(d.action, "Reorder 1000 units")

        d = p.decide_order(2000, disrupted=False)
        self.assertFalse(d.triggered)
        self.assertEqual(d.quantity, 0)
        self.assertIsNone(d.action)

    def test_reactive_ignores_risk(self):
        p = ReactivePolicy(self.config)
        self.assertEqual(p.predicted_risk(1, [True] * 10), 0.0)
        self.assertFalse(p.decide_order(2100, False, risk=0.9).triggered)

    def test_capacity_caps_quantity(self):
        cfg = self.config.model_copy(update={"fab_capacity": 300})
        d = ReactivePolicy(cfg).decide_order(0, disrupted=False)
        self.assertEqual(d.requested, 1000)
        self.assertEqual(d.quantity, 300)

    def test_disruption_forces_zero(self):
        d = PredictivePolicy(self.config).decide_order(0, True, HIGH_RISK)
        self.assertTrue(d.triggered)
        self.assertEqual(d.quantity, 0)
        self.assertIn("Fab offline", d.action)

    def test_predictive_high_risk_threshold_and_multiplier(self):
        p = PredictivePolicy(self.config)
        # 2000 + 500 + 2 * 1000
        self.assertEqual(p.reorder_threshold(HIGH_RISK), 4500)
        self.assertEqual(p.reorder_threshold(LOW_RISK), 2000)

        d = p.decide_order(4499, False, HIGH_RISK)
        self.assertEqual(d.quantity, 1500)
        self.assertTrue(d.action.startswith("Expediting pre-order of 1500 units"))

        d = p.decide_order(4500, False, HIGH_RISK)
        self.assertFalse(d.triggered)
        self.assertIn("safety buffer", d.action)

    def test_predictive_lookahead_window(self):
        p = PredictivePolicy(self.config)
        events = [False] * 20
        events[9] = True  # day 10
        risks = {day: p.predicted_risk(day, events) for day in range(1, 21)}
        for day in range(5, 10):
            self.assertEqual(risks[day], HIGH_RISK, day)
        for day in list(range(1, 5)) + list(range(10, 21)):
            self.assertEqual(risks[day], LOW_RISK, day)

    def test_lookahead_clipped_at_horizon(self):
        p = PredictivePolicy(self.config)
        self.assertEqual(p.predicted_risk(3, [False, False, True]), LOW_RISK)
        self.assertEqual(p.predicted_risk(2, [False, False, True]), HIGH_RISK)

    def test_get_policy(self):
        self.assertIsInstance(get_policy("reactive", self.config), ReactivePolicy)
        self.assertIsInstance(get_policy("PAA", self.config), PredictivePolicy)
        self.assertIsInstance(
            get_policy(PolicyName.PREDICTIVE, self.config), PredictivePolicy
        )
        with self.assertRaises(ValueError):
            get_policy("fifo", self.config)

    def test_get_policy_rebinds_instance_to_run_config(self):
        same = ReactivePolicy(self.config)
        self.assertIs(get_policy(same, self.config), same)

        stale = PredictivePolicy(
            self.config.model_copy(update={"reorder_level": 100000, "fab_capacity": 5})
        )
        rebound = get_policy(stale, self.config)
        self.assertIsInstance(rebound, PredictivePolicy)
        self.assertEqual(rebound.config, self.config)
        self.assertFalse(rebound.decide_order(5000, False).triggered)


if __name__ == "__main__":
    unittest.main()
