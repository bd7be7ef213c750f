# twisty_sim/tests/test_orchestrator.py
import json
import os
import tempfile
import unittest

from twisty_sim.core import ConfigurationError, Move, PuzzleState, SolverBusyError
from twisty_sim.logic.history import MoveHistory
from twisty_sim.logic.moves import inverse_sequence
from twisty_sim.solve import (
    DEFAULT_POLICIES,
    FALLBACK_POLICY,
    Cancelled,
    ResourceExhausted,
    Solved,
    SolverOrchestrator,
    SolverPolicy,
    load_policies,
)
from twisty_sim.solve.config import merge_policies, parse_policy_key

SCENARIO = [Move("x", 1, 1), Move("y", -1, -1), Move("z", 1, 1)]


def scenario_state():
    s = PuzzleState(3)
    s.apply_sequence(SCENARIO)
    return s


class TestSolverOrchestrator(unittest.TestCase):
    def test_already_solved_short_circuits(self):
        orch = SolverOrchestrator()
        task = orch.start(PuzzleState(3))
        self.assertTrue(task.done)
        self.assertFalse(orch.busy)
        self.assertIsInstance(task.result, Solved)
        self.assertEqual(task.result.moves, [])

    def test_solves_scenario_without_touching_state(self):
        s = scenario_state()
        before = s.encode()
        messages = []
        orch = SolverOrchestrator(
            {(3, "normal"): SolverPolicy(algorithm="bfs", max_depth=10, max_nodes=100000, yield_every=10)}
        )
        result = orch.solve(s, on_progress=messages.append)
        self.assertIsInstance(result, Solved)
        self.assertLessEqual(len(result.moves), 3)
        self.assertEqual(before, s.encode())
        self.assertTrue(messages)
        self.assertFalse(orch.busy)
        s.apply_sequence(result.moves)
        self.assertTrue(s.is_solved())

    def test_policy_selection(self):
        orch = SolverOrchestrator()
        self.assertEqual(orch.policy_for(3, "normal"), DEFAULT_POLICIES[(3, "normal")])
        self.assertEqual(orch.policy_for(7, "normal"), FALLBACK_POLICY)
        custom = SolverPolicy(algorithm="ida", max_depth=3)
        orch = SolverOrchestrator({(2, "normal"): custom}, fallback=custom)
        self.assertIs(orch.policy_for(2, "normal"), custom)
        self.assertIs(orch.policy_for(3, "normal"), custom)

    def test_budget_failure_is_returned(self):
        orch = SolverOrchestrator({(3, "normal"): SolverPolicy(algorithm="bfs", max_nodes=1)})
        result = orch.solve(scenario_state())
        self.assertIsInstance(result, ResourceExhausted)
        self.assertEqual(result.budget, "nodes")
        self.assertFalse(orch.busy)

    def test_single_search_at_a_time(self):
        orch = SolverOrchestrator({(3, "normal"): SolverPolicy(yield_every=1)})
        task = orch.start(scenario_state())
        self.assertTrue(orch.busy)
        with self.assertRaises(SolverBusyError):
            orch.start(scenario_state())
        task.run()
        self.assertFalse(orch.busy)
        orch.start(scenario_state()).run()

    def test_cancel_halts_at_suspension_point(self):
        orch = SolverOrchestrator({(3, "normal"): SolverPolicy(yield_every=1)})
        task = orch.start(scenario_state())
        self.assertTrue(task.step())
        self.assertTrue(orch.cancel())
        self.assertIsInstance(task.result, Cancelled)
        self.assertEqual(task.result.stats.nodes_expanded, 1)
        self.assertFalse(orch.busy)
        self.assertFalse(orch.cancel())

    def test_task_cancel(self):
        orch = SolverOrchestrator({(3, "normal"): SolverPolicy(yield_every=1)})
        task = orch.start(scenario_state())
        task.cancel()
        self.assertFalse(task.step())
        self.assertIsInstance(task.result, Cancelled)
        self.assertFalse(orch.busy)

    def test_reverse_mode_inverts_history(self):
        history = MoveHistory()
        history.extend(SCENARIO)
        orch = SolverOrchestrator()
        result = orch.solve(scenario_state(), history=history, algorithm="reverse")
        self.assertIsInstance(result, Solved)
        self.assertEqual(result.moves, inverse_sequence(SCENARIO))
        self.assertEqual(result.stats.algorithm, "reverse")
        self.assertFalse(orch.busy)

    def test_reverse_mode_from_policy(self):
        history = MoveHistory()
        history.extend(SCENARIO)
        orch = SolverOrchestrator({(3, "normal"): SolverPolicy(algorithm="reverse")})
        s = scenario_state()
        result = orch.solve(s, history=history)
        self.assertIsInstance(result, Solved)
        s.apply_sequence(result.moves)
        self.assertTrue(s.is_solved())

    def test_reverse_mode_needs_matching_history(self):
        orch = SolverOrchestrator()
        with self.assertRaises(ConfigurationError):
            orch.start(scenario_state(), algorithm="reverse")
        wrong = MoveHistory()
        wrong.push(Move("x", 1, 1))
        with self.assertRaises(ConfigurationError):
            orch.start(scenario_state(), history=wrong, algorithm="reverse")
        with self.assertRaises(ConfigurationError):
            orch.start(scenario_state(), algorithm="dfs")
        self.assertFalse(orch.busy)


class TestPolicies(unittest.TestCase):
    def test_invalid_policy_values(self):
        with self.assertRaises(ConfigurationError):
            SolverPolicy(algorithm="dfs")
        with self.assertRaises(ConfigurationError):
            SolverPolicy(max_depth=-1)
        with self.assertRaises(ConfigurationError):
            SolverPolicy(timeout="10")

    def test_parse_policy_key(self):
        self.assertEqual(parse_policy_key("3/mirror"), (3, "mirror"))
        self.assertEqual(parse_policy_key("4"), (4, "normal"))
        for bad in ("x/normal", "3/cuboid"):
            with self.assertRaises(ConfigurationError):
                parse_policy_key(bad)

    def test_merge_policies(self):
        table, fallback = merge_policies(
            {
                "3/normal": {"max_depth": 5},
                "default": {"timeout": 3.0},
                "6": {"algorithm": "bfs"},
            }
        )
        self.assertEqual(table[(3, "normal")].max_depth, 5)
        self.assertEqual(table[(3, "normal")].algorithm, "bfs")
        self.assertEqual(fallback.timeout, 3.0)
        self.assertEqual(table[(6, "normal")].algorithm, "bfs")
        self.assertEqual(table[(6, "normal")].timeout, 3.0)
        self.assertEqual(DEFAULT_POLICIES[(3, "normal")].max_depth, 6)

    def test_merge_rejects_unknown_fields(self):
        with self.assertRaises(ConfigurationError):
            merge_policies({"3/normal": {"depth": 5}})
        with self.assertRaises(ConfigurationError):
            merge_policies({"3/normal": 5})

    def test_load_policies_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "policies.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"2/normal": {"algorithm": "ida", "threshold_max": 9}}, f)
            table, _ = load_policies(path)
            self.assertEqual(table[(2, "normal")].algorithm, "ida")
            self.assertEqual(table[(2, "normal")].threshold_max, 9)

            orch = SolverOrchestrator.from_config(path)
            self.assertEqual(orch.policy_for(2, "normal").threshold_max, 9)

    def test_missing_or_broken_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            table, fallback = load_policies(os.path.join(tmp, "missing.json"))
            self.assertEqual(table, DEFAULT_POLICIES)
            self.assertEqual(fallback, FALLBACK_POLICY)

            broken = os.path.join(tmp, "broken.json")
            with open(broken, "w", encoding="utf-8") as f:
                f.write("{not json")
            with self.assertLogs("twisty_sim.solve.config", level="WARNING"):
                table, _ = load_policies(broken)
            self.assertEqual(table, DEFAULT_POLICIES)


if __name__ == "__main__":
    unittest.main()
