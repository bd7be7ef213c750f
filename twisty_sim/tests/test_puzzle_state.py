# twisty_sim/tests/test_puzzle_state.py
import random
import unittest
from collections import Counter

from twisty_sim.core import ConfigurationError, Move, PuzzleState
from twisty_sim.logic.moves import generate_legal_moves, parse_sequence
from twisty_sim.logic.scramble import generate_scramble


def scrambled(order, n=12, seed=7):
    s = PuzzleState(order)
    s.apply_sequence(generate_scramble(order, n, seed=seed, include_center=True))
    return s


class TestPuzzleState(unittest.TestCase):
    def test_starts_solved(self):
        for order in range(1, 6):
            self.assertTrue(PuzzleState(order).is_solved())

    def test_piece_count_and_lattice_bijection(self):
        for order in (2, 3, 4):
            s = scrambled(order)
            self.assertEqual(len(s.pieces), order ** 3)
            cells = {p.cell for p in s.pieces}
            ids = {p.id for p in s.pieces}
            self.assertEqual(cells, ids)

    def test_order2_y_slice_four_turns(self):
        s = PuzzleState(2)
        m = Move("y", 0.5, 1)
        s.apply_move(m)
        self.assertFalse(s.is_solved())
        for _ in range(3):
            s.apply_move(m)
        self.assertTrue(s.is_solved())

    def test_inverse_round_trip(self):
        for order in (2, 3, 4):
            s = scrambled(order)
            before = s.encode()
            for m in generate_legal_moves(order, include_center=True):
                s.apply_move(m)
                s.apply_move(m.inverse())
                self.assertEqual(before, s.encode(), str(m))

    def test_quarter_turn_periodicity(self):
        for order in (2, 3, 5):
            s = scrambled(order)
            before = s.encode()
            for m in generate_legal_moves(order, include_center=True):
                for _ in range(4):
                    s.rotate_layer(m.axis, m.slice, m.direction)
                self.assertEqual(before, s.encode(), str(m))

    def test_single_move_is_never_solved(self):
        for order in (2, 3, 4):
            for m in generate_legal_moves(order, include_center=True):
                s = PuzzleState(order)
                s.apply_move(m)
                self.assertFalse(s.is_solved(), str(m))

    def test_encode_ignores_piece_order(self):
        a = scrambled(3)
        b = a.clone()
        random.Random(1).shuffle(b.pieces)
        self.assertEqual(a.encode(), b.encode())

    def test_encode_distinguishes_states(self):
        a = PuzzleState(3)
        b = PuzzleState(3)
        self.assertEqual(a.encode(), b.encode())
        b.apply_move(Move("z", -1, 1))
        self.assertNotEqual(a.encode(), b.encode())
        c = PuzzleState(3)
        c.apply_sequence(parse_sequence("R U R' U'", 3))
        self.assertNotEqual(a.encode(), c.encode())

    def test_encode_distinguishes_orientation_only(self):
        a = PuzzleState(2)
        b = PuzzleState(2)
        p = b.pieces[0]
        p.faces = p.faces[1:] + p.faces[:1]
        self.assertEqual([q.cell for q in a.pieces], [q.cell for q in b.pieces])
        self.assertNotEqual(a.encode(), b.encode())

    def test_clone_is_independent(self):
        a = PuzzleState(3)
        b = a.clone()
        b.apply_move(Move("x", 1, 1))
        self.assertTrue(a.is_solved())
        self.assertFalse(b.is_solved())
        self.assertEqual(a.order, b.order)
        self.assertEqual(a.variant, b.variant)

    def test_labels_per_piece_are_preserved(self):
        solved = {p.id: Counter(label for label in p.faces if label) for p in PuzzleState(4).pieces}
        s = scrambled(4, n=30)
        for p in s.pieces:
            self.assertEqual(Counter(label for label in p.faces if label), solved[p.id])

    def test_interior_pieces_have_no_faces(self):
        s = PuzzleState(3)
        core = s.piece_at((0, 0, 0))
        self.assertEqual(core.faces, (None,) * 6)
        s4 = PuzzleState(4)
        self.assertEqual(s4.piece_at((0.5, -0.5, 0.5)).faces, (None,) * 6)

    def test_rotation_direction_is_right_handed(self):
        s = PuzzleState(3)
        s.apply_move(Move("x", 1, 1))
        p = s.piece_at((1, 0, 1))
        self.assertEqual(p.id, (2, 2, 0))
        # +x sigue mostrando R, el U que miraba a +y ahora mira a +z
        self.assertEqual(p.faces[0], "R")
        self.assertEqual(p.faces[4], "U")
        self.assertIsNone(p.faces[2])

    def test_snapshot_is_read_only(self):
        s = PuzzleState(2, "mirror")
        snap = s.snapshot()
        self.assertEqual(len(snap), 8)
        corner = next(p for p in snap if p.id == (0.5, 0.5, 0.5))
        self.assertEqual(dict(corner.faces), {"+x": "R", "+y": "U", "+z": "F"})
        self.assertEqual(corner.colors["+y"], "W")
        with self.assertRaises(TypeError):
            corner.faces["+x"] = "L"

    def test_reset(self):
        s = scrambled(3)
        s.reset()
        self.assertTrue(s.is_solved())

    def test_invalid_order_and_variant(self):
        for order in (0, 10, "3", 2.0, True):
            with self.assertRaises(ConfigurationError):
                PuzzleState(order)
        with self.assertRaises(ConfigurationError):
            PuzzleState(3, "cuboid")

    def test_invalid_moves_are_rejected_untouched(self):
        s = PuzzleState(3)
        bad = [
            Move("x", 0.5, 1),
            Move("y", 2, 1),
            Move("w", 1, 1),
            Move("z", 1, 0),
            Move("z", 0.25, 1),
        ]
        for m in bad:
            with self.assertRaises(ConfigurationError):
                s.apply_move(m)
        self.assertTrue(s.is_solved())
        with self.assertRaises(ConfigurationError):
            PuzzleState(2).apply_move(Move("x", 0, 1))


if __name__ == "__main__":
    unittest.main()
