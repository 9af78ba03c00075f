from __future__ import annotations

import importlib.util
import random
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import cmap_jax")
class SortedIndexTests(unittest.TestCase):
    def test_empty_index(self) -> None:
        from cmap_jax import KeyNotFoundError, SortedIndex, binary_search, linear_search

        index = SortedIndex.empty()
        self.assertEqual(len(index), 0)
        for search in (linear_search, binary_search):
            with self.subTest(search=search.__name__):
                with self.assertRaises(KeyNotFoundError):
                    index.find(1, search)

    def test_insert_places_keys_in_order(self) -> None:
        from cmap_jax import SortedIndex

        index = SortedIndex.empty().insert(5, 7).insert(1, 2).insert(2, 3)
        self.assertEqual(index.keys, (1, 2, 5))
        self.assertEqual(index.values, (2, 3, 7))

    def test_insert_is_persistent(self) -> None:
        from cmap_jax import KeyNotFoundError, SortedIndex

        base = SortedIndex.empty().insert(1, "a").insert(3, "c")
        grown = base.insert(2, "b")
        self.assertEqual(base.keys, (1, 3))
        self.assertEqual(grown.keys, (1, 2, 3))
        with self.assertRaises(KeyNotFoundError):
            base.find(2)
        self.assertEqual(grown.find(2), "b")

    def test_random_inserts_keep_keys_strictly_ascending(self) -> None:
        from cmap_jax import SortedIndex

        rng = random.Random(7)
        keys = rng.sample(range(10_000), 300)
        index = SortedIndex.empty()
        for step, key in enumerate(keys):
            index = index.insert(key, step)
            self.assertTrue(all(a < b for a, b in zip(index.keys, index.keys[1:])))
        self.assertEqual(index.keys, tuple(sorted(keys)))
        for step, key in enumerate(keys):
            self.assertEqual(index.find(key), step)

    def test_duplicate_insert_is_rejected(self) -> None:
        from cmap_jax import DuplicateKeyError, SortedIndex

        index = SortedIndex.from_pairs([(1, 2), (2, 3)])
        with self.assertRaises(DuplicateKeyError):
            index.insert(2, 99)
        with self.assertRaises(ValueError):
            SortedIndex.from_pairs([(4, 1), (4, 2)])
        self.assertEqual(index.find(2), 3)

    def test_concrete_scenario_with_both_strategies(self) -> None:
        from cmap_jax import KeyNotFoundError, SortedIndex, binary_search, linear_search

        index = SortedIndex.from_pairs([(1, 2), (2, 3), (5, 7)])
        for search in (linear_search, binary_search):
            with self.subTest(search=search.__name__):
                self.assertEqual(index.find(1, search), 2)
                self.assertEqual(index.find(2, search), 3)
                self.assertEqual(index.find(5, search), 7)
                with self.assertRaises(KeyNotFoundError) as ctx:
                    index.find(7, search)
                self.assertEqual(ctx.exception.key, 7)

    def test_linear_and_binary_agree(self) -> None:
        from cmap_jax import KeyNotFoundError, SortedIndex, binary_search, linear_search

        rng = random.Random(99)
        index = SortedIndex.from_pairs((k, rng.random()) for k in rng.sample(range(500), 120))
        for key in range(-5, 505):
            with self.subTest(key=key):
                try:
                    linear = index.find(key, linear_search)
                except KeyNotFoundError:
                    with self.assertRaises(KeyNotFoundError):
                        index.find(key, binary_search)
                    continue
                self.assertEqual(index.find(key, binary_search), linear)

    def test_string_keys(self) -> None:
        from cmap_jax import SortedIndex, linear_search

        index = SortedIndex.from_pairs([("pear", 3), ("apple", 1), ("fig", 2)])
        self.assertEqual(index.keys, ("apple", "fig", "pear"))
        self.assertEqual(index.find("fig"), 2)
        self.assertEqual(index.find("pear", linear_search), 3)
        self.assertIn("apple", index)
        self.assertNotIn("kiwi", index)

    def test_direct_construction_validates_columns(self) -> None:
        from cmap_jax import SortedIndex, UnsortedKeysError

        index = SortedIndex(keys=[1, 2, 3], values=["a", "b", "c"])
        self.assertEqual(index.keys, (1, 2, 3))
        self.assertEqual(list(index.items()), [(1, "a"), (2, "b"), (3, "c")])
        with self.assertRaises(UnsortedKeysError):
            SortedIndex(keys=(2, 1), values=("b", "a"))
        with self.assertRaises(UnsortedKeysError):
            SortedIndex(keys=(1, 1), values=("a", "b"))
        with self.assertRaises(ValueError):
            SortedIndex(keys=(1, 2), values=("a",))

    def test_custom_search_strategy(self) -> None:
        from cmap_jax import KeyNotFoundError, NOT_FOUND, SortedIndex

        calls: list[tuple[tuple[int, ...], int]] = []

        def first_slot_only(keys, key):
            calls.append((tuple(keys), key))
            return 0 if keys and keys[0] == key else NOT_FOUND

        index = SortedIndex.from_pairs([(1, "a"), (2, "b")])
        self.assertEqual(index.find(1, first_slot_only), "a")
        with self.assertRaises(KeyNotFoundError):
            index.find(2, first_slot_only)
        self.assertEqual(calls, [((1, 2), 1), ((1, 2), 2)])

    def test_out_of_range_strategy_result_is_rejected(self) -> None:
        from cmap_jax import SortedIndex

        index = SortedIndex.from_pairs([(1, "a")])
        with self.assertRaises(ValueError):
            index.find(1, lambda keys, key: 5)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import cmap_jax")
class SearchStrategyTests(unittest.TestCase):
    def test_linear_search_handles_unsorted_and_duplicates(self) -> None:
        from cmap_jax import NOT_FOUND, linear_search

        keys = [9, 3, 7, 3, 1]
        self.assertEqual(linear_search(keys, 3), 1)
        self.assertEqual(linear_search(keys, 1), 4)
        self.assertEqual(linear_search(keys, 4), NOT_FOUND)
        self.assertEqual(linear_search([], 4), NOT_FOUND)

    def test_binary_search_positions(self) -> None:
        from cmap_jax import NOT_FOUND, binary_search

        keys = [2, 4, 6, 8, 10, 12, 14]
        for position, key in enumerate(keys):
            with self.subTest(key=key):
                self.assertEqual(binary_search(keys, key), position)
        for missing in (1, 3, 9, 15):
            with self.subTest(missing=missing):
                self.assertEqual(binary_search(keys, missing), NOT_FOUND)
        self.assertEqual(binary_search([], 1), NOT_FOUND)
        self.assertEqual(binary_search([5], 5), 0)

    def test_binary_search_contract_check(self) -> None:
        from cmap_jax import UnsortedKeysError, binary_search

        unsorted = [5, 1, 9]
        # Unchecked: no error, result is whatever the halving produces.
        binary_search(unsorted, 1, check_sorted=False)
        with self.assertRaises(UnsortedKeysError):
            binary_search(unsorted, 1, check_sorted=True)
        self.assertEqual(binary_search([1, 5, 9], 9, check_sorted=True), 2)


if __name__ == "__main__":
    unittest.main()
