import unittest

from planifia.domain.GroupedItem import GroupedItem
from planifia.domain.ShoppingItem import ShoppingItem
from planifia.logic.shopping.list_builder import (
    apply_manual_addition, apply_purchased, apply_removal, display_name, group_items,
    normalize_key, sort_groups, summarize,
)


def _item(id, name, purchased=False, manual=False, meal_id="m1"):
    return ShoppingItem(id=id, user_id="u1", ingredient_name=name, category="Ingredientes",
                        purchased=purchased, manual=manual, meal_id=None if manual else meal_id)


class TestListBuilder(unittest.TestCase):

    def test_same_name_different_case_and_spaces_is_one_group(self):
        raw = [_item("1", "Tomate"), _item("2", " tomate "), _item("3", "TOMATE", meal_id="m2")]
        groups = group_items(raw)
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].key, "tomate")
        self.assertEqual(groups[0].member_ids, ["1", "2", "3"])

    def test_purchased_only_when_every_member_is(self):
        groups = group_items([_item("1", "Huevos", purchased=True), _item("2", "huevos")])
        self.assertFalse(groups[0].purchased)
        groups = group_items([_item("1", "Huevos", purchased=True), _item("2", "huevos", purchased=True)])
        self.assertTrue(groups[0].purchased)

    def test_manual_if_any_member_is(self):
        groups = group_items([_item("1", "Leche"), _item("2", "leche", manual=True)])
        self.assertTrue(groups[0].manual)
        self.assertFalse(group_items([_item("1", "Leche")])[0].manual)

    def test_display_name_from_first_item_with_first_letter_upper(self):
        groups = group_items([_item("1", "aceite de oliva"), _item("2", "ACEITE DE OLIVA")])
        self.assertEqual(groups[0].display_name, "Aceite de oliva")
        self.assertEqual(display_name("  pan  "), "Pan")
        self.assertEqual(display_name(""), "")
        self.assertEqual(normalize_key("  Pan Rallado "), "pan rallado")

    def test_unpurchased_first_then_alphabetical(self):
        groups = [
            GroupedItem("apple", "Apple", ["b"], purchased=True, manual=False),
            GroupedItem("banana", "Banana", ["a"], purchased=False, manual=False),
            GroupedItem("apple2", "Apple", ["c"], purchased=False, manual=False),
        ]
        ordered = sort_groups(groups)
        self.assertEqual([g.member_ids[0] for g in ordered], ["c", "a", "b"])

    def test_accents_sort_with_their_base_letter(self):
        raw = [_item("1", "Zanahoria"), _item("2", "Ñora"), _item("3", "Azúcar"), _item("4", "arroz")]
        names = [g.display_name for g in group_items(raw)]
        self.assertEqual(names, ["Arroz", "Azúcar", "Ñora", "Zanahoria"])

    def test_grouping_is_recomputed_not_patched(self):
        raw = [_item("1", "Sal"), _item("2", "sal", purchased=True)]
        first = group_items(raw)
        second = group_items(raw)
        self.assertEqual(first, second)
        self.assertIsNot(first[0], second[0])

    def test_summarize(self):
        groups = group_items([_item("1", "Sal", purchased=True), _item("2", "Pan")])
        self.assertEqual(summarize(groups), {"purchased_count": 1, "total_count": 2})
        self.assertEqual(summarize([]), {"purchased_count": 0, "total_count": 0})

    def test_tentative_helpers_do_not_touch_the_input(self):
        raw = [_item("1", "Sal"), _item("2", "Pan")]
        bought = apply_purchased(raw, ["1"], True)
        self.assertTrue(bought[0].purchased)
        self.assertFalse(raw[0].purchased)

        self.assertEqual([i.id for i in apply_removal(raw, ["2"])], ["1"])
        self.assertEqual(len(raw), 2)

        added = apply_manual_addition(raw, _item("tmp-1", "Leche", manual=True))
        self.assertEqual([i.id for i in added], ["tmp-1", "1", "2"])


if __name__ == '__main__':
    unittest.main()
