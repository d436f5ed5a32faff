from battlecore.domain.battle_models import InventoryEntry
from battlecore.domain.inventory import add_item, item_quantity, remove_item, take_up_to

from tests.helpers.battle_builders import make_actor, make_state


def _state():
    return make_state([make_actor("hero")], [make_actor("slime")], inventory=[InventoryEntry("potion", 2)])


def test_add_and_remove_items() -> None:
    state = _state()

    add_item(state, "potion", 1)
    add_item(state, "ether", 2)

    assert item_quantity(state, "potion") == 3
    assert item_quantity(state, "ether") == 2
    assert remove_item(state, "ether", 2)
    assert all(entry.item_id != "ether" for entry in state.inventory)


def test_remove_item_refuses_when_short() -> None:
    state = _state()

    assert not remove_item(state, "potion", 3)
    assert item_quantity(state, "potion") == 2


def test_take_up_to_takes_what_is_available() -> None:
    state = _state()

    assert take_up_to(state, "potion", 5) == 2
    assert item_quantity(state, "potion") == 0
    assert take_up_to(state, "potion", 1) == 0


def test_battle_inventory_is_copied_from_the_input() -> None:
    source = [InventoryEntry("potion", 2)]
    state = make_state([make_actor("hero")], [make_actor("slime")], inventory=source)

    remove_item(state, "potion", 1)

    assert source[0].qty == 2
