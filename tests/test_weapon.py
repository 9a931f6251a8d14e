import random

import pytest

from roulette import (
    Charge,
    EmptyMagazineException,
    Player,
    Weapon,
    random_magazine,
)

LIVE = Charge.LIVE
BLANK = Charge.BLANK


def loaded(*charges):
    weapon = Weapon()
    weapon.load(charges)
    return weapon


def test_new_weapon_is_empty_and_not_sawed():
    weapon = Weapon()
    assert weapon.remaining_count() == 0
    assert weapon.is_empty()
    assert not weapon.is_sawed()


def test_canonical_first_level():
    player = Player("name", 2)
    dealer = Player("dealer", 2)

    weapon = loaded(BLANK, LIVE, BLANK)
    assert weapon.remaining_count() == 3

    outcome = weapon.discharge(player)
    assert outcome.charge_fired is BLANK
    assert outcome.damage_applied == 0
    assert weapon.remaining_count() == 2
    assert player.lives == 2

    outcome = weapon.discharge(dealer)
    assert outcome.charge_fired is LIVE
    assert outcome.damage_applied == 1
    assert weapon.remaining_count() == 1
    assert dealer.lives == 1

    weapon.load([LIVE, BLANK, LIVE, BLANK, LIVE])
    assert weapon.remaining_count() == 5

    weapon.discharge(dealer)
    assert weapon.remaining_count() == 4
    assert dealer.lives == 0

    weapon.discharge(dealer)
    weapon.discharge(dealer)
    assert weapon.remaining_count() == 2
    assert dealer.lives == 0
    assert dealer.is_eliminated()


def test_discharge_empty_raises_without_touching_state():
    weapon = Weapon()
    weapon.saw()
    player = Player("a", 3)

    with pytest.raises(EmptyMagazineException):
        weapon.discharge(player)

    assert player.lives == 3
    assert weapon.is_sawed()
    assert weapon.remaining_count() == 0


def test_blank_never_changes_lives():
    player = Player("a", 3)
    weapon = loaded(BLANK, BLANK)
    weapon.saw()

    outcome = weapon.discharge(player)
    assert outcome.damage_applied == 0
    assert player.lives == 3
    assert not weapon.is_sawed()


def test_saw_doubles_one_shot_only():
    player = Player("a", 5)
    weapon = loaded(LIVE, LIVE)

    weapon.saw()
    assert weapon.discharge(player).damage_applied == 2
    assert player.lives == 3
    assert not weapon.is_sawed()

    assert weapon.discharge(player).damage_applied == 1
    assert player.lives == 2


def test_sawed_live_saturates_at_zero():
    player = Player("a", 1)
    weapon = loaded(LIVE)
    weapon.saw()

    outcome = weapon.discharge(player)
    assert outcome.charge_fired is LIVE
    assert outcome.damage_applied == 1
    assert player.lives == 0


def test_lives_never_below_zero_on_repeated_lethal_shots():
    player = Player("a", 1)
    weapon = loaded(LIVE, LIVE, LIVE)

    for _ in range(3):
        weapon.saw()
        weapon.discharge(player)
        assert player.lives == 0


def test_discharge_fires_in_loaded_order():
    weapon = loaded(LIVE, BLANK, BLANK, LIVE)
    target = Player("a", 10)
    fired = [weapon.discharge(target).charge_fired for _ in range(4)]
    assert fired == [LIVE, BLANK, BLANK, LIVE]


def test_peek_and_eject_use_the_firing_end():
    weapon = loaded(BLANK, LIVE)
    target = Player("a", 3)

    assert weapon.peek_next() is BLANK
    assert weapon.remaining_count() == 2
    assert weapon.eject_next() is BLANK
    assert weapon.remaining_count() == 1
    assert weapon.peek_next() is LIVE
    assert weapon.discharge(target).charge_fired is LIVE


def test_peek_and_eject_on_empty_raise():
    weapon = Weapon()
    with pytest.raises(EmptyMagazineException):
        weapon.peek_next()
    with pytest.raises(EmptyMagazineException):
        weapon.eject_next()


def test_load_resets_saw_and_accepts_names():
    weapon = Weapon()
    weapon.saw()
    weapon.load(["live", "blank"])
    assert not weapon.is_sawed()
    assert weapon.magazine == [LIVE, BLANK]
    assert weapon.num_live() == 1
    assert weapon.num_blank() == 1


def test_load_copies_the_given_sequence():
    charges = [LIVE, BLANK]
    weapon = Weapon()
    weapon.load(charges)
    weapon.eject_next()
    assert charges == [LIVE, BLANK]


def test_seeded_randomize_is_reproducible():
    charges = [LIVE] * 4 + [BLANK] * 4

    first = Weapon()
    first.load(charges, rng=random.Random(1234))
    second = Weapon()
    second.load(charges, rng=random.Random(1234))

    assert first.magazine == second.magazine
    assert sorted(first.magazine, key=str) == sorted(charges, key=str)


def test_randomize_matches_injected_shuffle():
    charges = [LIVE, LIVE, BLANK, BLANK, BLANK]
    expected = list(charges)
    random.Random(99).shuffle(expected)

    weapon = Weapon()
    weapon.load(charges)
    weapon.randomize(random.Random(99))
    assert weapon.magazine == expected


@pytest.mark.parametrize("seed", range(20))
def test_remaining_count_drops_by_one_per_discharge(seed):
    rng = random.Random(seed)
    weapon = Weapon()
    weapon.load(random_magazine(rng))
    target = Player("a", 20)

    while not weapon.is_empty():
        before = weapon.remaining_count()
        weapon.discharge(target)
        assert weapon.remaining_count() == before - 1
