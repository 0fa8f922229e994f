import pytest

from services.trade_rules import (
    NOTE_PURIFY_SPECIAL_TRADE,
    NOTE_SPECIAL_TRADE,
    NOTE_UNTRADEABLE,
    is_legendary_dex,
    is_legendary_tier,
    is_mythical_dex,
    is_untradeable,
    raid_trade_note,
)


def test_not_needed_has_no_note():
    assert raid_trade_note(name="Dialga", tier="5-Star Raids", is_shadow=False, is_needed=False) is None


@pytest.mark.parametrize(
    "name, tier, is_shadow, expected",
    [
        ("Palkia", "5-Star Raids", False, NOTE_SPECIAL_TRADE),
        ("Shadow Stantler", "3-Star Raids", True, NOTE_PURIFY_SPECIAL_TRADE),
        ("Shadow Regigigas", "5-Star Raids", True, NOTE_PURIFY_SPECIAL_TRADE),
        ("Darkrai", "5-Star Raids", False, NOTE_UNTRADEABLE),
        ("Deoxys (Attack Forme)", "5-Star Raids", False, NOTE_UNTRADEABLE),
        ("Regieleki", "Elite Raids", False, NOTE_SPECIAL_TRADE),
        ("Stantler", "3-Star Raids", False, None),
        ("Mega Gengar", "Mega Raids", False, None),
    ],
)
def test_raid_trade_note(name, tier, is_shadow, expected):
    assert raid_trade_note(name=name, tier=tier, is_shadow=is_shadow, is_needed=True) == expected


def test_untradeable_wins_over_shadow():
    assert raid_trade_note(name="Shadow Darkrai", tier="5-Star Raids", is_shadow=True, is_needed=True) == NOTE_UNTRADEABLE


def test_legendary_tier_detection():
    assert is_legendary_tier("5-Star Raids")
    assert is_legendary_tier("5 Star Raids")
    assert is_legendary_tier("Elite Raids")
    assert not is_legendary_tier("3-Star Raids")
    assert not is_legendary_tier(None)


def test_untradeable_lookup_tolerates_missing_name():
    assert not is_untradeable(None)
    assert is_untradeable("Mew")
    assert not is_untradeable("Mewtwo")


def test_dex_tables():
    assert is_mythical_dex(151)
    assert not is_legendary_dex(151)
    assert is_legendary_dex(150)
    assert not is_mythical_dex(150)
    assert not is_legendary_dex(1)
