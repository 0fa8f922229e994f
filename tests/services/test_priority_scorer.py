from datetime import datetime, timedelta

from models.creature import Creature, Roster
from models.feeds import FeedBundle
from services.priority_scorer import build_missing_pool, score_creatures, tier_score

NOW = datetime(2026, 10, 17, 12, 0, 0)


def _window(start_offset_days, end_offset_days):
    return {
        "start": (NOW + timedelta(days=start_offset_days)).isoformat(),
        "end": (NOW + timedelta(days=end_offset_days)).isoformat(),
    }


def _score(creatures, payload, **kwargs):
    kwargs.setdefault("include_upcoming", False)
    kwargs.setdefault("now", NOW)
    return score_creatures(creatures, FeedBundle.from_payload(payload), **kwargs)


def test_no_partner_keeps_needed_by_unset_and_feed_order(starter_roster, starter_raids):
    result = score_creatures(starter_roster, starter_raids, include_upcoming=False, now=NOW)

    assert [entry.name for entry in result] == ["Bulbasaur", "Ivysaur"]
    assert [entry.score for entry in result] == [4, 4]
    assert all(entry.needed_by is None for entry in result)
    assert result[0].sources[0].type == "raid"
    assert result[0].sources[0].label == "3-Star Raids"
    assert result[0].normalized_name == "bulbasaur"


def test_partner_classification(starter_roster, starter_raids):
    result = score_creatures(
        starter_roster, starter_raids, partner_dex={1}, include_upcoming=False, now=NOW
    )
    by_name = {entry.name: entry for entry in result}

    assert by_name["Bulbasaur"].needed_by == "you"
    assert by_name["Ivysaur"].needed_by == "both"
    assert by_name["Venusaur"].needed_by == "partner"


def test_partner_who_has_venusaur_drops_it(starter_roster, starter_raids):
    result = score_creatures(
        starter_roster, starter_raids, partner_dex={1, 3}, include_upcoming=False, now=NOW
    )
    by_name = {entry.name: entry for entry in result}

    assert set(by_name) == {"Bulbasaur", "Ivysaur"}
    assert by_name["Bulbasaur"].needed_by == "you"
    assert by_name["Bulbasaur"].score == 4
    assert by_name["Ivysaur"].needed_by == "both"
    assert by_name["Ivysaur"].score == 4


def test_partner_mode_does_not_change_scores(starter_roster, starter_raids):
    baseline = {e.name: e.score for e in score_creatures(starter_roster, starter_raids, now=NOW)}
    with_partner = score_creatures(starter_roster, starter_raids, partner_dex={1}, now=NOW)
    for entry in with_partner:
        if entry.name in baseline:
            assert entry.score == baseline[entry.name]


def test_partner_ties_sort_both_then_you_then_partner(starter_roster, starter_raids):
    result = score_creatures(
        starter_roster, starter_raids, partner_dex={1}, include_upcoming=False, now=NOW
    )
    assert [entry.name for entry in result] == ["Ivysaur", "Bulbasaur", "Venusaur"]


def test_partner_ties_within_same_group_sort_by_name():
    roster = [
        Creature(dex_number=7, name="Squirtle"),
        Creature(dex_number=4, name="Charmander"),
    ]
    payload = {"raids": [{"name": "Squirtle", "tier": "1-Star Raids"}, {"name": "Charmander", "tier": "1-Star Raids"}]}
    result = _score(roster, payload, partner_dex=set())
    assert [entry.name for entry in result] == ["Charmander", "Squirtle"]
    assert all(entry.needed_by == "both" for entry in result)


def test_roster_input_is_not_mutated(starter_roster, starter_raids):
    roster = Roster.build(starter_roster)
    before = roster.creatures
    score_creatures(roster, starter_raids, partner_dex={1}, now=NOW)
    assert roster.creatures == before


def test_missing_pool_synthesizes_placeholders_for_partner_gaps():
    pool = build_missing_pool([Creature(dex_number=1, name="Bulbasaur", is_lucky=True)], {1, 2}, max_dex=4)
    assert [(creature.dex_number, creature.name, needed) for creature, needed in pool] == [
        (2, "Creature 2", "you"),
        (3, "Creature 3", "both"),
        (4, "Creature 4", "both"),
    ]


def test_missing_pool_without_partner_is_non_lucky_roster():
    pool = build_missing_pool(
        [Creature(dex_number=1, name="Bulbasaur", is_lucky=True), Creature(dex_number=2, name="Ivysaur")]
    )
    assert [(creature.name, needed) for creature, needed in pool] == [("Ivysaur", None)]


def test_tier_scores():
    assert tier_score("5-Star Raids") == 5
    assert tier_score("Mega Raids") == 5
    assert tier_score("3-Star Raids") == 4
    assert tier_score("1-Star Raids") == 3
    assert tier_score("Elite Raids") == 3


def test_shadow_raids_score_two_and_match_base_name():
    roster = [Creature(dex_number=234, name="Stantler")]
    payload = {
        "raids": [
            {"name": "Shadow Stantler", "tier": "3-Star Shadow Raids"},
            {"name": "Shadow Stantler", "tier": "3-Star Raids"},
        ]
    }
    (entry,) = _score(roster, payload)
    assert entry.score == 4
    assert [source.type for source in entry.sources] == ["shadow-raid", "shadow-raid"]
    assert [source.label for source in entry.sources] == ["3-Star Shadow Raids", "Shadow 3-Star Raids"]


def test_raid_without_tier_is_skipped():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    assert _score(roster, {"raids": [{"name": "Bulbasaur", "tier": ""}]}) == []


def test_regional_form_raid_matches_plain_roster_name():
    roster = [Creature(dex_number=37, name="Vulpix")]
    (entry,) = _score(roster, {"raids": [{"name": "Alolan Vulpix", "tier": "1-Star Raids"}]})
    assert entry.score == 3
    assert entry.sources[0].detail == "Alolan Vulpix"


def test_active_event_enriched_spawn_and_fallback_never_double_count():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    event = {
        "eventID": "cd-bulbasaur",
        "name": "Bulbasaur Community Day",
        "eventType": "community-day",
        **_window(-1, 1),
        "extraData": {
            "generic": {"hasSpawns": True, "spawns": [{"name": "Bulbasaur"}, {"name": "Bulbasaur"}]},
            "raidbattles": {"bosses": [{"name": "Bulbasaur"}]},
        },
    }
    (entry,) = _score(roster, {"events": [event]})
    assert entry.score == 4
    assert [source.type for source in entry.sources] == ["event"]
    assert entry.sources[0].label == "Event Spawn"
    assert entry.sources[0].detail == "Bulbasaur Community Day"


def test_active_event_falls_back_to_boss_list_when_no_spawns():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    event = {
        "eventID": "e1",
        "name": "Grass Festival",
        **_window(-1, 1),
        "extraData": {
            "generic": {"hasSpawns": True, "spawns": []},
            "raidbattles": {"bosses": [{"name": "Bulbasaur"}]},
        },
    }
    (entry,) = _score(roster, {"events": [event]})
    assert entry.score == 4
    assert entry.sources[0].type == "event"


def test_active_event_without_declared_spawns_scores_no_spawns():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    event = {
        "eventID": "e1",
        "name": "Raid Weekend",
        **_window(-1, 1),
        "extraData": {"raidbattles": {"bosses": [{"name": "Bulbasaur"}]}},
    }
    assert _score(roster, {"events": [event]}) == []


def test_active_event_research_and_eggs():
    roster = [Creature(dex_number=1, name="Bulbasaur"), Creature(dex_number=4, name="Charmander")]
    event = {
        "eventID": "e1",
        "name": "Kanto Tour",
        **_window(-1, 1),
        "extraData": {
            "generic": {
                "hasSpawns": False,
                "eventResearch": [{"task": "Catch 5 Pokemon", "rewards": [{"name": "Bulbasaur"}]}],
                "eventEggs": [
                    {"name": "Charmander", "eggDistance": "2 km"},
                    {"name": "Charmander", "eggDistance": "2 km"},
                    {"name": "Charmander", "eggDistance": "5 km"},
                ],
            }
        },
    }
    result = {entry.name: entry for entry in _score(roster, {"events": [event]})}

    assert result["Bulbasaur"].score == 2
    assert result["Bulbasaur"].sources[0].type == "research"
    assert result["Bulbasaur"].sources[0].label == "Event Research"
    # One egg credit per creature per event.
    assert result["Charmander"].score == 1
    assert [source.label for source in result["Charmander"].sources] == ["2 km"]


def test_upcoming_events_only_with_flag():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    event = {
        "eventID": "up1",
        "name": "Bulbasaur Raid Day",
        "eventType": "raid-day",
        "link": "https://example.test/events/up1",
        "start": "2026-10-19T14:00:00",
        "end": "2026-10-19T17:00:00",
        "extraData": {"raidbattles": {"bosses": [{"name": "Bulbasaur"}]}},
    }
    assert _score(roster, {"events": [event]}, include_upcoming=False) == []

    (entry,) = _score(roster, {"events": [event]}, include_upcoming=True)
    assert entry.score == 1
    source = entry.sources[0]
    assert source.type == "upcoming-raid"
    assert source.label == "Upcoming"
    assert source.availability == "Oct 19"
    assert source.link == "https://example.test/events/up1"


def test_upcoming_spawn_event_prefers_enriched_spawns():
    roster = [Creature(dex_number=1, name="Bulbasaur"), Creature(dex_number=4, name="Charmander")]
    event = {
        "eventID": "up2",
        "name": "Spotlight Hour",
        "eventType": "pokemon-spotlight-hour",
        **_window(2, 3),
        "extraData": {
            "generic": {"spawns": [{"name": "Charmander"}]},
            "raidbattles": {"bosses": [{"name": "Bulbasaur"}]},
        },
    }
    (entry,) = _score(roster, {"events": [event]}, include_upcoming=True)
    assert entry.name == "Charmander"
    assert entry.sources[0].type == "upcoming"


def test_upcoming_beyond_horizon_is_ignored():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    event = {
        "eventID": "far",
        "name": "Far Away",
        **_window(10, 11),
        "extraData": {"raidbattles": {"bosses": [{"name": "Bulbasaur"}]}},
    }
    assert _score(roster, {"events": [event]}, include_upcoming=True) == []


def test_research_feed_rewards():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    payload = {
        "research": [
            {"text": "Catch 10 Grass-type Pokemon", "rewards": [{"name": "Bulbasaur"}]},
            {"text": "Spin 5 PokeStops", "rewards": []},
        ]
    }
    (entry,) = _score(roster, payload)
    assert entry.score == 2
    assert entry.sources[0].label == "Research"
    assert entry.sources[0].detail == "Catch 10 Grass-type Pokemon"


def test_same_egg_type_and_creature_counts_once():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    payload = {
        "eggs": [
            {"name": "Bulbasaur", "eggType": "2 km"},
            {"name": "Bulbasaur", "eggType": "2 km"},
            {"name": "Bulbasaur", "eggType": "7 km"},
        ]
    }
    (entry,) = _score(roster, payload)
    assert entry.score == 2
    assert [source.label for source in entry.sources] == ["2 km", "7 km"]
    assert sum(1 for source in entry.sources if source.label == "2 km") == 1


def test_rocket_leader_and_grunt_scoring():
    roster = [Creature(dex_number=1, name="Bulbasaur"), Creature(dex_number=4, name="Charmander")]
    payload = {
        "rockets": [
            {
                "name": "Cliff",
                "title": "Team GO Rocket Leader",
                "type": "",
                "firstPokemon": [{"name": "Bulbasaur", "isEncounter": True}],
                "secondPokemon": [{"name": "Charmander", "isEncounter": False}],
                "thirdPokemon": [{"name": "Bulbasaur", "isEncounter": True}],
            },
            {
                "name": "Fire-type Female Grunt",
                "title": "Team GO Rocket Grunt",
                "type": "Fire",
                "firstPokemon": [{"name": "Charmander", "isEncounter": True}],
                "secondPokemon": [],
                "thirdPokemon": [],
            },
            {
                "name": "Grunt",
                "title": "Team GO Rocket Grunt",
                "type": "",
                "firstPokemon": [{"name": "Charmander", "isEncounter": True}],
                "secondPomon": [],
                "thirdPokemon": [],
            },
        ]
    }
    result = {entry.name: entry for entry in _score(roster, payload)}

    assert result["Bulbasaur"].score == 2
    assert [source.label for source in result["Bulbasaur"].sources] == ["Cliff"]
    assert result["Bulbasaur"].sources[0].detail == "Team GO Rocket Leader: Cliff"
    assert result["Charmander"].score == 2
    assert [source.label for source in result["Charmander"].sources] == ["Rocket Fire", "Rocket Grunt"]


def test_scores_accumulate_across_categories_in_processing_order():
    roster = [Creature(dex_number=1, name="Bulbasaur")]
    payload = {
        "raids": [{"name": "Bulbasaur", "tier": "1-Star Raids"}],
        "research": [{"text": "Catch 3 Pokemon", "rewards": [{"name": "Bulbasaur"}]}],
        "eggs": [{"name": "Bulbasaur", "eggType": "2 km"}],
    }
    (entry,) = _score(roster, payload)
    assert entry.score == 3 + 2 + 1
    assert [source.type for source in entry.sources] == ["raid", "research", "egg"]


def test_higher_score_sorts_first():
    roster = [Creature(dex_number=1, name="Bulbasaur"), Creature(dex_number=150, name="Mewtwo")]
    payload = {
        "raids": [
            {"name": "Bulbasaur", "tier": "1-Star Raids"},
            {"name": "Mewtwo", "tier": "5-Star Raids"},
        ]
    }
    assert [entry.name for entry in _score(roster, payload)] == ["Mewtwo", "Bulbasaur"]


def test_empty_feeds_yield_empty_result(starter_roster):
    assert _score(starter_roster, {}) == []
