"""
Tests for settings and board configuration loading.
"""

import json

import pytest
from pydantic import ValidationError

from landlord.config import load_config, read_board_spec
from landlord.exceptions import ConfigurationError
from landlord.models import DeckType
from landlord.settings import EngineSettings


def write_board(tmp_path, board):
    path = tmp_path / "board.json"
    path.write_text(json.dumps(board))
    return path


def minimal_board():
    return {
        "tiles": [
            {"id": "go", "name": "Go", "group": "Special", "position": 0},
            {"id": "jail", "name": "Jail", "group": "Special", "position": 1},
            {
                "id": "oldkentroad",
                "name": "Old Kent Road",
                "group": "Brown",
                "position": 2,
                "price": 60,
                "rent": 2,
                "multiplied_rent": [10, 30, 90, 160, 250],
                "house_cost": 50,
            },
        ],
        "chance": [{"title": "Advance to Go", "action": "move", "tile_id": "go"}],
        "community_chest": [],
    }


def test_standard_board_loads(settings):
    config = load_config(settings)

    assert config.board_length == 40
    assert len(config.chance_cards) == 16
    assert len(config.community_chest_cards) == 17
    assert all(card.deck == DeckType.CHANCE for card in config.chance_cards)
    assert config.seed == 7


def test_settings_feed_the_config(settings):
    config = load_config(settings.model_copy(update={"starting_cash": 2000, "houses": 10}))

    assert config.starting_cash == 2000
    assert config.property_config.houses == 10


def test_each_load_builds_fresh_properties(settings):
    first, second = load_config(settings), load_config(settings)
    first.property_config.properties[1].owned_by = 0

    assert second.property_config.properties[1].owned_by == -1


def test_custom_board_file(tmp_path, settings):
    config = load_config(settings, write_board(tmp_path, minimal_board()))

    assert config.board_length == 3
    assert config.property_config.properties[2].name == "Old Kent Road"


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        read_board_spec(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "board.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        read_board_spec(path)


@pytest.mark.parametrize(
    "breakage",
    [
        lambda b: b["tiles"].pop(1),
        lambda b: b["tiles"][2].update(position=7),
        lambda b: b["tiles"][2].update(multiplied_rent=[10]),
        lambda b: b["tiles"][2].update(price=0),
        lambda b: b["tiles"][1].update(id="go"),
        lambda b: b["chance"][0].update(tile_id="atlantis"),
        lambda b: b["chance"][0].update(action="teleport"),
        lambda b: b["chance"].append({"title": "Nearest", "action": "movenearest"}),
    ],
    ids=[
        "no-jail",
        "gap-in-positions",
        "short-rent-schedule",
        "free-property",
        "duplicate-id",
        "unknown-card-tile",
        "unknown-card-action",
        "movenearest-without-group",
    ],
)
def test_malformed_board_raises(tmp_path, breakage):
    board = minimal_board()
    breakage(board)

    with pytest.raises(ConfigurationError):
        read_board_spec(write_board(tmp_path, board))


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LANDLORD_STARTING_CASH", "2500")
    monkeypatch.setenv("LANDLORD_LOG_LEVEL", "debug")

    settings = EngineSettings(_env_file=None)
    assert settings.starting_cash == 2500
    assert settings.log_level == "DEBUG"


def test_settings_reject_bad_values():
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None, log_level="chatty")
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None, railroad_rents=[])
