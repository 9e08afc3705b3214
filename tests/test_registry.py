from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from playerhub import (
    ConflictError,
    InMemoryPlayerCodec,
    InvalidArgument,
    JsonPlayerCodec,
    PlayerRecord,
    PlayerRegistry,
    XmlPlayerCodec,
)


@pytest.fixture(params=["json", "xml"])
def codec_factory(request, tmp_path: Path):
    """Build a fresh codec pointing at the same file, so a registry can be 'restarted'."""
    if request.param == "json":
        path = tmp_path / "players.json"
        return lambda: JsonPlayerCodec(path)
    path = tmp_path / "players.xml"
    return lambda: XmlPlayerCodec(path)


@pytest.fixture()
def registry(codec_factory) -> PlayerRegistry:
    return PlayerRegistry(codec_factory())


# Positive cases


def test_create_player_appears_in_list(registry: PlayerRegistry):
    initial = len(registry.list())

    player_id = registry.create("testPlayer")

    player = registry.get(player_id)
    assert player == PlayerRecord(id=player_id, nickname="testPlayer", points=0, online=True)
    players = registry.list()
    assert len(players) == initial + 1
    assert player in players


def test_create_and_delete_player(registry: PlayerRegistry):
    player_id = registry.create("playerToDelete")
    created = registry.get(player_id)

    removed = registry.delete(player_id)

    assert removed == created
    assert registry.get(player_id) is None
    assert removed not in registry.list()


def test_first_id_is_one_when_no_file(registry: PlayerRegistry, codec_factory):
    assert not codec_factory().path.exists()
    assert registry.create("newPlayer") == 1
    assert codec_factory().path.exists()


def test_create_continues_after_existing_file(tmp_path: Path):
    path = tmp_path / "players.json"
    path.write_text(
        json.dumps([{"id": 1, "nickname": "existingPlayer", "points": 100, "online": True}], indent=2),
        encoding="utf-8",
    )
    registry = PlayerRegistry(JsonPlayerCodec(path))

    assert registry.create("newPlayer") == 2
    assert registry.get(1).points == 100
    assert registry.get(2) is not None


def test_add_points_accumulates(registry: PlayerRegistry):
    player_id = registry.create("playerWithPts")
    assert registry.add_points(player_id, 30) == 30
    assert registry.add_points(player_id, 20) == 50
    assert registry.get(player_id).points == 50


def test_add_zero_points_is_allowed(registry: PlayerRegistry):
    player_id = registry.create("zero")
    assert registry.add_points(player_id, 0) == 0


def test_changes_survive_restart(registry: PlayerRegistry, codec_factory):
    player_id = registry.create("playerForFile")
    registry.add_points(player_id, 42)

    reloaded = PlayerRegistry(codec_factory())

    player = reloaded.get(player_id)
    assert player is not None
    assert player.nickname == "playerForFile"
    assert player.points == 42
    assert player.online is True


def test_delete_is_persisted(registry: PlayerRegistry, codec_factory):
    keep = registry.create("keep")
    gone = registry.create("gone")
    registry.delete(gone)

    reloaded = PlayerRegistry(codec_factory())
    assert [p.id for p in reloaded.list()] == [keep]


def test_ids_are_not_reused_after_delete(registry: PlayerRegistry):
    for i in range(1, 6):
        registry.create(f"player{i}")

    registry.delete(3)

    assert registry.create("newAfterDelete") == 6
    assert [p.id for p in registry.list()] == [1, 2, 4, 5, 6]


def test_list_is_empty_without_file(registry: PlayerRegistry):
    assert registry.list() == []
    assert len(registry) == 0


def test_fifteen_character_nickname(registry: PlayerRegistry):
    nickname = "a" * 15
    player_id = registry.create(nickname)
    assert registry.get(player_id).nickname == nickname


def test_list_is_a_snapshot(registry: PlayerRegistry):
    player_id = registry.create("snap")
    before = registry.list()

    registry.add_points(player_id, 10)
    registry.create("other")

    assert before == [PlayerRecord(id=player_id, nickname="snap", points=0, online=True)]
    assert len(registry.list()) == 2


def test_end_to_end_scenario(registry: PlayerRegistry):
    player_id = registry.create("Alice")
    assert player_id == 1
    alice = registry.get(1)
    assert (alice.points, alice.online) == (0, True)

    assert registry.add_points(1, 100) == 100

    players = registry.list()
    assert len(players) == 1
    assert (players[0].id, players[0].points) == (1, 100)

    removed = registry.delete(1)
    assert removed.points == 100
    assert registry.list() == []
    assert registry.get(1) is None


# Negative cases


def test_delete_unknown_player_returns_none(registry: PlayerRegistry, codec_factory):
    registry.create("player1")
    registry.create("player2")
    mtime = codec_factory().path.stat().st_mtime_ns

    assert registry.delete(10) is None
    assert len(registry) == 2
    assert codec_factory().path.stat().st_mtime_ns == mtime


def test_duplicate_nickname_is_rejected(registry: PlayerRegistry):
    registry.create("duplicateTest")

    with pytest.raises(ConflictError, match="nickname is already in use"):
        registry.create("duplicateTest")
    assert len(registry) == 1


def test_nickname_match_is_case_sensitive(registry: PlayerRegistry):
    registry.create("Bob")
    assert registry.create("bob") == 2


def test_get_unknown_player_returns_none(registry: PlayerRegistry):
    assert registry.get(999) is None


def test_empty_nickname_is_rejected(registry: PlayerRegistry):
    with pytest.raises(InvalidArgument, match="nickname cannot be empty"):
        registry.create("")


def test_sixteen_character_nickname_is_rejected(registry: PlayerRegistry):
    with pytest.raises(InvalidArgument, match="nickname is too long"):
        registry.create("a" * 16)
    assert registry.list() == []


def test_non_string_nickname_is_rejected(registry: PlayerRegistry):
    with pytest.raises(InvalidArgument):
        registry.create(None)  # type: ignore[arg-type]


@pytest.mark.parametrize("nickname", ["bad\x01nick", "a\rb", "tab\there", "x\ud800", "end\uffff"])
def test_unstorable_nickname_is_rejected(registry: PlayerRegistry, nickname):
    with pytest.raises(InvalidArgument, match="unsupported characters"):
        registry.create(nickname)
    assert registry.list() == []


def test_rejected_nickname_leaves_stored_players_intact(registry: PlayerRegistry, codec_factory):
    registry.create("keeper")
    registry.add_points(1, 40)

    with pytest.raises(InvalidArgument):
        registry.create("bad\x01")

    restarted = PlayerRegistry(codec_factory())
    assert restarted.list() == [PlayerRecord(id=1, nickname="keeper", points=40, online=True)]


def test_negative_points_are_rejected(registry: PlayerRegistry):
    player_id = registry.create("negPoints")

    with pytest.raises(InvalidArgument, match="points cannot be negative"):
        registry.add_points(player_id, -10)
    assert registry.get(player_id).points == 0


def test_negative_points_checked_before_lookup(registry: PlayerRegistry):
    with pytest.raises(InvalidArgument, match="points cannot be negative"):
        registry.add_points(999, -1)


def test_non_integer_points_are_rejected(registry: PlayerRegistry):
    player_id = registry.create("floaty")
    with pytest.raises(InvalidArgument):
        registry.add_points(player_id, 1.5)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgument):
        registry.add_points(player_id, True)


def test_add_points_to_unknown_player_returns_none(registry: PlayerRegistry):
    assert registry.add_points(999, 10) is None
    assert registry.add_points(0, 10) is None


def test_invalid_json_file_loads_empty(tmp_path: Path):
    path = tmp_path / "players.json"
    path.write_text("invalid json", encoding="utf-8")

    registry = PlayerRegistry(JsonPlayerCodec(path))
    assert registry.list() == []


def test_duplicate_ids_in_file_keep_last(tmp_path: Path):
    path = tmp_path / "players.json"
    path.write_text(
        '[{"id":1,"nickname":"duplicate","points":10,"online":true},'
        '{"id":1,"nickname":"duplicate","points":20,"online":false}]',
        encoding="utf-8",
    )

    registry = PlayerRegistry(JsonPlayerCodec(path))

    assert len(registry) == 1
    player = registry.get(1)
    assert player.points == 20
    assert player.online is False


def test_shared_nickname_in_storage_is_logged(caplog):
    codec = InMemoryPlayerCodec(
        [PlayerRecord(id=1, nickname="twin"), PlayerRecord(id=2, nickname="twin")]
    )
    with caplog.at_level(logging.WARNING, logger="playerhub.registry"):
        registry = PlayerRegistry(codec)
    assert len(registry) == 2
    assert "share nickname" in caplog.text


# Best-effort persistence


def test_save_failure_keeps_in_memory_changes(caplog):
    codec = InMemoryPlayerCodec(fail_saves=True)
    registry = PlayerRegistry(codec)

    with caplog.at_level(logging.WARNING, logger="playerhub.registry"):
        player_id = registry.create("Alice")
        total = registry.add_points(player_id, 5)

    assert player_id == 1
    assert total == 5
    assert registry.get(1).points == 5
    assert codec.save_count == 2
    assert codec.load() == []
    assert "Failed to persist players" in caplog.text


def test_save_failure_on_delete_still_returns_record():
    codec = InMemoryPlayerCodec([PlayerRecord(id=1, nickname="solo", points=3)], fail_saves=True)
    registry = PlayerRegistry(codec)

    removed = registry.delete(1)

    assert removed == PlayerRecord(id=1, nickname="solo", points=3)
    assert 1 not in registry


def test_unwritable_storage_does_not_raise(tmp_path: Path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    registry = PlayerRegistry(JsonPlayerCodec(blocker / "players.json"))

    assert registry.create("ghost") == 1
    assert registry.get(1).nickname == "ghost"


def test_every_mutation_saves_full_state():
    codec = InMemoryPlayerCodec()
    registry = PlayerRegistry(codec)

    registry.create("a")
    registry.create("b")
    registry.add_points(2, 7)
    registry.delete(1)

    assert codec.save_count == 4
    assert codec.load() == [PlayerRecord(id=2, nickname="b", points=7, online=True)]
