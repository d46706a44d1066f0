import json

from watchdog_bot.storage import NICKNAME_HISTORY_LIMIT, StorageManager


def test_storage_init_creates_root(tmp_path):
    root = tmp_path / "data"
    storage = StorageManager(root)
    assert root.is_dir()
    assert storage.config_path.name == "config.json"
    assert storage.nickname_path.name == "nickname_history.json"
    assert storage.log_channels() == {}


def test_log_channel_persists_across_reload(tmp_path):
    storage = StorageManager(tmp_path)
    storage.set_log_channel(123, 456)

    reloaded = StorageManager(tmp_path)
    assert reloaded.get_log_channel(123) == 456
    # Keys and values are written as strings
    assert json.loads(storage.config_path.read_text()) == {"123": "456"}


def test_set_log_channel_overwrites(storage):
    storage.set_log_channel(1, 10)
    storage.set_log_channel(1, 20)
    assert storage.get_log_channel(1) == 20


def test_remove_log_channel_respects_expected(tmp_path):
    storage = StorageManager(tmp_path)
    storage.set_log_channel(1, 10)

    assert storage.remove_log_channel(1, expected=99) is False
    assert storage.get_log_channel(1) == 10

    assert storage.remove_log_channel(1, expected=10) is True
    assert storage.get_log_channel(1) is None
    assert storage.remove_log_channel(1) is False

    assert StorageManager(tmp_path).get_log_channel(1) is None


def test_record_nickname_prepends_and_dedups(storage):
    assert storage.record_nickname(1, 2, "alpha") is True
    assert storage.record_nickname(1, 2, "beta") is True
    assert storage.record_nickname(1, 2, "alpha") is False
    assert storage.record_nickname(1, 2, None) is False

    assert storage.get_nickname_history(1, 2) == ["beta", "alpha"]
    assert storage.get_nickname_history(1, 3) == []


def test_record_nickname_is_bounded(tmp_path):
    storage = StorageManager(tmp_path)
    for index in range(NICKNAME_HISTORY_LIMIT + 5):
        storage.record_nickname(1, 2, f"nick-{index}")

    history = storage.get_nickname_history(1, 2)
    assert len(history) == NICKNAME_HISTORY_LIMIT
    assert history[0] == f"nick-{NICKNAME_HISTORY_LIMIT + 4}"
    assert "nick-0" not in history

    assert StorageManager(tmp_path).get_nickname_history(1, 2) == history


def test_get_nickname_history_returns_copy(storage):
    storage.record_nickname(1, 2, "alpha")
    storage.get_nickname_history(1, 2).append("mutated")
    assert storage.get_nickname_history(1, 2) == ["alpha"]


def test_corrupt_files_start_empty(tmp_path):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "nickname_history.json").write_text("[", encoding="utf-8")

    storage = StorageManager(tmp_path)
    assert storage.log_channels() == {}
    assert storage.get_nickname_history(1, 2) == []


def test_load_discards_invalid_entries(tmp_path):
    (tmp_path / "config.json").write_text(
        json.dumps({"1": "10", "bad": "20", "3": None, "4": 40}), encoding="utf-8"
    )
    (tmp_path / "nickname_history.json").write_text(
        json.dumps({"1": {"2": ["a", "a", 5, "b"], "x": ["c"]}, "2": "nope"}), encoding="utf-8"
    )

    storage = StorageManager(tmp_path)
    assert storage.log_channels() == {1: 10, 4: 40}
    assert storage.get_nickname_history(1, 2) == ["a", "b"]


def test_save_then_load_is_stable(tmp_path):
    storage = StorageManager(tmp_path)
    storage.set_log_channel(1, 10)
    storage.record_nickname(1, 2, "alpha")
    config_before = storage.config_path.read_text()
    nicknames_before = storage.nickname_path.read_text()

    reloaded = StorageManager(tmp_path)
    reloaded.save()
    assert reloaded.config_path.read_text() == config_before
    assert reloaded.nickname_path.read_text() == nicknames_before
