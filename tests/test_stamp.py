from status_menu.core.stamp import StampFile


def test_create_and_remove(tmp_path, logger):
    stamp = StampFile(tmp_path / "run" / "status-menu.stamp", logger)
    assert stamp.exists() is False
    stamp.create()
    assert stamp.exists() is True
    stamp.remove()
    assert stamp.exists() is False
    logger.warning.assert_not_called()


def test_leftover_stamp_is_reported(tmp_path, logger):
    path = tmp_path / "status-menu.stamp"
    path.touch()
    StampFile(path, logger).create()
    logger.warning.assert_called_once()
    assert path.exists()


def test_remove_missing_stamp_is_silent(tmp_path, logger):
    StampFile(tmp_path / "status-menu.stamp", logger).remove()
    logger.warning.assert_not_called()
