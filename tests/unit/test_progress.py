from __future__ import annotations

from unittest.mock import patch

from roster_import.services.progress import ProgressTracker, StageIndicator, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:

    def test_init_with_tty_enabled(self):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=True), \
             patch('roster_import.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(5, description="Scanning rows")

            assert tracker.total == 5
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Scanning rows",
                unit="row",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_disabled_without_tty(self):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=False), \
             patch('roster_import.services.progress.tqdm') as mock_tqdm:
            tracker = ProgressTracker(3)
            tracker.advance()
            tracker.set_postfix(records=1)
            tracker.close()
            assert tracker.enabled is False
            assert tracker.current == 1
            mock_tqdm.assert_not_called()

    def test_caller_can_disable(self):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=True), \
             patch('roster_import.services.progress.tqdm') as mock_tqdm:
            tracker = ProgressTracker(3, enabled=False)
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_context_manager_updates_and_closes(self):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=True), \
             patch('roster_import.services.progress.tqdm') as mock_tqdm:
            bar = mock_tqdm.return_value
            with ProgressTracker(2) as tracker:
                tracker.advance()
                tracker.advance()
                tracker.set_postfix(records=2, skipped=0)
            assert bar.update.call_count == 2
            bar.set_postfix.assert_called_once_with(records=2, skipped=0)
            bar.close.assert_called_once()


class TestStageIndicator:

    def test_prints_on_tty(self, capsys):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=True):
            ind = StageIndicator("roster.csv")
        ind.start_stage("fetching")
        ind.finish_stage(True, "12 rows")
        ind.start_stage("mapping")
        ind.finish_stage(False)
        out = capsys.readouterr().out
        assert "fetching... 12 rows ✓" in out
        assert "mapping... ✗" in out

    def test_silent_without_tty(self, capsys):
        with patch('roster_import.services.progress.is_tty_enabled', return_value=False):
            ind = StageIndicator("roster.csv")
        ind.start_stage("fetching")
        ind.finish_stage(True)
        assert capsys.readouterr().out == ""
        assert ind.current_stage is None
