"""Unit tests for the event dispatcher."""

from unittest.mock import Mock, call

import pytest
from polling_file_watcher.core import IFileNotificationListener
from polling_file_watcher.models import DiffResult, FileRecord, WatchEventType
from polling_file_watcher.monitoring import EventDispatcher


def make_record(path: str, mtime: int = 1, is_directory: bool = False) -> FileRecord:
    return FileRecord(path=path, short_name=path.rsplit("/", 1)[-1], last_modified_ns=mtime, is_directory=is_directory)


@pytest.fixture
def dispatcher():
    """Create an EventDispatcher instance."""
    return EventDispatcher()


@pytest.fixture
def mock_listener():
    """Create a mock listener."""
    return Mock(spec=IFileNotificationListener)


class TestEventDispatcher:
    """Test cases for EventDispatcher."""

    def test_file_and_directory_variants(self, dispatcher, mock_listener):
        """Test that the callback variant follows the record kind."""
        file_old, file_new = make_record("/w/a.txt", 1), make_record("/w/a.txt", 2)
        dir_old, dir_new = make_record("/w/d", 1, True), make_record("/w/d", 2, True)
        gone_file, gone_dir = make_record("/w/gone.txt"), make_record("/w/gone", is_directory=True)
        new_file, new_dir = make_record("/w/new.txt"), make_record("/w/new", is_directory=True)

        result = DiffResult(
            created=[new_file, new_dir],
            modified=[(file_old, file_new), (dir_old, dir_new)],
            deleted=[gone_file, gone_dir],
        )

        report = dispatcher.dispatch(result, [("/w", mock_listener)])

        mock_listener.on_modify_file.assert_called_once_with(file_old, file_new)
        mock_listener.on_modify_directory.assert_called_once_with(dir_old, dir_new)
        mock_listener.on_delete_file.assert_called_once_with(gone_file)
        mock_listener.on_delete_directory.assert_called_once_with(gone_dir)
        mock_listener.on_create_file.assert_called_once_with(new_file)
        mock_listener.on_create_directory.assert_called_once_with(new_dir)
        assert report.delivered == 6
        assert report.failed == 0

    def test_order_modify_delete_create(self, dispatcher, mock_listener):
        """Test that modifications go first, then deletions, then creations."""
        result = DiffResult(
            created=[make_record("/w/c.txt")],
            modified=[(make_record("/w/m.txt", 1), make_record("/w/m.txt", 2))],
            deleted=[make_record("/w/d.txt")],
        )

        dispatcher.dispatch(result, [("/w", mock_listener)])

        names = [method_call[0] for method_call in mock_listener.method_calls]
        assert names == ["on_modify_file", "on_delete_file", "on_create_file"]

    def test_only_listeners_for_containing_directory(self, dispatcher, listener_factory):
        """Test that a change under /watched/x reaches only the /watched/x listener."""
        x_listener, y_listener = listener_factory(), listener_factory()
        result = DiffResult(created=[make_record("/watched/x/file.txt")])

        dispatcher.dispatch(result, [("/watched/x", x_listener), ("/watched/y", y_listener)])

        assert x_listener.kinds_for("/watched/x/file.txt") == [WatchEventType.CREATE]
        assert y_listener.events == []

    def test_prefix_sibling_not_matched(self, dispatcher, mock_listener):
        """Test that a listener on /data ignores changes under /database."""
        result = DiffResult(created=[make_record("/database/readme")])

        report = dispatcher.dispatch(result, [("/data", mock_listener)])

        mock_listener.on_create_file.assert_not_called()
        assert report.delivered == 0

    def test_root_directory_itself_matches(self, dispatcher, mock_listener):
        """Test that a change to the registered directory itself is delivered."""
        old, new = make_record("/w", 1, True), make_record("/w", 2, True)

        dispatcher.dispatch(DiffResult(modified=[(old, new)]), [("/w", mock_listener)])

        mock_listener.on_modify_directory.assert_called_once_with(old, new)

    def test_nested_registrations_both_notified(self, dispatcher, listener_factory):
        """Test that listeners on an ancestor and a descendant both receive the change."""
        outer, inner = listener_factory(), listener_factory()
        result = DiffResult(deleted=[make_record("/w/a/b/file.txt")])

        dispatcher.dispatch(result, [("/w", outer), ("/w/a/b", inner)])

        assert outer.kinds_for("/w/a/b/file.txt") == [WatchEventType.DELETE]
        assert inner.kinds_for("/w/a/b/file.txt") == [WatchEventType.DELETE]

    def test_failing_listener_does_not_block_others(self, dispatcher, listener_factory):
        """Test that an exception from one listener is isolated."""
        failing = Mock(spec=IFileNotificationListener)
        failing.on_create_file.side_effect = RuntimeError("listener exploded")
        healthy = listener_factory()
        result = DiffResult(created=[make_record("/w/a.txt"), make_record("/w/b.txt")])

        report = dispatcher.dispatch(result, [("/w", failing), ("/w", healthy)])

        assert failing.on_create_file.call_args_list == [call(result.created[0]), call(result.created[1])]
        assert healthy.paths(WatchEventType.CREATE) == {"/w/a.txt", "/w/b.txt"}
        assert report.failed == 2
        assert report.delivered == 2
        assert "listener exploded" in report.errors[0]

    def test_no_registrations(self, dispatcher):
        """Test dispatching with nobody listening."""
        report = dispatcher.dispatch(DiffResult(created=[make_record("/w/a.txt")]), [])

        assert report.delivered == 0
        assert str(report) == "DispatchReport(delivered=0, failed=0)"

    def test_unchanged_records_not_dispatched(self, dispatcher, mock_listener):
        """Test that unchanged records produce no notifications."""
        dispatcher.dispatch(DiffResult(unchanged=[make_record("/w/a.txt")]), [("/w", mock_listener)])

        assert mock_listener.method_calls == []
