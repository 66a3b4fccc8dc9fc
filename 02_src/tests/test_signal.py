"""Tests for ExecutionSignal."""

from datapipe.models import ExecutionSignal


class TestExecutionSignal:
    """Tests for stop/reset behaviour."""

    def test_new_signal_is_clear(self):
        """Test that a new signal is not stopped."""
        signal = ExecutionSignal()
        assert signal.stopped is False
        assert signal.reason is None
        assert signal.annotations == {}

    def test_stop_with_reason(self):
        """Test stopping with a reason."""
        signal = ExecutionSignal()
        signal.stop("guard")
        assert signal.stopped is True
        assert signal.reason == "guard"

    def test_stop_without_reason(self):
        """Test stopping without a reason."""
        signal = ExecutionSignal()
        signal.stop()
        assert signal.stopped is True
        assert signal.reason is None

    def test_stays_stopped_until_reset(self):
        """Test that a stopped signal stays stopped."""
        signal = ExecutionSignal()
        signal.stop("first")
        assert signal.stopped is True
        assert signal.stopped is True

    def test_reset_after_stop(self):
        """Test that reset restores stopped=False and reason=None."""
        signal = ExecutionSignal()
        signal.stop("guard")
        signal.reset()
        assert signal.stopped is False
        assert signal.reason is None

    def test_reset_keeps_annotations(self):
        """Test that reset leaves pending annotations alone."""
        signal = ExecutionSignal()
        signal.annotate("rows", 3)
        signal.stop()
        signal.reset()
        assert signal.annotations == {"rows": 3}


class TestAnnotations:
    """Tests for telemetry annotations."""

    def test_take_annotations_returns_copy_and_clears(self):
        """Test that take_annotations hands over and clears."""
        signal = ExecutionSignal()
        signal.annotate("rows", 3)
        signal.annotate("source", "db")

        taken = signal.take_annotations()

        assert taken == {"rows": 3, "source": "db"}
        assert signal.annotations == {}
        signal.annotate("other", 1)
        assert "other" not in taken

    def test_signals_do_not_share_annotations(self):
        """Test that each signal has its own annotations."""
        first = ExecutionSignal()
        second = ExecutionSignal()
        first.annotate("key", "value")
        assert second.annotations == {}
