"""Unit tests for ReplayView, the per-consumer read cursor."""

import io

import pytest

from replayable_body.core.view import EOF, ReplayView


class TestReadByte:
    """Test suite for byte-at-a-time reads."""

    def test_reads_bytes_in_order_then_eof(self) -> None:
        """Each read_byte returns the next byte, then EOF."""
        view = ReplayView(b"hello")

        values = [view.read_byte() for _ in range(5)]

        assert bytes(values) == b"hello"
        assert view.read_byte() == EOF
        assert view.read_byte() == EOF

    def test_eof_is_minus_one(self) -> None:
        """EOF signal is -1 so it never collides with a byte value."""
        assert EOF == -1

    def test_high_byte_values(self) -> None:
        """Bytes above 127 come back as unsigned ints."""
        view = ReplayView(b"\x00\x7f\x80\xff")

        assert [view.read_byte() for _ in range(4)] == [0, 127, 128, 255]

    def test_position_advances_by_one(self) -> None:
        """Position tracks the number of bytes read."""
        view = ReplayView(b"abc")

        assert view.position == 0
        view.read_byte()
        assert view.position == 1
        assert view.tell() == 1


class TestStates:
    """Test suite for the Open -> Exhausted state machine."""

    def test_is_finished_false_until_last_byte(self) -> None:
        """is_finished flips exactly when position reaches length."""
        view = ReplayView(b"hello")

        for _ in range(5):
            assert view.is_finished() is False
            view.read_byte()

        assert view.is_finished() is True

    def test_empty_view_is_finished_immediately(self) -> None:
        """An empty body is exhausted from the first check."""
        view = ReplayView(b"")

        assert view.is_finished() is True
        assert view.read_byte() == EOF

    def test_is_ready_always_true(self) -> None:
        """Buffered data is ready before, during and after reading."""
        view = ReplayView(b"ab")

        assert view.is_ready() is True
        view.read_byte()
        assert view.is_ready() is True
        view.read()
        assert view.is_ready() is True
        assert view.is_finished() is True
        assert view.is_ready() is True

    def test_set_read_listener_is_inert(self) -> None:
        """Registering a listener never calls it and never raises."""
        calls: list[str] = []
        view = ReplayView(b"data")

        view.set_read_listener(lambda: calls.append("called"))
        view.read()
        view.set_read_listener(None)

        assert calls == []
        assert view.is_ready() is True

    def test_available_counts_remaining_bytes(self) -> None:
        """available() equals length minus position at every step."""
        view = ReplayView(b"abcd")

        assert view.available() == 4
        view.read(3)
        assert view.available() == 1
        view.read_byte()
        assert view.available() == 0


class TestStreamProtocol:
    """Test suite for the standard io reading methods."""

    def test_read_all(self) -> None:
        view = ReplayView(b"hello world")

        assert view.read() == b"hello world"
        assert view.read() == b""

    def test_read_in_sizes(self) -> None:
        view = ReplayView(b"hello world")

        assert view.read(5) == b"hello"
        assert view.read(1) == b" "
        assert view.read(100) == b"world"
        assert view.read(1) == b""

    def test_read_none_reads_everything(self) -> None:
        view = ReplayView(b"abc")

        assert view.read(None) == b"abc"

    def test_read_zero(self) -> None:
        view = ReplayView(b"abc")

        assert view.read(0) == b""
        assert view.position == 0

    def test_readinto(self) -> None:
        view = ReplayView(b"hello")
        target = bytearray(3)

        assert view.readinto(target) == 3
        assert target == bytearray(b"hel")
        assert view.readinto(target) == 2
        assert target[:2] == bytearray(b"lo")
        assert view.readinto(target) == 0

    def test_readline_and_iteration(self) -> None:
        view = ReplayView(b"one\ntwo\nthree")

        assert view.readline() == b"one\n"
        assert list(view) == [b"two\n", b"three"]

    def test_mixed_read_styles_share_position(self) -> None:
        """Byte reads and bulk reads advance the same cursor."""
        view = ReplayView(b"abcdef")

        assert view.read_byte() == ord("a")
        assert view.read(2) == b"bc"
        assert view.read_byte() == ord("d")
        assert view.readall() == b"ef"

    def test_view_is_readable_not_writable(self) -> None:
        view = ReplayView(b"abc")

        assert view.readable() is True
        assert view.writable() is False
        assert view.seekable() is False

    def test_works_with_buffered_reader(self) -> None:
        """A view can back a standard BufferedReader."""
        reader = io.BufferedReader(ReplayView(b"payload"))

        assert reader.read() == b"payload"

    def test_length(self) -> None:
        assert ReplayView(b"12345").length == 5


class TestClosedView:
    """Test suite for views after close()."""

    def test_read_after_close_raises(self) -> None:
        view = ReplayView(b"abc")
        view.close()

        with pytest.raises(ValueError):
            view.read()
        with pytest.raises(ValueError):
            view.read_byte()

    def test_closed_view_reports_finished(self) -> None:
        """A closed view can never yield data, so it reports finished."""
        view = ReplayView(b"abc")
        view.close()

        assert view.is_finished() is True

    def test_context_manager_closes(self) -> None:
        with ReplayView(b"abc") as view:
            assert view.read() == b"abc"

        assert view.closed is True


class TestBufferIsolation:
    """Test suite for views never modifying the shared buffer."""

    def test_view_does_not_modify_buffer(self) -> None:
        buffer = b"immutable"
        view = ReplayView(buffer)
        view.read()

        assert buffer == b"immutable"

    def test_two_views_over_same_buffer_are_independent(self) -> None:
        buffer = b"shared"
        first = ReplayView(buffer)
        second = ReplayView(buffer)

        assert first.read(3) == b"sha"
        assert second.read_byte() == ord("s")
        assert first.read() == b"red"
        assert second.read() == b"hared"
