import logging
import sys
from collections import deque
from contextlib import contextmanager

from wsh.config import MAX_HISTORY

log = logging.getLogger(__name__)


class HistoryRing:
    """
    Bounded log of the raw lines that were executed, oldest first.

    A line equal to the newest entry is not stored again. Capacity 0
    turns recording off but keeps the existing entries until a later
    resize evicts them.
    """

    def __init__(self, capacity=MAX_HISTORY):
        if capacity < 0:
            raise ValueError("history capacity must be >= 0")
        self.capacity = capacity
        self.enabled = capacity > 0
        self._entries = deque(maxlen=capacity or None)

    def append(self, line):
        """Thêm command vào history"""
        if not self.enabled or not line or line.isspace():
            return
        if self._entries and self._entries[-1] == line:
            return
        self._entries.append(line)

    def resize(self, capacity):
        if capacity < 0:
            raise ValueError("history capacity must be >= 0")
        self.capacity = capacity
        self.enabled = capacity > 0
        if capacity > 0:
            # deque keeps the rightmost (newest) items when maxlen shrinks
            self._entries = deque(self._entries, maxlen=capacity)
        log.debug("history resized to %d, %d entries kept", capacity, len(self._entries))

    def list(self):
        """
        Entries newest-first.
        Returns: list of (position, line), position 1 is the newest
        """
        return list(enumerate(reversed(self._entries), start=1))

    def get(self, k):
        """Return the entry k positions back from the newest (1 = newest)."""
        if k < 1 or k > len(self._entries):
            raise IndexError(k)
        return self._entries[-k]

    @contextmanager
    def suppressed(self):
        """Tắt ghi history tạm thời, khôi phục trạng thái cũ khi xong"""
        previous = self.enabled
        self.enabled = False
        try:
            yield self
        finally:
            self.enabled = previous

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)


def init_readline():
    """Cấu hình readline để hoạt động giống terminal Linux"""
    if not sys.stdin.isatty():
        return False
    try:
        import readline
    except ImportError:
        return False

    try:
        # Phím mũi tên lên/xuống
        readline.parse_and_bind("\\e[A: previous-history")
        readline.parse_and_bind("\\e[B: next-history")

        # Ctrl+Left/Right để nhảy giữa các từ
        readline.parse_and_bind("\\e[1;5D: backward-word")
        readline.parse_and_bind("\\e[1;5C: forward-word")

        readline.parse_and_bind("set editing-mode emacs")
    except Exception as e:
        print(f"Warning: Could not configure readline: {e}", file=sys.stderr)
        return False
    return True
