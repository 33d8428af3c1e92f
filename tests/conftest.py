import pytest
from pathlib import Path

from httpsendfile.errors import ClientDisconnected
from httpsendfile.file import ContentTypeProbe
from httpsendfile.streamer import FileStreamer
from httpsendfile.transfer import HTTPExchange, TransferPolicy


class MemoryExchange(HTTPExchange):
    """
    Exchange that records everything the streamer does.

    disconnect_after: report the client gone once this many chunks were written
    fail_on_write: raise ClientDisconnected on this write (1-based)
    """

    def __init__(self, range_header=None, disconnect_after=None, fail_on_write=None):
        super().__init__(range_header)
        self.disconnect_after = disconnect_after
        self.fail_on_write = fail_on_write
        self.head = None
        self.writes = []
        self.flushes = 0
        self.events = []

    @property
    def body(self) -> bytes:
        return b''.join(self.writes)

    def disable_output_buffering(self):
        self.events.append('disable_buffering')

    def disable_compression(self):
        self.events.append('disable_compression')

    async def start(self, head):
        self.head = head
        self.events.append('start')

    async def write(self, data):
        if self.fail_on_write is not None and len(self.writes) + 1 >= self.fail_on_write:
            raise ClientDisconnected("peer closed")
        self.writes.append(data)
        self.events.append('write')

    async def flush(self):
        self.flushes += 1
        self.events.append('flush')

    async def is_disconnected(self):
        return self.disconnect_after is not None and len(self.writes) >= self.disconnect_after


async def no_sleep(seconds):
    return None


# Test Data Fixtures

@pytest.fixture
def file_data():
    """1000 bytes where every position is distinguishable from its neighbours."""
    return bytes(i % 251 for i in range(1000))


@pytest.fixture
def sample_file(tmp_path, file_data) -> Path:
    path = tmp_path / "sample.bin"
    path.write_bytes(file_data)
    return path


@pytest.fixture
def empty_file(tmp_path) -> Path:
    path = tmp_path / "empty.bin"
    path.write_bytes(b'')
    return path


# Streamer Fixtures

@pytest.fixture
def make_exchange():
    def factory(range_header=None, **kwargs):
        return MemoryExchange(range_header, **kwargs)
    return factory


@pytest.fixture
def fixed_probe():
    """Probe that never touches host MIME libraries."""
    return ContentTypeProbe(strategies=[lambda path: "application/x-test"])


@pytest.fixture
def streamer(fixed_probe):
    return FileStreamer(
        policy=TransferPolicy(chunk_bytes=100, delay_seconds=0),
        probe=fixed_probe,
        sleep=no_sleep,
    )
