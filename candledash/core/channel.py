"""
Channel between the tick generator thread and the dashboard loop.

Forward direction: an ordered FIFO of messages (ticks, optionally a shutdown
marker). Reverse direction: a cancellation flag the producer checks once per
round. The queue and the flag are the only state shared across threads.
"""

import logging
import queue
import threading

from candledash.core.errors import ChannelClosed
from candledash.core.models import Message

logger = logging.getLogger(__name__)


class ChannelBridge:
    """
    Single-producer / single-consumer message handoff.

    Usage:
        bridge = ChannelBridge()
        bridge.send(Tick(0, candle))        # producer thread
        message = bridge.try_receive()      # consumer, never blocks
        bridge.request_shutdown()           # consumer asks producer to stop
    """

    def __init__(self, maxsize: int = 0):
        """
        Initialize the bridge.

        Args:
            maxsize: Queue capacity (0 = unbounded)
        """
        self._queue: queue.Queue[Message] = queue.Queue(maxsize=maxsize)
        self._shutdown = threading.Event()
        self._closed = threading.Event()

    # ---- producer side ----

    def send(self, message: Message, timeout: float | None = None) -> None:
        """
        Enqueue a message for the consumer.

        Args:
            message: Tick or Shutdown
            timeout: Max seconds to wait if a bounded queue is full

        Raises:
            ChannelClosed: If the consumer has closed the channel or a bounded
                queue stayed full past the timeout
        """
        if self._closed.is_set():
            raise ChannelClosed("consumer closed the channel")
        try:
            self._queue.put(message, timeout=timeout)
        except queue.Full as e:
            raise ChannelClosed("channel full, consumer not draining") from e

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    def wait_for_shutdown(self, timeout: float) -> bool:
        """
        Sleep up to timeout seconds, waking early on a shutdown request.

        Returns:
            True if shutdown was requested
        """
        return self._shutdown.wait(timeout)

    # ---- consumer side ----

    def try_receive(self) -> Message | None:
        """Return the next queued message, or None immediately if empty."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def request_shutdown(self) -> None:
        """Ask the producer to stop. Best-effort: safe if it already exited."""
        if not self._shutdown.is_set():
            logger.info("Producer shutdown requested")
        self._shutdown.set()

    def close(self) -> None:
        """Close the channel; later sends raise ChannelClosed."""
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def pending(self) -> int:
        """Approximate number of queued messages."""
        return self._queue.qsize()
