"""
Event Queue Protocol - the sink interface the detection session publishes to.

queue.Queue satisfies it directly, so a UI thread can drain events at its
own pace. CallbackQueueAdapter turns a plain function into a sink for
consumers that want to be called instead.

Usage:
    import queue
    events: EventQueue = queue.Queue()
    session.subscribe(events)

    session.subscribe(CallbackQueueAdapter(print))
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventQueue(Protocol):
    """
    Protocol for event sinks.

    The session always publishes with block=False; a bounded sink that is
    full should raise queue.Full.
    """

    def put(
        self,
        event: dict[str, Any],
        block: bool = True,
        timeout: float | None = None,
    ) -> None: ...


class CallbackQueueAdapter:
    """
    Wraps a callback function as an EventQueue.

    Example:
        def on_event(event):
            print(event["event_type"])

        session.subscribe(CallbackQueueAdapter(on_event))
    """

    def __init__(self, callback):
        self._callback = callback

    def put(
        self,
        event: dict[str, Any],
        block: bool = True,
        timeout: float | None = None,
    ) -> None:
        """Call the callback synchronously; block and timeout do not apply."""
        self._callback(event)
