from typing import Any, Callable, Dict, List, Optional, Tuple
from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus
from status_menu.shared.concurrency_helper import ConcurrencyHelper

SignalCallback = Callable[[List[Any]], None]


class SignalBus:
    """
    Listens for broadcast signals on a message bus.
    The connection lives on the shared asyncio loop; matching signals are
    handed to their callbacks in the GTK main thread with the message body
    as a list. When the bus is unreachable the listener logs a warning and
    stays inert.
    """

    def __init__(self, logger, bus_type: BusType = BusType.SYSTEM):
        self.logger = logger
        self.bus_type = bus_type
        self.bus: Optional[MessageBus] = None
        self._concurrency = ConcurrencyHelper(self)
        self._subscriptions: Dict[Tuple[str, str], List[SignalCallback]] = {}
        self._match_rules: List[str] = []

    @staticmethod
    def match_rule(interface: str) -> str:
        return f"type='signal',interface='{interface}'"

    def connect(self) -> None:
        self._concurrency.run_in_async_task(self._connect())

    async def _connect(self) -> None:
        try:
            self.bus = await MessageBus(bus_type=self.bus_type).connect()
        except Exception as e:
            self.logger.warning(
                f"Could not connect to the {self.bus_type.name.lower()} D-Bus. {e}"
            )
            self.bus = None
            return
        self.bus.add_message_handler(self._handle_message)
        for rule in list(self._match_rules):
            await self._add_match(rule)
        self.logger.debug(
            f"Listening on the {self.bus_type.name.lower()} D-Bus for {len(self._match_rules)} interface(s)."
        )

    async def _add_match(self, rule: str) -> None:
        if self.bus is None:
            return
        reply = await self.bus.call(
            Message(
                destination="org.freedesktop.DBus",
                path="/org/freedesktop/DBus",
                interface="org.freedesktop.DBus",
                member="AddMatch",
                signature="s",
                body=[rule],
            )
        )
        if reply is not None and reply.message_type == MessageType.ERROR:
            self.logger.warning(f"AddMatch for {rule} failed: {reply.body}")

    def subscribe(self, interface: str, member: str, callback: SignalCallback) -> None:
        """
        Calls `callback(body)` for every `interface.member` signal.
        Subscriptions made before the connection is up are applied on connect.
        """
        self._subscriptions.setdefault((interface, member), []).append(callback)
        rule = self.match_rule(interface)
        if rule in self._match_rules:
            return
        self._match_rules.append(rule)
        if self.bus is not None:
            self._concurrency.run_in_async_task(self._add_match(rule))

    def unsubscribe(self, interface: str, member: str, callback: SignalCallback) -> None:
        callbacks = self._subscriptions.get((interface, member), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def _handle_message(self, msg: Message) -> None:
        if msg.message_type != MessageType.SIGNAL:
            return None
        callbacks = self._subscriptions.get((msg.interface, msg.member))  # pyright: ignore
        if not callbacks:
            return None
        body = list(msg.body)
        for callback in list(callbacks):
            self._concurrency.schedule_in_gtk_thread(callback, body)
        return None

    def close(self) -> None:
        self._concurrency.cleanup()
        if self.bus is not None:
            bus, self.bus = self.bus, None
            self._concurrency.global_loop.call_soon_threadsafe(bus.disconnect)
