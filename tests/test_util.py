import logging
from unittest.mock import MagicMock, call

from zigwire import util


class Listenable(util.ListenableMixin):
    pass


def test_listenable():
    listen = Listenable()

    # Called first to check that a failing listener does not stop the others
    broken_listener = MagicMock()
    broken_listener.event.side_effect = Exception()
    listen.add_listener(broken_listener)

    listener = MagicMock(spec_set=["event"])
    listen.add_listener(listener)
    listen.add_listener(listener)

    context_listener = MagicMock(spec_set=["event"])
    listen.add_context_listener(context_listener)

    listen.listener_event("event", "test1")
    assert listener.event.mock_calls == [call("test1"), call("test1")]
    assert context_listener.event.mock_calls == [call(listen, "test1")]
    assert broken_listener.event.mock_calls == [call("test1")]

    listen.listener_event("non_existing_event", "test2")
    assert listener.event.call_count == 2
    assert context_listener.event.call_count == 1

    listen.remove_listener(listener)
    listen.remove_listener(listener)
    listen.remove_listener(context_listener)
    listen.remove_listener(broken_listener)
    listen.listener_event("event", "test3")

    assert listener.event.call_count == 2
    assert context_listener.event.call_count == 1


def test_listener_removed_during_event():
    listen = Listenable()
    mutating_listener = MagicMock()
    mutating_listener.event.side_effect = lambda value: listen.remove_listener(
        mutating_listener
    )

    listen.add_listener(mutating_listener)
    listen.listener_event("event", "value")

    assert mutating_listener.event.mock_calls == [call("value")]
    assert listen._listeners == {}


def test_log_stacklevel():
    class MockHandler(logging.Handler):
        emit = MagicMock()

    handler = MockHandler()

    LOGGER = logging.getLogger("test_log_stacklevel")
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(handler)

    class TestClass(util.LocalLogMixin):
        def log(self, lvl, msg, *args, **kwargs):
            LOGGER.log(lvl, msg, *args, **kwargs)

        def test_method(self):
            self.info("Test1")
            LOGGER.info("Test2")

    TestClass().test_method()
    LOGGER.removeHandler(handler)

    assert handler.emit.call_count == 2

    first, second = (c.args[0] for c in handler.emit.mock_calls)
    assert first.lineno == second.lineno - 1
