import pytest

from divesim.core.timers import QtTimerService, VirtualTimerService


class TestVirtualTimers:
    def test_call_later_fires_once(self):
        timers = VirtualTimerService()
        fired = []
        handle = timers.call_later(2.0, lambda: fired.append(timers.now()))
        timers.advance(1.9)
        assert fired == []
        timers.advance(0.2)
        assert fired == [2.0]
        assert not handle.active
        timers.advance(10)
        assert fired == [2.0]

    def test_call_every(self):
        timers = VirtualTimerService(start=10.0)
        fired = []
        timers.call_every(1.0, lambda: fired.append(timers.now()))
        timers.advance(3.5)
        assert fired == [11.0, 12.0, 13.0]
        assert timers.now() == 13.5

    def test_same_time_fires_in_order(self):
        timers = VirtualTimerService()
        order = []
        timers.call_later(1.0, lambda: order.append("a"))
        timers.call_later(1.0, lambda: order.append("b"))
        timers.advance(1.0)
        assert order == ["a", "b"]

    def test_cancel(self):
        timers = VirtualTimerService()
        fired = []
        handle = timers.call_every(1.0, lambda: fired.append(1))
        timers.advance(2)
        handle.cancel()
        timers.advance(5)
        assert fired == [1, 1]
        assert timers.pending() == 0

    def test_callback_can_schedule(self):
        timers = VirtualTimerService()
        fired = []
        timers.call_later(1.0, lambda: timers.call_later(1.0, lambda: fired.append(timers.now())))
        timers.advance(5)
        assert fired == [2.0]

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            VirtualTimerService().call_every(0, lambda: None)


@pytest.fixture(scope="module")
def qt_app():
    from PySide6.QtCore import QCoreApplication
    return QCoreApplication.instance() or QCoreApplication([])


class TestQtTimers:
    def test_call_every_starts_active(self, qt_app):
        timers = QtTimerService()
        handle = timers.call_every(1.0, lambda: None)
        assert handle.active
        handle.cancel()
        assert not handle.active

    def test_call_later_fires_on_event_loop(self, qt_app):
        from PySide6.QtCore import QEventLoop, QTimer

        timers = QtTimerService()
        fired = []
        loop = QEventLoop()
        timers.call_later(0.01, lambda: (fired.append(True), loop.quit()))
        QTimer.singleShot(2000, loop.quit)  # guard against hangs
        loop.exec()
        assert fired == [True]

    def test_clock(self):
        assert QtTimerService(clock=lambda: 42.0).now() == 42.0

    def test_invalid_interval(self, qt_app):
        with pytest.raises(ValueError):
            QtTimerService().call_every(-1, lambda: None)
