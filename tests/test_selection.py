from fieldops.services.notifications import FeedbackEvent
from fieldops.services.selection import SelectionManager, SelectionMode


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[FeedbackEvent] = []

    def notify(self, event: FeedbackEvent) -> None:
        self.events.append(event)


class FakeTimer:
    def __init__(self, delay, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def call_later(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled]

    def fire_pending(self) -> None:
        for timer in self.pending():
            timer.cancelled = True
            timer.callback()


def _manager(**kwargs):
    notifier = RecordingNotifier()
    scheduler = FakeScheduler()
    manager = SelectionManager(notifier=notifier, scheduler=scheduler, **kwargs)
    return manager, notifier, scheduler


def test_starts_inactive_and_empty():
    manager, _, _ = _manager()

    assert manager.mode is SelectionMode.INACTIVE
    assert manager.selected_ids == ()
    assert manager.selection_count == 0


def test_toggle_adds_and_removes_in_insertion_order():
    manager, notifier, _ = _manager()
    manager.enter_mode()

    assert manager.toggle("a")
    assert manager.toggle("b")
    assert manager.toggle("c")
    assert manager.toggle("b")

    assert manager.selected_ids == ("a", "c")
    assert manager.is_selected("a")
    assert not manager.is_selected("b")
    assert notifier.events == [FeedbackEvent.SELECTION_CHANGED] * 4


def test_toggle_at_capacity_is_rejected_with_error_feedback():
    manager, notifier, _ = _manager(max_selections=2)
    manager.enter_mode()
    manager.toggle("a")
    manager.toggle("b")
    notifier.events.clear()

    assert manager.toggle("c") is False

    assert manager.selected_ids == ("a", "b")
    assert notifier.events == [FeedbackEvent.ERROR]


def test_toggle_at_capacity_still_allows_deselecting():
    manager, _, _ = _manager(max_selections=2)
    manager.enter_mode()
    manager.toggle("a")
    manager.toggle("b")

    assert manager.toggle("a") is True
    assert manager.selected_ids == ("b",)


def test_select_all_truncates_to_capacity():
    manager, notifier, _ = _manager(max_selections=3)
    manager.enter_mode()

    manager.select_all(["w", "x", "y", "z"])

    assert manager.selected_ids == ("w", "x", "y")
    assert notifier.events[-1] is FeedbackEvent.SELECTION_CHANGED


def test_select_all_replaces_previous_selection():
    manager, _, _ = _manager()
    manager.enter_mode()
    manager.toggle("old")

    manager.select_all(["new-1", "new-2"])

    assert manager.selected_ids == ("new-1", "new-2")


def test_clear_empties_selection_without_leaving_mode():
    manager, _, _ = _manager()
    manager.enter_mode()
    manager.select_all(["a", "b"])

    manager.clear()

    assert manager.selected_ids == ()
    assert manager.is_active


def test_exit_mode_clears_selection():
    manager, _, scheduler = _manager()
    manager.enter_mode()
    manager.select_all(["a", "b"])

    manager.exit_mode()

    assert manager.mode is SelectionMode.INACTIVE
    assert manager.selected_ids == ()
    assert scheduler.pending() == []


def test_empty_selection_exits_after_grace_period():
    manager, _, scheduler = _manager(grace_ms=1000)
    manager.enter_mode()
    manager.toggle("a")
    manager.toggle("a")

    pending = scheduler.pending()
    assert len(pending) == 1
    assert pending[0].delay == 1.0
    assert manager.is_active

    scheduler.fire_pending()

    assert manager.mode is SelectionMode.INACTIVE


def test_reselecting_within_grace_period_keeps_mode():
    manager, _, scheduler = _manager()
    manager.enter_mode()
    manager.toggle("a")
    manager.toggle("a")
    timer = scheduler.pending()[0]

    manager.toggle("b")

    assert timer.cancelled
    assert scheduler.pending() == []
    assert manager.is_active
    assert manager.selected_ids == ("b",)


def test_grace_callback_is_noop_when_selection_refilled():
    manager, _, scheduler = _manager()
    manager.enter_mode()
    timer = scheduler.pending()[0]
    manager.toggle("a")

    # A callback that already fired from the loop must not clear a live selection.
    timer.callback()

    assert manager.is_active
    assert manager.selected_ids == ("a",)


def test_no_timer_is_armed_while_inactive():
    manager, _, scheduler = _manager()

    manager.clear()

    assert scheduler.timers == []


def test_on_change_receives_snapshots():
    snapshots = []
    manager, _, _ = _manager(on_change=snapshots.append)
    manager.enter_mode()
    manager.toggle("a")
    manager.toggle("b")
    manager.exit_mode()

    assert snapshots == [(), ("a",), ("a", "b"), ()]


def test_without_event_loop_grace_timer_is_skipped():
    manager = SelectionManager(notifier=RecordingNotifier())

    manager.enter_mode()
    manager.clear()

    assert manager.is_active
