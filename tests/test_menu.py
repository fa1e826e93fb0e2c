import pytest

from bujo.gateway import GatewayAction, TaskActionGateway
from bujo.menu import (
    DELETE_CONFIRM_TEXT,
    MenuController,
    MenuOutcome,
    MenuPhase,
    TaskAction,
    compose_menu,
    gateway_action,
)
from bujo.models import Task, TaskEntry

from .fakes import DeferredExecutor, RecordingGateway

TASK = Task(id=42, name="Pay rent")


def _actions(entry):
    return [item.action for item in compose_menu(entry)]


def test_active_menu_offers_five_actions_in_order():
    assert _actions(TaskEntry.active(TASK)) == [
        TaskAction.EDIT,
        TaskAction.MOVE,
        TaskAction.SHARE,
        TaskAction.COMPLETE,
        TaskAction.DELETE,
    ]


def test_completed_menu_offers_uncomplete_and_delete():
    assert _actions(TaskEntry.completed(TASK)) == [TaskAction.UNCOMPLETE, TaskAction.DELETE]


def test_only_delete_is_destructive_and_confirmed():
    for entry in (TaskEntry.active(TASK), TaskEntry.completed(TASK)):
        flagged = [item.action for item in compose_menu(entry) if item.destructive]
        confirmed = [item.action for item in compose_menu(entry) if item.requires_confirmation]
        assert flagged == [TaskAction.DELETE]
        assert confirmed == [TaskAction.DELETE]


def test_complete_fires_immediately():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    assert ctl.select(TaskAction.COMPLETE) is MenuOutcome.DISPATCHED
    assert gw.calls == [("complete", 42)]
    assert ctl.phase is MenuPhase.IDLE


def test_uncomplete_fires_immediately():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.completed(TASK), gw)
    assert ctl.select(TaskAction.UNCOMPLETE) is MenuOutcome.DISPATCHED
    assert gw.calls == [("uncomplete", 42)]


def test_delete_asks_for_confirmation_first():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    assert ctl.select(TaskAction.DELETE) is MenuOutcome.CONFIRMATION_REQUIRED
    assert ctl.phase is MenuPhase.CONFIRMING
    assert ctl.prompt == DELETE_CONFIRM_TEXT
    assert gw.calls == []


def test_confirmed_delete_on_active_task_deletes():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    ctl.select(TaskAction.DELETE)
    assert ctl.confirm() is MenuOutcome.DISPATCHED
    assert gw.calls == [("delete", 42)]
    assert ctl.phase is MenuPhase.IDLE


def test_confirmed_delete_on_completed_task_deletes_completed():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.completed(TASK), gw)
    ctl.select(TaskAction.DELETE)
    ctl.confirm()
    assert gw.calls == [("delete_completed", 42)]


def test_declined_delete_dispatches_nothing_and_menu_stays_usable():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    ctl.select(TaskAction.DELETE)
    assert ctl.decline() is MenuOutcome.DECLINED
    assert gw.calls == []
    assert ctl.phase is MenuPhase.IDLE

    assert ctl.select(TaskAction.COMPLETE) is MenuOutcome.DISPATCHED
    assert gw.calls == [("complete", 42)]


def test_confirm_without_pending_is_ignored():
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    assert ctl.confirm() is MenuOutcome.IGNORED
    assert ctl.decline() is MenuOutcome.IGNORED
    assert gw.calls == []


@pytest.mark.parametrize("action", [TaskAction.EDIT, TaskAction.MOVE, TaskAction.SHARE])
def test_modal_entries_are_delegated(action):
    gw = RecordingGateway()
    ctl = MenuController(TaskEntry.active(TASK), gw)
    assert ctl.select(action) is MenuOutcome.OPEN_MODAL
    assert gw.calls == []


def test_actions_outside_the_state_are_rejected():
    ctl = MenuController(TaskEntry.completed(TASK), RecordingGateway())
    with pytest.raises(ValueError):
        ctl.select(TaskAction.COMPLETE)
    with pytest.raises(ValueError):
        ctl.select(TaskAction.EDIT)


def test_pending_state_survives_a_rerun():
    gw = RecordingGateway()
    first = MenuController(TaskEntry.completed(TASK), gw)
    first.select(TaskAction.DELETE)

    rebuilt = MenuController(TaskEntry.completed(TASK), gw, pending=first.pending)
    assert rebuilt.phase is MenuPhase.CONFIRMING
    rebuilt.confirm()
    assert gw.calls == [("delete_completed", 42)]


def test_stale_pending_action_is_dropped():
    ctl = MenuController(TaskEntry.completed(TASK), RecordingGateway(), pending=TaskAction.COMPLETE)
    assert ctl.phase is MenuPhase.IDLE


def test_duplicate_dispatch_is_reported():
    ctl = MenuController(TaskEntry.active(TASK), RecordingGateway(accept=False))
    assert ctl.select(TaskAction.COMPLETE) is MenuOutcome.DUPLICATE


def test_commands_map_to_lifecycle_requests():
    assert gateway_action(TaskEntry.active(TASK), TaskAction.COMPLETE) is GatewayAction.COMPLETE
    assert gateway_action(TaskEntry.completed(TASK), TaskAction.UNCOMPLETE) is GatewayAction.UNCOMPLETE
    assert gateway_action(TaskEntry.active(TASK), TaskAction.DELETE) is GatewayAction.DELETE
    assert gateway_action(TaskEntry.completed(TASK), TaskAction.DELETE) is GatewayAction.DELETE_COMPLETED
    assert gateway_action(TaskEntry.active(TASK), TaskAction.EDIT) is None


def test_busy_tracks_the_matching_request_only():
    gw = RecordingGateway()
    gw.in_flight.add((GatewayAction.DELETE_COMPLETED, TASK.id))

    done = MenuController(TaskEntry.completed(TASK), gw)
    assert done.is_busy(TaskAction.DELETE)
    assert not done.is_busy(TaskAction.UNCOMPLETE)

    active = MenuController(TaskEntry.active(TASK), gw)
    assert not active.is_busy(TaskAction.DELETE)
    assert not active.is_busy(TaskAction.EDIT)


def test_busy_follows_a_real_gateway_until_the_request_settles(client, store):
    executor = DeferredExecutor()
    gw = TaskActionGateway(client, executor, notifier=store.report_error)
    ctl = MenuController(TaskEntry.active(TASK), gw)

    assert ctl.select(TaskAction.COMPLETE) is MenuOutcome.DISPATCHED
    assert ctl.is_busy(TaskAction.COMPLETE)
    executor.run_all()
    assert not ctl.is_busy(TaskAction.COMPLETE)
