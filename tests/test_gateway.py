from bujo.gateway import GatewayAction, MutationEvent, TaskActionGateway

from .fakes import DeferredExecutor, FakeApiClient, http_error, raw_projects, raw_task


def _gateway(client, executor, errors=None, events=None):
    gw = TaskActionGateway(client, executor, notifier=errors.append if errors is not None else None)
    if events is not None:
        gw.add_listener(events.append)
    return gw


def test_each_action_hits_its_route(client, executor):
    gw = _gateway(client, executor)
    assert gw.complete(1)
    assert gw.uncomplete(2)
    assert gw.delete(3)
    assert gw.delete_completed(4)
    assert client.calls == [
        ("complete_task", 1),
        ("uncomplete_task", 2),
        ("delete_task", 3),
        ("delete_completed_task", 4),
    ]


def test_settled_request_emits_event(client, executor):
    events = []
    gw = _gateway(client, executor, events=events)
    gw.complete(7)
    assert events == [MutationEvent(GatewayAction.COMPLETE, 7, ok=True)]


def test_duplicate_while_in_flight_is_dropped():
    client = FakeApiClient()
    executor = DeferredExecutor()
    gw = _gateway(client, executor)

    assert gw.complete(5) is True
    assert gw.is_in_flight(GatewayAction.COMPLETE, 5)
    assert gw.complete(5) is False
    # A different action on the same task is not a duplicate.
    assert gw.delete(5) is True

    executor.run_all()
    assert client.called("complete_task") == [("complete_task", 5)]
    assert not gw.is_in_flight(GatewayAction.COMPLETE, 5)
    assert gw.complete(5) is True


def test_failure_goes_to_notifier_once_and_event_still_fires(client, executor):
    client.results["delete_task"] = http_error(403, "Only owner can delete")
    errors, events = [], []
    gw = _gateway(client, executor, errors=errors, events=events)

    assert gw.delete(9) is True
    assert errors == ["Could not delete task 9: HTTP 403: Only owner can delete"]
    assert events[0].ok is False
    assert events[0].error == "HTTP 403: Only owner can delete"


def test_raising_client_is_contained(client, executor):
    client.raises["uncomplete_task"] = RuntimeError("boom")
    errors, events = [], []
    gw = _gateway(client, executor, errors=errors, events=events)

    assert gw.uncomplete(3) is True
    assert errors == ["Could not uncomplete task 3: boom"]
    assert events[0].ok is False
    assert not gw.is_in_flight(GatewayAction.UNCOMPLETE, 3)


def test_shut_down_executor_reports_and_releases():
    client = FakeApiClient()
    executor = DeferredExecutor()
    executor.shutdown()
    errors = []
    gw = _gateway(client, executor, errors=errors)

    assert gw.complete(1) is False
    assert len(errors) == 1
    assert not gw.is_in_flight(GatewayAction.COMPLETE, 1)


def test_listener_failure_does_not_block_other_listeners(client, executor):
    seen = []

    def broken(event):
        raise ValueError("listener bug")

    gw = TaskActionGateway(client, executor)
    gw.add_listener(broken)
    gw.add_listener(seen.append)
    gw.complete(1)
    assert len(seen) == 1


def test_completion_is_reconciled_through_the_store(client, gateway, store):
    client.projects = raw_projects(10)
    client.tasks[10] = [raw_task(1)]
    store.apply_projects(client.fetch_projects())
    store.select_project(10)
    assert [e.task.id for e in store.snapshot().tasks] == [1]

    # Server now reports the task as completed.
    client.tasks[10] = []
    client.completed[10] = [raw_task(1)]
    gateway.complete(1)

    snap = store.snapshot()
    assert snap.tasks == ()
    assert [e.task.id for e in snap.completed_tasks] == [1]
    assert snap.completed_tasks[0].is_complete


def test_failed_request_still_reconciles(client, gateway, store):
    client.projects = raw_projects(10)
    store.apply_projects(client.fetch_projects())
    store.select_project(10)
    fetches_before = len(client.called("fetch_tasks"))

    client.results["delete_completed_task"] = http_error(500)
    gateway.delete_completed(4)

    assert len(client.called("fetch_tasks")) == fetches_before + 1
    assert store.drain_errors() == ["Could not delete task 4: HTTP 500"]
