import threading

from apscheduler.schedulers.background import BackgroundScheduler

from app.client.polling import PollingTask, get_scheduler


def test_start_registers_one_interval_job(fake_scheduler):
    calls = []
    task = PollingTask("inbox", 15, lambda: calls.append(1), scheduler=fake_scheduler)

    task.start()
    task.start()

    assert fake_scheduler.running
    (job,) = fake_scheduler.jobs
    assert job.trigger == "interval"
    assert job.kwargs["seconds"] == 15
    assert job.kwargs["max_instances"] == 1
    assert "next_run_time" not in job.kwargs
    assert task.is_active

    fake_scheduler.tick()
    assert calls == [1]


def test_stop_removes_job_and_is_repeatable(fake_scheduler):
    task = PollingTask("inbox", 15, lambda: None, scheduler=fake_scheduler)
    task.start()

    task.stop()
    task.stop()

    assert not task.is_active
    assert fake_scheduler.jobs == []


def test_restart_after_stop(fake_scheduler):
    task = PollingTask("inbox", 15, lambda: None, scheduler=fake_scheduler)
    task.start()
    task.stop()
    task.start()

    assert len(fake_scheduler.jobs) == 1


def test_run_immediately_sets_first_run(fake_scheduler):
    task = PollingTask("locations", 5, lambda: None, scheduler=fake_scheduler, run_immediately=True)
    task.start()

    (job,) = fake_scheduler.jobs
    assert job.kwargs["next_run_time"] is not None


def test_errors_do_not_escape_the_loop(fake_scheduler):
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("backend down")

    task = PollingTask("flaky", 5, flaky, scheduler=fake_scheduler)
    task.start()

    fake_scheduler.tick()
    fake_scheduler.tick()

    assert len(calls) == 2
    assert task.is_active


def test_shared_scheduler_is_a_singleton():
    assert get_scheduler() is get_scheduler()


def test_real_scheduler_runs_immediately():
    scheduler = BackgroundScheduler(daemon=True)
    fired = threading.Event()
    task = PollingTask("probe", 3600, fired.set, scheduler=scheduler, run_immediately=True)

    try:
        task.start()
        assert fired.wait(timeout=5)
    finally:
        task.stop()
        scheduler.shutdown(wait=False)
