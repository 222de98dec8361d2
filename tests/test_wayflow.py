import pytest

from workflows.wayflow import StepFailed, Wayflow, WorkflowContext


def test_steps_run_in_order_and_share_state():
    wf = Wayflow("Counting")
    wf.add_step("first", lambda ctx: ctx.state.setdefault("seen", []).append("first"))
    wf.add_step("second", lambda ctx: ctx.state["seen"].append("second") or len(ctx.state["seen"]))

    result = wf.run(WorkflowContext(run_id="run_1"))

    assert result["status"] == "COMPLETED"
    assert result["run_id"] == "run_1"
    assert result["results"] == {"first": None, "second": 2}
    assert result["final_state"]["seen"] == ["first", "second"]


def test_step_failure_stops_the_run():
    calls = []

    def boom(ctx):
        raise ValueError("bad step")

    wf = Wayflow("Failing")
    wf.add_step("ok", lambda ctx: "fine")
    wf.add_step("boom", boom)
    wf.add_step("after", lambda ctx: calls.append("after"))

    with pytest.raises(StepFailed) as exc:
        wf.run(WorkflowContext(run_id="run_2"))

    assert calls == []
    assert exc.value.step == "boom"
    assert exc.value.run_id == "run_2"
    assert exc.value.completed == ["ok"]
    assert isinstance(exc.value.__cause__, ValueError)
    assert "failed at step 'boom'" in str(exc.value)


def test_round_failure_names_the_form(rng):
    from conftest import playing_desk
    from margin_core.models import Appraisal, Decision
    from workflows.desk_flow import Pacing, resolve_round

    # The fifth form rotates the policy, which needs a catalog
    desk = playing_desk(appraisal=Appraisal.ASSET, forms_processed=4)
    with pytest.raises(StepFailed) as exc:
        resolve_round(desk, Decision.APPROVE, rng, None, Pacing())
    assert exc.value.workflow == "RoundResolution"
    assert exc.value.run_id == f"round_{desk.form.id}"
    assert exc.value.step == "rotate_policy"
    assert exc.value.completed == ["evaluate", "settle"]
