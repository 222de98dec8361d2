from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger("wayflow")


class StepFailed(RuntimeError):
    """Raised when a step errors; the original exception is chained as __cause__."""

    def __init__(self, workflow: str, run_id: str, step: str, completed: List[str]):
        super().__init__(f"{workflow} run_id={run_id} failed at step '{step}'")
        self.workflow = workflow
        self.run_id = run_id
        self.step = step
        self.completed = completed


@dataclass
class WorkflowContext:
    run_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)


class Step:
    def __init__(self, name: str, func: Callable[['WorkflowContext'], Any]):
        self.name = name
        self.func = func


class Wayflow:
    def __init__(self, name: str):
        self.name = name
        self.steps: List[Step] = []

    def add_step(self, name: str, func: Callable[['WorkflowContext'], Any]):
        self.steps.append(Step(name, func))

    def run(self, context: WorkflowContext) -> Dict[str, Any]:
        results = {}

        for step in self.steps:
            try:
                # Steps run in order and pass data through context.state
                results[step.name] = step.func(context)
            except Exception as e:
                logger.error(
                    f"{self.name} {context.run_id}: step {step.name} failed "
                    f"after {list(results)}: {e!r}"
                )
                raise StepFailed(self.name, context.run_id, step.name, list(results)) from e
            logger.debug(f"{self.name} {context.run_id}: {step.name} -> {results[step.name]}")

        return {
            "workflow": self.name,
            "run_id": context.run_id,
            "status": "COMPLETED",
            "results": results,
            "final_state": context.state
        }
