from .core import Step, StepFailed, Wayflow, WorkflowContext
