from src.workflow.state import PatentWorkflow, WizardStep, WorkflowError

__all__ = ["PatentWorkflow", "WizardStep", "WorkflowError"]
