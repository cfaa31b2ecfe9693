"""
Minimal saga runner.

A saga is an ordered list of steps, each with an optional compensating
action. Steps run in order; when one fails, the compensations of the steps
that already completed run in reverse order and the failure is re-raised as
SagaFailed. A failing compensation is logged and recorded but never replaces
the error raised by the step.
"""
import logging

logger = logging.getLogger(__name__)


class SagaFailed(Exception):
    def __init__(self, saga: str, step: str, cause: Exception, failed_compensations=None):
        super().__init__(f"{saga} failed at step '{step}': {cause}")
        self.saga = saga
        self.step = step
        self.cause = cause
        self.failed_compensations = list(failed_compensations or [])


class SagaStep:
    def __init__(self, name, action, compensate=None):
        self.name = name
        self.action = action
        self.compensate = compensate

    def __repr__(self):
        return f"<SagaStep {self.name}>"


class Saga:
    def __init__(self, name: str):
        self.name = name
        self.steps = []

    def step(self, name, action, compensate=None):
        """Append a step. ``action(results)`` returns the step's result;
        ``compensate(result)`` undoes it."""
        self.steps.append(SagaStep(name, action, compensate))
        return self

    def run(self) -> dict:
        results = {}
        completed = []
        for step in self.steps:
            try:
                results[step.name] = step.action(results)
            except Exception as e:
                logger.warning("Saga %s: step %s failed: %s", self.name, step.name, e)
                failed = self._compensate(completed, results)
                raise SagaFailed(self.name, step.name, e, failed) from e
            completed.append(step)
            logger.debug("Saga %s: step %s done", self.name, step.name)
        return results

    def _compensate(self, completed, results) -> list:
        failed = []
        for step in reversed(completed):
            if step.compensate is None:
                continue
            try:
                step.compensate(results[step.name])
                logger.info("Saga %s: compensated %s", self.name, step.name)
            except Exception:
                logger.exception("Saga %s: compensation for %s failed", self.name, step.name)
                failed.append(step.name)
        return failed
