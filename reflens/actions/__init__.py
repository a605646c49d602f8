from reflens.actions.interaction import Interactor, run_cancellable

__all__ = ["Interactor", "run_cancellable"]
