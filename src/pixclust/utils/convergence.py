"""
Convergence criteria for k-means iteration.

Lloyd iteration stops when the assignment stops changing. Pure
reassignment can also settle into a deterministic two-cycle that never
stabilises; the oscillation guard detects it from the WCSS history.
"""

from typing import Dict, Any, List, Optional
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


MAX_CYCLES = 30


class AssignmentStability(ConvergenceCriterion):
    """Converged once every pixel keeps the cluster it had last iteration."""

    def __init__(self):
        super().__init__()
        self._prev_assignments: Optional[Tensor] = None

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments are identical to the previous iteration's."""
        current_assignments = current_state['assignments']

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False

        n_changed = (current_assignments != self._prev_assignments).sum().item()

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })

        self._prev_assignments = current_assignments.clone()
        return n_changed == 0

    def reset(self):
        super().reset()
        self._prev_assignments = None


class OscillationGuard(ConvergenceCriterion):
    """Detects a WCSS sequence that alternates between two fixed values.

    Once at least ``max_cycles`` objective values have been seen and the
    newest is lower than the one before it, the trailing ``max_cycles``
    values are split into even- and odd-indexed sublists. If each sublist is
    constant, the iteration is cycling and is declared converged at this
    lower-WCSS point.
    """

    def __init__(self, max_cycles: int = MAX_CYCLES):
        """
        Args:
            max_cycles: Length of the trailing WCSS window inspected
        """
        super().__init__()
        if max_cycles < 2:
            raise ValueError(f"max_cycles must be at least 2, got {max_cycles}")
        self.max_cycles = max_cycles

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Record the objective and check for a two-cycle."""
        self.history.append(float(current_state['objective']))
        return is_two_cycle(self.history, self.max_cycles)


def is_two_cycle(wcss_history: List[float], max_cycles: int = MAX_CYCLES) -> bool:
    """Whether a WCSS history ends in a two-value alternation at its low point."""
    if len(wcss_history) < max_cycles or len(wcss_history) < 2:
        return False

    if not wcss_history[-1] < wcss_history[-2]:
        return False

    window = wcss_history[-max_cycles:]
    evens = window[0::2]
    odds = window[1::2]
    return all(v == evens[0] for v in evens) and all(v == odds[0] for v in odds)
