"""
continuity/checks/ -- The four rule evaluators.

Each evaluator is a plain function ``check_*(series) -> list[Issue]`` with
no state.  ``EVALUATORS`` fixes the order the report builder runs them in,
which is also the order their issues appear in the report.
"""

from continuity.checks.character import check_characters
from continuity.checks.plot import check_plot
from continuity.checks.timeline import check_timeline
from continuity.checks.world import check_world

EVALUATORS = (
    ("character", check_characters),
    ("timeline", check_timeline),
    ("world", check_world),
    ("plot", check_plot),
)

__all__ = ["EVALUATORS", "check_characters", "check_plot", "check_timeline", "check_world"]
