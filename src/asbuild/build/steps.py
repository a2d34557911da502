"""Build step declarations.

Design:
    - A StepBuilder collects inputs, outputs, predecessors and the action
    - build() freezes it into an immutable BuildStep
    - The TaskGraph only accepts predecessors that are already declared, so a
      step can never change after steps depending on it exist
    - execution_plan() orders the requested steps and their predecessors
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..errors import CyclicDependencyError, UnknownStepError

StepAction = Callable[[], None]


@dataclass(frozen=True)
class BuildStep:
    """An immutable, fully declared build step."""

    name: str
    description: str
    group: Optional[str]
    inputs: Tuple[Path, ...]
    outputs: Tuple[Path, ...]
    predecessors: Tuple[str, ...]
    run_after: Tuple[str, ...]
    action: Optional[StepAction] = None

    @property
    def short_name(self) -> str:
        return self.name.rsplit(":", 1)[-1]

    def has_outputs(self) -> bool:
        return bool(self.outputs)


class StepBuilder:
    """Mutable declaration of a step, frozen by build().

    Predecessors and inputs are kept in insertion order without duplicates,
    so resolving the same dependency twice registers a single edge.
    """

    def __init__(self, name: str, description: str = "", group: Optional[str] = None):
        self.name = name
        self.description = description
        self.group = group
        self._inputs: Dict[Path, None] = {}
        self._outputs: Dict[Path, None] = {}
        self._predecessors: Dict[str, None] = {}
        self._run_after: Dict[str, None] = {}
        self._action: Optional[StepAction] = None

    def input(self, *paths: Path) -> "StepBuilder":
        for path in paths:
            self._inputs[Path(path)] = None
        return self

    def output(self, *paths: Path) -> "StepBuilder":
        for path in paths:
            self._outputs[Path(path)] = None
        return self

    def depends_on(self, *steps: Union["BuildStep", str]) -> "StepBuilder":
        for step in steps:
            self._predecessors[_step_name(step)] = None
        return self

    def must_run_after(self, *steps: Union["BuildStep", str]) -> "StepBuilder":
        for step in steps:
            self._run_after[_step_name(step)] = None
        return self

    def action(self, action: StepAction) -> "StepBuilder":
        self._action = action
        return self

    @property
    def predecessors(self) -> Tuple[str, ...]:
        return tuple(self._predecessors)

    def build(self) -> BuildStep:
        return BuildStep(
            name=self.name,
            description=self.description,
            group=self.group,
            inputs=tuple(self._inputs),
            outputs=tuple(self._outputs),
            predecessors=tuple(self._predecessors),
            run_after=tuple(self._run_after),
            action=self._action,
        )


class TaskGraph:
    """All declared steps of a workspace, in declaration order."""

    def __init__(self):
        self._steps: Dict[str, BuildStep] = {}

    def register(self, builder: StepBuilder) -> BuildStep:
        """
        Freeze a builder and add the resulting step to the graph.

        Raises:
            ValueError: If a step with the same name is already declared
            UnknownStepError: If a predecessor or run-after step is not declared yet
        """
        if builder.name in self._steps:
            raise ValueError(f"Step '{builder.name}' is already declared")

        step = builder.build()
        for name in step.predecessors + step.run_after:
            if name not in self._steps:
                raise UnknownStepError(
                    f"Step '{step.name}' references undeclared step '{name}'"
                )

        self._steps[step.name] = step
        return step

    def get(self, name: str) -> BuildStep:
        if name not in self._steps:
            raise UnknownStepError(f"Step '{name}' not found")
        return self._steps[name]

    def __contains__(self, name: str) -> bool:
        return name in self._steps

    def __iter__(self):
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    def execution_plan(self, targets: Iterable[str]) -> List[BuildStep]:
        """
        Order the target steps and all their hard predecessors for execution.

        Run-after edges only apply when both steps are part of the plan. Ties
        are broken by declaration order so the plan is deterministic.

        Raises:
            UnknownStepError: If a target is not declared
            CyclicDependencyError: If the selected steps cannot be ordered
        """
        selected: Dict[str, None] = {}
        pending = [self.get(name).name for name in targets]
        while pending:
            name = pending.pop()
            if name in selected:
                continue
            selected[name] = None
            pending.extend(self.get(name).predecessors)

        declaration_order = [name for name in self._steps if name in selected]
        edges = {
            name: [
                dep for dep in self._steps[name].predecessors + self._steps[name].run_after
                if dep in selected
            ]
            for name in declaration_order
        }

        plan: List[BuildStep] = []
        done = set()
        visiting: List[str] = []

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                raise CyclicDependencyError(visiting[visiting.index(name):] + [name])
            visiting.append(name)
            for dep in edges[name]:
                visit(dep)
            visiting.pop()
            done.add(name)
            plan.append(self._steps[name])

        for name in declaration_order:
            visit(name)
        return plan


def _step_name(step: Union[BuildStep, str]) -> str:
    return step.name if isinstance(step, BuildStep) else step
