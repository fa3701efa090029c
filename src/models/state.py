"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern used by
the command line runner and the pipeline() helper for composing stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the runner pipeline (state bus pattern).

    Each stage adds fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: script, scriptArgs, module, trace, nofilter, output, listOnly, verbosity
        - env_check: scriptFile, envOK
        - source_read: sourceText
        - source_filter: filteredSource, directives
        - program_run: exitCode

    Attributes:
        script: Script path as given on the command line
        scriptArgs: Arguments passed through to the script (sys.argv[1:])
        module: Module name patterns for the import hook
        trace: Echo rewritten source
        nofilter: Run the script without rewriting directives
        output: Name of the sink stream ("stderr" or "stdout"), or None for the setting
        listOnly: Only list directives, do not run
        verbosity: Logging verbosity level (0-3)
        envOK: Environment validation passed
        scriptFile: Resolved path to the script
        sourceText: Script source as read from disk
        filteredSource: Source after the directive rewrite
        directives: Directives found in the script (List[Directive] at runtime)
        exitCode: Process exit status
    """

    # CLI arguments
    script: str = field(default="")
    scriptArgs: List[str] = field(default_factory=list)
    module: List[str] = field(default_factory=list)
    trace: bool = field(default=False)
    nofilter: bool = field(default=False)
    output: Optional[str] = field(default=None)
    listOnly: bool = field(default=False)
    verbosity: int = field(default=0)

    # Pipeline state
    envOK: bool = field(default=False)
    scriptFile: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    filteredSource: str = field(default="")
    directives: List[Any] = field(default_factory=list)
    exitCode: int = field(default=0)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Options that are not ProgramState fields are ignored, and None
        values for list options fall back to the dataclass defaults.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with the CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {
            k: v
            for k, v in vars(options).items()
            if k in valid_fields and not (v is None and k in ("module", "scriptArgs"))
        }
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            source_filter,
            program_run
        )

    This is equivalent to:
        program_run(source_filter(source_read(env_check(initial_state))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
