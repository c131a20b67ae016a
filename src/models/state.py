"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the preprocessing pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as preprocessing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, attribute,
          attributesFile, outputSubdir
        - env_check: inputSourceFile, textOutputdir, overrides, envOK
        - source_preprocess: preprocessedLines, finalAttributes
        - output_write: outputFile, attributesOutputFile
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Base output directory for preprocessed files
        verbosity: Logging verbosity level (1-3)
        inputFile: Input document filename (relative to inputdir)
        attribute: Raw "-a name=value" options from the command line
        attributesFile: Optional YAML file of attribute overrides
        outputSubdir: Subdirectory within outputdir for output
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input document
        textOutputdir: Final output directory (outputdir + outputSubdir)
        overrides: Merged attribute overrides (file first, then -a options)
        preprocessedLines: Lines left in the reader after preprocessing
        finalAttributes: Document attributes after preprocessing
        outputFile: Path of the written preprocessed source
        attributesOutputFile: Path of the written attribute dump
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    attribute: List[str] = field(default_factory=list)
    attributesFile: Optional[str] = field(default=None)
    outputSubdir: str = field(default=".")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    textOutputdir: Path = field(default=Path("/"))
    overrides: Dict[str, Any] = field(default_factory=dict)
    preprocessedLines: Optional[List[str]] = field(default=None)
    finalAttributes: Optional[Dict[str, Any]] = field(default=None)
    outputFile: Optional[Path] = field(default=None)
    attributesOutputFile: Optional[Path] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, attribute, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for preprocessing output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown CLI options (e.g. those injected by chris_plugin) are ignored
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}
        if filtered_options.get("attribute") is None:
            filtered_options["attribute"] = []

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

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

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_preprocess,
            output_write,
            results_report
        )

    This is equivalent to:
        results_report(output_write(source_preprocess(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
