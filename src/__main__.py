#!/usr/bin/env python3
"""
adocprep - AsciiDoc-style source preprocessor

Runs the preprocessing pass over a document and writes the result:
includes expanded, conditionals evaluated, attribute entries applied and
removed from the body.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    adocprep inputdir/ outputdir/ --inputFile book.adoc

    The preprocessed source is written to outputdir/ as <stem>.adoc along
    with <stem>.attributes.yaml, the document attributes after the pass.

Examples:
    # Basic preprocessing
    adocprep . output/ --inputFile manual.adoc

    # Attribute overrides (win over entries in the document)
    adocprep . output/ --inputFile manual.adoc -a backend=docbook45 -a draft!

    # Overrides from a YAML mapping, command line entries applied on top
    adocprep . output/ --inputFile manual.adoc --attributesFile attrs.yaml -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import Any, Dict, List

import yaml
from chris_plugin import chris_plugin

from .config import appsettings
from .lib import Document, __version__, LOG, state_connectToLogger
from .lib.includes import text_lines
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
           _
  __ _  __| | ___   ___ _ __  _ __ ___ _ __
 / _` |/ _` |/ _ \ / __| '_ \| '__/ _ \ '_ \
| (_| | (_| | (_) | (__| |_) | | |  __/ |_) |
 \__,_|\__,_|\___/ \___| .__/|_|  \___| .__/
                       |_|            |_|
  AsciiDoc-style source preprocessor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="adocprep - expand includes, conditionals and attribute entries",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input document (relative to inputdir)"
)

parser.add_argument(
    "-a",
    "--attribute",
    action="append",
    default=None,
    type=str,
    help="Attribute override as name=value, name, or name! to unset (repeatable)",
)

parser.add_argument(
    "--attributesFile",
    default=None,
    type=str,
    help="YAML mapping of attribute overrides (relative to inputdir)",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the preprocessed files",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def overrides_parse(entries: List[str]) -> Dict[str, Any]:
    """
    Turn -a command line entries into an override mapping.

    Args:
        entries: Strings of the form 'name=value', 'name' or 'name!'

    Returns:
        Dict of override name to value ('' when no value is given)

    Raises:
        ValueError: If an entry has an empty name

    Example:
        >>> overrides_parse(['backend=docbook45', 'toc', 'draft!'])
        {'backend': 'docbook45', 'toc': '', 'draft!': ''}
    """
    overrides: Dict[str, Any] = {}
    for entry in entries:
        name, _, value = entry.partition("=")
        name = name.strip()
        if not name or name == "!":
            raise ValueError(f"Invalid attribute override: '{entry}'")
        overrides[name] = value
    return overrides


def overridesFile_load(path: Path) -> Dict[str, Any]:
    """
    Load an override mapping from a YAML file.

    Args:
        path: YAML file holding a flat mapping

    Returns:
        Dict of override name to string value (null values become '')

    Raises:
        ValueError: If the document is not a mapping
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping of attribute names to values")

    return {str(key): "" if value is None else str(value) for key, value in data.items()}


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment, resolve paths and collect overrides.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - textOutputdir: Created output directory path
            - overrides: Merged attribute overrides
            - envOK: True if environment is valid

    Exits:
        1 if the input or attributes file is missing or malformed
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)
    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    overrides: Dict[str, Any] = {}
    try:
        if state.attributesFile:
            attributes_file = state.inputdir / state.attributesFile
            if not attributes_file.exists():
                print(f"Error: Attributes file not found: {attributes_file}", file=sys.stderr)
                state.envOK = False
                sys.exit(1)
            overrides.update(overridesFile_load(attributes_file))
            LOG(f"Loaded {len(overrides)} overrides from {attributes_file.name}", level=2)
        overrides.update(overrides_parse(state.attribute))
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.overrides = overrides
    LOG(f"Attribute overrides: {sorted(overrides)}", level=2)

    state.textOutputdir = state.outputdir / state.outputSubdir
    state.textOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.textOutputdir}", level=2)

    state.envOK = True
    return state


def source_preprocess(inputstate: ProgramState) -> ProgramState:
    """
    Read the input document and run the preprocessing pass.

    include::PATH[] targets are resolved relative to the input document's
    directory.

    Args:
        inputstate: Program state with inputSourceFile and overrides set

    Returns:
        ProgramState with added fields:
            - preprocessedLines: Lines surviving the pass
            - finalAttributes: Document attributes after the pass

    Exits:
        1 if the input or an included file cannot be read
    """

    state = inputstate.copy()
    base_dir = state.inputSourceFile.parent

    def include_resolve(target: str) -> List[str]:
        include_file = base_dir / target
        LOG(f"Resolving include: {include_file}", level=2)
        return text_lines(include_file.read_text(encoding=appsettings.include_encoding))

    LOG("Reading source file...", level=1)
    try:
        source = state.inputSourceFile.read_text(encoding=appsettings.include_encoding)
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except Exception as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Preprocessing source...", level=1)
    try:
        document = Document(overrides=state.overrides)
        reader = document.reader(source, include_resolver=include_resolve)
    except OSError as e:
        print(f"Error: include failed: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.preprocessedLines = reader.lines
    state.finalAttributes = dict(document.attributes)
    LOG(f"{len(state.preprocessedLines)} lines survived preprocessing", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the preprocessed source and the final attributes.

    Args:
        inputstate: Program state with preprocessedLines and finalAttributes

    Returns:
        ProgramState with added fields:
            - outputFile: Path of the preprocessed source
            - attributesOutputFile: Path of the YAML attribute dump

    Exits:
        1 if there is nothing to write
    """

    state = inputstate.copy()

    if state.preprocessedLines is None or state.finalAttributes is None:
        print("Error: No preprocessed source available", file=sys.stderr)
        sys.exit(1)

    output_name = appsettings.outputName_make(state.inputFile)
    state.outputFile = state.textOutputdir / output_name
    state.outputFile.write_text("".join(state.preprocessedLines), encoding="utf-8")
    LOG(f"Wrote {state.outputFile}", level=2)

    state.attributesOutputFile = state.textOutputdir / f"{Path(output_name).stem}.attributes.yaml"
    with open(state.attributesOutputFile, "w", encoding="utf-8") as f:
        yaml.safe_dump(state.finalAttributes, f, sort_keys=True, allow_unicode=True)
    LOG(f"Wrote {state.attributesOutputFile}", level=2)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display preprocessing results.

    Args:
        inputstate: Program state with outputFile populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if outputFile is None
    """
    state: ProgramState = inputstate.copy()
    if not state.outputFile:
        print("Error: Preprocessing failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Preprocessing successful!", level=1)
    LOG(f"  Output: {state.outputFile}", level=1)
    LOG(f"  Lines: {len(state.preprocessedLines)}", level=1)
    LOG(f"  Attributes: {state.attributesOutputFile}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="adocprep - AsciiDoc-style source preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - preprocess one document from inputdir into outputdir.

    Orchestrates the pipeline:
        1. env_check: Validate paths, collect overrides
        2. source_preprocess: Read the document and run the Reader
        3. output_write: Write preprocessed source and attributes
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source document
        outputdir: Directory where results will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    state_connectToLogger(state)

    pipeline(state, env_check, source_preprocess, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
