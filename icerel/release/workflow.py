"""Release-candidate job graph.

The run is a DAG of isolated jobs that talk only through step outputs
(VERSION, RC) and artifact bundles:

    validate-inputs
      -> validate-library-version
        -> {svn,pypi}-build-artifacts   (matrix over targets, fail-fast off)
          -> {svn,pypi}-merge-artifacts

``render_workflow`` turns the graph into a GitHub Actions file whose steps
call this CLI.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field

import yaml

from icerel.core.config import ReleaseConfig
from icerel.core.result import Err, Ok, Result
from icerel.release.bundles import bundle_prefix, merge_pattern, platform_bundle_name
from icerel.release.errors import WorkflowError
from icerel.release.model import CHANNELS, Channel


WORKFLOW_NAME = "Python Build Release Candidate"
CIBUILDWHEEL_VERSION = "2.22.0"
TOOL_PYTHON = "3.12"

VALIDATE_INPUTS = "validate-inputs"
VALIDATE_LIBRARY_VERSION = "validate-library-version"

_VERSION_EXPR = "${{ needs.validate-inputs.outputs.VERSION }}"
_RC_EXPR = "${{ needs.validate-inputs.outputs.RC }}"
_OS_EXPR = "${{ matrix.os }}"


def build_job_id(channel: Channel) -> str:
    return f"{channel}-build-artifacts"


def merge_job_id(channel: Channel) -> str:
    return f"{channel}-merge-artifacts"


def _empty_pairs() -> dict[str, str]:
    return {}


def _empty_with() -> dict[str, object]:
    return {}


@dataclass(frozen=True)
class Step:
    name: str
    run: str | None = None
    uses: str | None = None
    id: str | None = None
    with_: dict[str, object] = field(default_factory=_empty_with)
    env: dict[str, str] = field(default_factory=_empty_pairs)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"name": self.name}
        if self.id:
            out["id"] = self.id
        if self.uses:
            out["uses"] = self.uses
        if self.with_:
            out["with"] = dict(self.with_)
        if self.env:
            out["env"] = dict(self.env)
        if self.run:
            out["run"] = self.run
        return out


@dataclass(frozen=True)
class Job:
    id: str
    runs_on: str
    needs: tuple[str, ...] = ()
    name: str | None = None
    matrix: tuple[str, ...] = ()
    outputs: dict[str, str] = field(default_factory=_empty_pairs)
    steps: tuple[Step, ...] = ()

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.name:
            out["name"] = self.name
        out["runs-on"] = self.runs_on
        if self.needs:
            out["needs"] = list(self.needs)
        if self.matrix:
            # platforms fail independently
            out["strategy"] = {"fail-fast": False, "matrix": {"os": list(self.matrix)}}
        if self.outputs:
            out["outputs"] = dict(self.outputs)
        out["steps"] = [s.to_dict() for s in self.steps]
        return out


def _checkout() -> Step:
    return Step(name="Checkout", uses="actions/checkout@v4", with_={"fetch-depth": 1})


def _setup_python(versions: tuple[str, ...]) -> Step:
    value: object = versions[0] if len(versions) == 1 else "\n".join(versions) + "\n"
    return Step(name="Set up Python", uses="actions/setup-python@v5", with_={"python-version": value})


def _install(*requirements: str) -> Step:
    args = " ".join(shlex.quote(r) for r in requirements)
    return Step(name="Install release tooling", run=f"python -m pip install {args}")


def _validate_inputs_job(config: ReleaseConfig) -> Job:
    return Job(
        id=VALIDATE_INPUTS,
        runs_on="ubuntu-latest",
        outputs={
            "VERSION": "${{ steps.validate-inputs.outputs.VERSION }}",
            "RC": "${{ steps.validate-inputs.outputs.RC }}",
        },
        steps=(
            # [tool.icerel] (tag_prefix) is read from the checked-out pyproject.toml
            _checkout(),
            _setup_python((TOOL_PYTHON,)),
            _install(config.tool_requirement),
            Step(
                name="Validate and Extract Version and RC",
                id="validate-inputs",
                env={
                    "INPUT_VERSION": "${{ github.event.inputs.version }}",
                    "INPUT_RC": "${{ github.event.inputs.rc }}",
                },
                run="icerel validate",
            ),
            Step(
                name="Display Extracted Version and RC",
                run=(
                    'echo "Using Version: ${{ steps.validate-inputs.outputs.VERSION }}"\n'
                    'echo "Using RC: ${{ steps.validate-inputs.outputs.RC }}"\n'
                ),
            ),
        ),
    )


def _validate_library_version_job(config: ReleaseConfig) -> Job:
    return Job(
        id=VALIDATE_LIBRARY_VERSION,
        runs_on="ubuntu-latest",
        needs=(VALIDATE_INPUTS,),
        steps=(
            _checkout(),
            _setup_python((TOOL_PYTHON,)),
            _install(config.tool_requirement, "poetry"),
            Step(
                name="Validate current library version",
                env={"VERSION": _VERSION_EXPR},
                run='icerel check-version --version "$VERSION"',
            ),
        ),
    )


def _build_job(channel: Channel, config: ReleaseConfig) -> Job:
    label = "SVN" if channel == "svn" else "PyPi"
    return Job(
        id=build_job_id(channel),
        name=f"Build artifacts for {label} on {_OS_EXPR}",
        runs_on=_OS_EXPR,
        needs=(VALIDATE_INPUTS, VALIDATE_LIBRARY_VERSION),
        matrix=config.targets,
        steps=(
            _checkout(),
            _setup_python(config.python_versions),
            _install(config.tool_requirement, "poetry", f"cibuildwheel=={CIBUILDWHEEL_VERSION}"),
            Step(
                name="Build release candidate artifacts",
                env={"VERSION": _VERSION_EXPR, "RC": _RC_EXPR},
                run=f'icerel build {channel} --os "{_OS_EXPR}" --version "$VERSION" --rc "$RC"',
            ),
            Step(
                name="Upload artifacts",
                uses="actions/upload-artifact@v4",
                with_={
                    "name": platform_bundle_name(channel, _OS_EXPR),
                    "path": f"./{config.wheelhouse}/*",
                },
            ),
        ),
    )


def _merge_job(channel: Channel) -> Job:
    return Job(
        id=merge_job_id(channel),
        runs_on="ubuntu-latest",
        needs=(VALIDATE_INPUTS, build_job_id(channel)),
        steps=(
            Step(
                name="Merge Artifacts",
                uses="actions/upload-artifact/merge@v4",
                with_={
                    "name": f"{bundle_prefix(channel)}-{_VERSION_EXPR}rc{_RC_EXPR}",
                    "pattern": merge_pattern(channel),
                    "delete-merged": True,
                },
            ),
        ),
    )


def release_workflow(config: ReleaseConfig) -> tuple[Job, ...]:
    jobs: list[Job] = [_validate_inputs_job(config), _validate_library_version_job(config)]
    for channel in CHANNELS:
        jobs.append(_build_job(channel, config))
        jobs.append(_merge_job(channel))
    return tuple(jobs)


def topological_order(jobs: tuple[Job, ...]) -> Result[list[str], WorkflowError]:
    """Order jobs so each runs after everything it needs.

    Ties keep declaration order, which makes the result deterministic.
    """
    ids = [j.id for j in jobs]
    if len(set(ids)) != len(ids):
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        return Err(WorkflowError(message=f"duplicate job ids: {', '.join(dupes)}"))

    known = set(ids)
    for job in jobs:
        unknown = [n for n in job.needs if n not in known]
        if unknown:
            return Err(
                WorkflowError(message=f"job {job.id} needs unknown job(s): {', '.join(unknown)}")
            )

    order: list[str] = []
    done: set[str] = set()
    pending = list(jobs)
    while pending:
        ready = [j for j in pending if all(n in done for n in j.needs)]
        if not ready:
            stuck = ", ".join(j.id for j in pending)
            return Err(WorkflowError(message=f"dependency cycle between jobs: {stuck}"))
        for job in ready:
            order.append(job.id)
            done.add(job.id)
        pending = [j for j in pending if j.id not in done]

    return Ok(order)


def workflow_document(config: ReleaseConfig) -> dict[str, object]:
    prefix = config.tag_prefix
    return {
        "name": WORKFLOW_NAME,
        "on": {
            "push": {"tags": [f"{prefix}[0-9]+.[0-9]+.[0-9]+rc[0-9]+"]},
            "workflow_dispatch": {
                "inputs": {
                    "version": {
                        "description": "Version (e.g., 0.8.0)",
                        "type": "string",
                        "required": True,
                    },
                    "rc": {
                        "description": "Release Candidate (RC) (e.g., 1)",
                        "type": "number",
                        "required": True,
                    },
                }
            },
        },
        "jobs": {job.id: job.to_dict() for job in release_workflow(config)},
    }


def render_workflow(config: ReleaseConfig) -> Result[str, WorkflowError]:
    order = topological_order(release_workflow(config))
    if isinstance(order, Err):
        return order
    text = yaml.safe_dump(
        workflow_document(config),
        sort_keys=False,
        default_flow_style=False,
        width=120,
    )
    return Ok(text)
