"""Artifact bundles.

A bundle is a named, immutable set of files. Each build job uploads one
bundle per platform (``<channel>-release-candidate-<os>``); the merge job
then folds every bundle of a channel into
``<channel>-release-candidate-<version>rc<rc>`` and deletes the per-platform
bundles, but only once the merged bundle is complete.

Locally a bundle store is a directory holding one sub-directory per bundle,
which mirrors what the hosted artifact service keeps per run.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from icerel.core.result import Err, Ok, Result
from icerel.platform.files import sha256_file
from icerel.release.errors import BundleError
from icerel.release.model import Channel, ReleaseInfo
from icerel.release.validate import parse_tag


def bundle_prefix(channel: Channel) -> str:
    return f"{channel}-release-candidate"


def platform_bundle_name(channel: Channel, os_name: str) -> str:
    return f"{bundle_prefix(channel)}-{os_name}"


def merged_bundle_name(channel: Channel, info: ReleaseInfo) -> str:
    return f"{bundle_prefix(channel)}-{info.rc_version}"


def merge_pattern(channel: Channel) -> str:
    return f"{bundle_prefix(channel)}*"


def is_merged_bundle(channel: Channel, name: str) -> bool:
    """Whether ``name`` is a merged bundle of any release candidate of ``channel``."""
    return isinstance(parse_tag(name, prefix=f"{bundle_prefix(channel)}-"), Ok)


@dataclass(frozen=True, slots=True)
class MergeResult:
    name: str
    path: Path
    files: tuple[str, ...]
    merged: tuple[str, ...]
    deleted: bool


def list_bundles(store: Path) -> list[str]:
    if not store.is_dir():
        return []
    return sorted(p.name for p in store.iterdir() if p.is_dir() and not p.name.startswith("."))


def _bundle_files(bundle_dir: Path) -> list[tuple[str, Path]]:
    return [
        (p.relative_to(bundle_dir).as_posix(), p)
        for p in sorted(bundle_dir.rglob("*"))
        if p.is_file()
    ]


def upload_bundle(store: Path, name: str, files: list[Path]) -> Result[Path, BundleError]:
    """Store ``files`` (flat, by file name) as a new bundle called ``name``."""
    target = store / name
    if target.exists():
        return Err(BundleError(message=f"bundle already exists: {name}", path=target))

    sources = [f for f in files if f.is_file()]
    missing = [str(f) for f in files if not f.is_file()]
    if missing:
        return Err(BundleError(message=f"not a file: {', '.join(missing)}"))
    if not sources:
        return Err(BundleError(message=f"no files to upload for bundle {name}"))

    names = [f.name for f in sources]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        return Err(BundleError(message=f"duplicate file names in upload: {', '.join(dupes)}"))

    staging = store / f".{name}.tmp"
    try:
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True)
        for src in sources:
            shutil.copy2(src, staging / src.name)
        staging.rename(target)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        return Err(BundleError(message=f"failed to upload bundle {name}: {e}", path=target))

    return Ok(target)


def merge_bundles(
    store: Path,
    *,
    channel: Channel,
    info: ReleaseInfo,
    delete_merged: bool = True,
) -> Result[MergeResult, BundleError]:
    name = merged_bundle_name(channel, info)
    target = store / name
    if target.exists():
        return Err(BundleError(message=f"bundle already exists: {name}", path=target))

    pattern = merge_pattern(channel)
    # merged bundles of other release candidates also match the pattern
    sources = [
        b
        for b in list_bundles(store)
        if fnmatchcase(b, pattern) and not is_merged_bundle(channel, b)
    ]
    if not sources:
        return Err(
            BundleError(message=f"no bundles match {pattern} to merge", path=store)
        )

    chosen: dict[str, tuple[Path, str, str]] = {}
    for bundle in sources:
        for rel, path in _bundle_files(store / bundle):
            digest = sha256_file(path)
            seen = chosen.get(rel)
            if seen is None:
                chosen[rel] = (path, digest, bundle)
                continue
            if seen[1] != digest:
                return Err(
                    BundleError(
                        message=f"conflicting file {rel} in bundles {seen[2]} and {bundle}",
                        path=store,
                    )
                )

    if not chosen:
        return Err(BundleError(message=f"bundles matching {pattern} are empty", path=store))

    staging = store / f".{name}.tmp"
    try:
        if staging.exists():
            shutil.rmtree(staging)
        for rel, (path, _, _) in sorted(chosen.items()):
            dest = staging / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, dest)
        staging.rename(target)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        return Err(BundleError(message=f"failed to write merged bundle {name}: {e}", path=target))

    if delete_merged:
        for bundle in sources:
            try:
                shutil.rmtree(store / bundle)
            except OSError as e:
                return Err(
                    BundleError(
                        message=f"merged {name} but failed to delete {bundle}: {e}",
                        path=store / bundle,
                    )
                )

    return Ok(
        MergeResult(
            name=name,
            path=target,
            files=tuple(sorted(chosen)),
            merged=tuple(sources),
            deleted=delete_merged,
        )
    )
