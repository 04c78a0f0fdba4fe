"""
Dependency operations — install and uninstall across a project.

Two modes:

    command mode    render one package-manager command per dependency
                    and run it through an adapter (npm / yarn / lerna)
    manifest mode   edit the dependency maps of package.json directly,
                    resolving bare names to their latest registry version

Batches are strictly sequential. In command mode the first failed
command raises ``CommandFailedError`` and the rest of the batch is not
attempted. Manifest mode tolerates registry failures per name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from npm_operate.adapters.base import Adapter, ExecutionContext
from npm_operate.core.config.loader import DEFAULT_REGISTRY_URL
from npm_operate.core.errors import CommandFailedError, RegistryLookupError
from npm_operate.core.models.action import Action, Receipt
from npm_operate.core.models.package import (
    Intent,
    PackageEntry,
    ProjectTopology,
    ToolSelection,
)
from npm_operate.core.models.schema import ObjectSchema
from npm_operate.core.services.manifest_store import (
    DEPENDENCY_FIELDS,
    declared_dependencies,
    read_manifest,
    update_manifest,
    write_manifest,
)
from npm_operate.core.services.normalizer import normalize
from npm_operate.core.services.package_manager import (
    command_cwd,
    render_command,
    scope_for,
)
from npm_operate.core.services.registry import latest_version

logger = logging.getLogger(__name__)


@dataclass
class ManifestEdit:
    """Outcome of a manifest-only add or remove on one package."""

    package: str
    manifest_path: str
    added: dict[str, str] = field(default_factory=dict)
    removed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    written: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "manifest_path": self.manifest_path,
            "added": dict(self.added),
            "removed": list(self.removed),
            "failed": dict(self.failed),
            "written": self.written,
        }


def split_spec(spec: str) -> tuple[str, str | None]:
    """Split ``name@range`` into ``(name, range)``.

    The leading ``@`` of a scoped name is not a separator:
    ``@scope/pkg@^1.0.0`` → ``("@scope/pkg", "^1.0.0")``.
    """
    at = spec.rfind("@")
    if at <= 0:
        return spec, None
    name, version = spec[:at], spec[at + 1:]
    return name, version or None


def _unique(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out


@contextmanager
def _completed_before(receipts: list[Receipt]) -> Iterator[None]:
    """Prefix a batch failure with the receipts that succeeded before it."""
    try:
        yield
    except CommandFailedError as e:
        e.completed = [*receipts, *e.completed]
        raise


class DependencyOperations:
    """Install / uninstall dependencies on the packages of one topology."""

    def __init__(
        self,
        topology: ProjectTopology,
        selection: ToolSelection,
        adapter: Adapter,
        *,
        schema: ObjectSchema | None = None,
        registry_url: str = DEFAULT_REGISTRY_URL,
        registry_timeout: float = 10.0,
        save_prefix: str = "^",
    ):
        self.topology = topology
        self.selection = selection
        self.adapter = adapter
        self.schema = schema
        self.registry_url = registry_url
        self.registry_timeout = registry_timeout
        self.save_prefix = save_prefix

    # ── Targets ─────────────────────────────────────────────────

    def resolve_target(self, target: str | None) -> PackageEntry:
        """``None`` is the root (or single) package, otherwise a member name."""
        if target is None:
            return self.topology.root
        return self.topology.member(target)

    def _selected_members(self, members: Iterable[str] | None) -> list[PackageEntry]:
        if members is None:
            return list(self.topology.members)
        return [self.topology.member(name) for name in members]

    # ── Command mode ────────────────────────────────────────────

    def install(
        self,
        names: Iterable[str],
        *,
        dev: bool = False,
        target: str | None = None,
    ) -> list[Receipt]:
        """Run one install command per name against the target package."""
        entry = self.resolve_target(target)
        return self._batch(Intent.INSTALL, entry, names, dev=dev)

    def uninstall(
        self,
        names: Iterable[str],
        *,
        target: str | None = None,
    ) -> list[Receipt]:
        """Run uninstall commands for the names the target actually declares.

        The manifest is re-read from disk. Names in neither dependency map
        are skipped; if none remain, no command runs at all.
        """
        entry = self.resolve_target(target)
        declared = declared_dependencies(read_manifest(entry.manifest_path))

        present: list[str] = []
        for name in _unique(names):
            if name in declared:
                present.append(name)
            else:
                logger.info("%s does not depend on %s, skipping", entry.name, name)

        if not present:
            logger.info("Nothing to uninstall from %s", entry.name)
            return []

        return self._batch(Intent.UNINSTALL, entry, present)

    def install_members(
        self,
        names: Iterable[str],
        *,
        dev: bool = False,
        members: Iterable[str] | None = None,
    ) -> list[Receipt]:
        """Install into each selected member in turn (default: all members)."""
        names = list(names)
        receipts: list[Receipt] = []
        for entry in self._selected_members(members):
            with _completed_before(receipts):
                receipts.extend(self.install(names, dev=dev, target=entry.name))
        return receipts

    def uninstall_members(
        self,
        names: Iterable[str],
        *,
        members: Iterable[str] | None = None,
    ) -> list[Receipt]:
        """Uninstall from each selected member in turn (default: all members)."""
        names = list(names)
        receipts: list[Receipt] = []
        for entry in self._selected_members(members):
            with _completed_before(receipts):
                receipts.extend(self.uninstall(names, target=entry.name))
        return receipts

    def _batch(
        self,
        intent: Intent,
        entry: PackageEntry,
        names: Iterable[str],
        *,
        dev: bool = False,
    ) -> list[Receipt]:
        receipts: list[Receipt] = []
        for name in names:
            with _completed_before(receipts):
                receipts.append(self._run(intent, entry, name, dev=dev))
        return receipts

    def _run(
        self,
        intent: Intent,
        entry: PackageEntry,
        dependency: str,
        *,
        dev: bool = False,
    ) -> Receipt:
        scope = scope_for(self.topology, entry, intent)
        member = entry.name if entry is not self.topology.root else None
        command = render_command(
            intent,
            scope,
            self.selection.tool,
            dependency,
            member=member,
            dev=dev,
            orchestrator=self.selection.orchestrator,
        )
        action = Action(
            id=f"{intent}:{entry.name}:{dependency}",
            adapter=self.adapter.name,
            command=command,
            cwd=str(command_cwd(scope, self.topology, entry)),
            for_package=entry.name,
            dependency=dependency,
        )
        context = ExecutionContext(action=action, project_root=str(self.topology.root_dir))

        valid, error = self.adapter.validate(context)
        if not valid:
            raise CommandFailedError(command, None, error)

        receipt = self.adapter.execute(context)
        if receipt.failed:
            raise CommandFailedError(command, receipt.return_code, receipt.error or "")

        logger.info("%s %s on %s: ok", intent, dependency, entry.name)
        return receipt

    # ── Manifest mode ───────────────────────────────────────────

    def add_to_manifest(
        self,
        names: Iterable[str],
        *,
        dev: bool = False,
        target: str | None = None,
    ) -> ManifestEdit:
        """Declare dependencies in the manifest without running a tool.

        Bare names get ``{save_prefix}{latest}``; ``name@range`` is kept
        verbatim. A registry failure for one name is recorded in
        ``failed`` and the remaining names are still added.
        """
        entry = self.resolve_target(target)
        edit = ManifestEdit(package=entry.name, manifest_path=str(entry.manifest_path))
        section_name = "devDependencies" if dev else "dependencies"

        for spec in _unique(names):
            name, version_range = split_spec(spec)
            if version_range is None:
                try:
                    version = latest_version(
                        name,
                        registry_url=self.registry_url,
                        timeout=self.registry_timeout,
                    )
                except RegistryLookupError as e:
                    logger.warning("%s", e)
                    edit.failed[name] = e.reason
                    continue
                version_range = f"{self.save_prefix}{version}"
            edit.added[name] = version_range

        if not edit.added:
            return edit

        manifest = read_manifest(entry.manifest_path)
        section = manifest.get(section_name)
        section = dict(section) if isinstance(section, dict) else {}
        section.update(edit.added)
        manifest[section_name] = section

        if self.schema is not None:
            manifest = normalize(manifest, self.schema)
        edit.written = write_manifest(entry.manifest_path, manifest)
        return edit

    def remove_from_manifest(
        self,
        names: Iterable[str],
        *,
        target: str | None = None,
    ) -> ManifestEdit:
        """Delete names from both dependency maps, writing only on change."""
        entry = self.resolve_target(target)
        edit = ManifestEdit(package=entry.name, manifest_path=str(entry.manifest_path))
        manifest = read_manifest(entry.manifest_path)
        changes: dict[str, dict] = {}

        for name in _unique(names):
            found = False
            for section_name in DEPENDENCY_FIELDS:
                section = changes.get(section_name, manifest.get(section_name))
                if isinstance(section, dict) and name in section:
                    changes[section_name] = {k: v for k, v in section.items() if k != name}
                    found = True
            if found:
                edit.removed.append(name)
            else:
                logger.info("%s does not depend on %s, skipping", entry.name, name)

        if changes:
            update_manifest(entry.manifest_path, changes)
            edit.written = True
        return edit
