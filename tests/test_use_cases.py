"""
Tests for the use cases — info, sort, check, add/remove, latest.
"""

from pathlib import Path
from unittest.mock import patch

from conftest import read_package, write_package
from npm_operate.adapters.mock import MockAdapter
from npm_operate.core.config.loader import SETTINGS_FILE
from npm_operate.core.models.package import PackageTool
from npm_operate.core.use_cases.check import check_manifests
from npm_operate.core.use_cases.deps import add_dependencies, get_latest, remove_dependencies
from npm_operate.core.use_cases.project import get_info, open_project, select_packages
from npm_operate.core.use_cases.sort import run_sort


class TestOpenProject:
    def test_settings_default_tool_is_fallback(self, single_project: Path):
        (single_project / SETTINGS_FILE).write_text("default_tool: yarn\n")
        project = open_project(single_project)
        assert project.selection.tool is PackageTool.YARN
        assert project.selection.source == "fallback"

    def test_tool_argument_beats_settings(self, single_project: Path):
        (single_project / SETTINGS_FILE).write_text("default_tool: yarn\n")
        assert open_project(single_project, tool="npm").selection.tool is PackageTool.NPM

    def test_lockfile_beats_tool_argument(self, single_project: Path):
        (single_project / "yarn.lock").write_text("")
        assert open_project(single_project, tool="npm").selection.tool is PackageTool.YARN

    def test_select_packages(self, workspace_project: Path):
        topology = open_project(workspace_project).topology
        assert [p.name for p in select_packages(topology)] == ["root", "a", "b"]
        assert [p.name for p in select_packages(topology, ["b", "root", "b"])] == ["b", "root"]


class TestInfo:
    def test_workspace(self, workspace_project: Path):
        result = get_info(workspace_project)
        assert result.error is None
        data = result.to_dict()
        assert data["topology"]["is_workspace_root"] is True
        assert data["tool"]["tool"] == "npm"
        assert any("No lockfile" in w for w in result.warnings)

    def test_missing_manifest(self, tmp_path: Path):
        result = get_info(tmp_path)
        assert "Manifest not found" in result.error
        assert result.to_dict() == {"error": result.error}


class TestSort:
    def test_sorts_everything(self, workspace_project: Path):
        write_package(workspace_project / "packages" / "a", {
            "devDependencies": {"typescript": "^5.0.0"},
            "version": "0.1.0",
            "name": "a",
        })
        result = run_sort(workspace_project)
        assert result.error is None
        assert [s.package for s in result.sorted] == ["root", "a", "b"]
        assert result.changed_count == 1
        assert list(read_package(workspace_project / "packages" / "a")) == [
            "name", "version", "devDependencies",
        ]

    def test_second_run_changes_nothing(self, single_project: Path):
        run_sort(single_project)
        assert run_sort(single_project).changed_count == 0

    def test_selected_packages_only(self, workspace_project: Path):
        result = run_sort(workspace_project, packages=["b"])
        assert [s.package for s in result.sorted] == ["b"]

    def test_unknown_package(self, workspace_project: Path):
        result = run_sort(workspace_project, packages=["nope"])
        assert "Unknown package 'nope'" in result.error
        assert result.to_dict() == {"error": result.error}


class TestCheck:
    def test_valid(self, workspace_project: Path):
        result = check_manifests(workspace_project)
        assert result.valid
        assert result.violation_count == 0

    def test_violations(self, single_project: Path):
        write_package(single_project, {"name": "Bad Name", "private": "yes"})
        result = check_manifests(single_project)
        assert not result.valid
        paths = [v.path for v in result.reports[0].violations]
        assert paths == ["version", "name", "private"]
        assert result.to_dict()["violations"] == 3


class TestDeps:
    def test_dry_run_uses_mock(self, workspace_project: Path):
        result = add_dependencies(workspace_project, ["zod"], members=["a"], dry_run=True)
        assert result.ok
        assert result.commands == ["npm install zod -w a"]

    def test_all_members(self, workspace_project: Path):
        adapter = MockAdapter()
        result = add_dependencies(workspace_project, ["zod"], dev=True, all_members=True, adapter=adapter)
        assert result.commands == [
            "npm install zod -w a --save-dev",
            "npm install zod -w b --save-dev",
        ]

    def test_failure_reported(self, single_project: Path):
        adapter = MockAdapter()
        adapter.set_failure("npm install zod", return_code=1)
        result = add_dependencies(single_project, ["zod", "ky"], adapter=adapter)
        assert not result.ok
        assert result.failed_command == "npm install zod"
        assert adapter.commands == ["npm install zod"]

    def test_failure_keeps_commands_that_ran(self, single_project: Path):
        adapter = MockAdapter()
        adapter.set_failure("npm install b")
        result = add_dependencies(single_project, ["a", "b", "c"], adapter=adapter)
        assert result.failed_command == "npm install b"
        assert result.commands == ["npm install a"]
        assert result.to_dict()["commands"] == ["npm install a"]

    def test_member_failure_keeps_earlier_members(self, workspace_project: Path):
        adapter = MockAdapter()
        adapter.set_failure("npm install zod -w b")
        result = add_dependencies(workspace_project, ["zod"], all_members=True, adapter=adapter)
        assert not result.ok
        assert result.commands == ["npm install zod -w a"]

    def test_lerna_only_member_remove(self, lerna_only_project: Path):
        adapter = MockAdapter()
        result = remove_dependencies(lerna_only_project, ["zod"], members=["a"], adapter=adapter)
        assert result.ok
        assert result.commands == ["npm uninstall zod"]
        assert adapter.calls[0].action.cwd.endswith("packages/a")

    def test_remove_absent_is_noop(self, single_project: Path):
        adapter = MockAdapter()
        result = remove_dependencies(single_project, ["left-pad"], adapter=adapter)
        assert result.ok
        assert result.commands == []
        assert adapter.call_count == 0

    @patch("npm_operate.core.services.dependency_ops.latest_version", return_value="3.22.4")
    def test_manifest_only_add(self, _latest, workspace_project: Path):
        result = add_dependencies(workspace_project, ["zod"], members=["a", "b"], manifest_only=True)
        assert result.ok
        assert [e.package for e in result.edits] == ["a", "b"]
        assert read_package(workspace_project / "packages" / "b")["dependencies"]["zod"] == "^3.22.4"

    def test_manifest_only_remove(self, single_project: Path):
        result = remove_dependencies(single_project, ["lodash"], manifest_only=True)
        assert result.edits[0].removed == ["lodash"]
        assert "lodash" not in read_package(single_project)["dependencies"]

    @patch("npm_operate.core.use_cases.deps.latest_version", return_value="18.2.0")
    def test_latest(self, mock_latest, tmp_path: Path):
        (tmp_path / SETTINGS_FILE).write_text("registry_url: https://r.test\n")
        result = get_latest(tmp_path, "react")
        assert result.version == "18.2.0"
        assert result.registry_url == "https://r.test"
        assert mock_latest.call_args.kwargs["registry_url"] == "https://r.test"
