"""Tests for project.py — ProjectAgent."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from projectagent.project import ProjectAgent


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path / "tmp"


@pytest.fixture
def project(root: Path) -> ProjectAgent:
    return ProjectAgent.create(
        root,
        "test_project",
        dependencies={"aqueduct": "^3.0.0", "relative": {"path": "../"}},
        dev_dependencies={"test": "^1.0.0"},
    )


class TestCreate:
    def test_layout(self, project: ProjectAgent, root: Path) -> None:
        project_dir = root / "test_project"
        assert project.working_directory == project_dir
        assert (project_dir / "lib").is_dir()
        assert (project_dir / "analysis_options.yaml").is_file()
        assert (project_dir / "pubspec.yaml").is_file()
        assert project.entry_library_path == project_dir / "lib" / "test_project.dart"
        assert project.entry_library_path.read_text() == ""

    def test_manifest_contents(self, project: ProjectAgent) -> None:
        data = yaml.safe_load(project.manifest_path.read_text())
        assert data["name"] == "test_project"
        assert data["dependencies"] == {"aqueduct": "^3.0.0", "relative": {"path": "../"}}
        assert data["dev_dependencies"] == {"test": "^1.0.0"}

    def test_analysis_options(self, project: ProjectAgent) -> None:
        data = yaml.safe_load((project.working_directory / "analysis_options.yaml").read_text())
        assert data == {"analyzer": {"strong-mode": {"implicit-casts": False}}}

    def test_projects_share_root(self, root: Path) -> None:
        ProjectAgent.create(root, "one")
        ProjectAgent.create(root, "two")
        assert sorted(p.name for p in root.iterdir()) == ["one", "two"]

    def test_accessors_do_not_create(self, project: ProjectAgent) -> None:
        assert project.library_directory == project.working_directory / "lib"
        assert project.src_directory == project.working_directory / "lib" / "src"
        assert project.test_directory == project.working_directory / "test"
        assert not project.src_directory.exists()
        assert not project.test_directory.exists()


class TestExisting:
    def test_reads_name_from_manifest(self, project: ProjectAgent) -> None:
        reopened = ProjectAgent.existing(project.working_directory)
        assert reopened.name == "test_project"
        assert reopened.entry_library_path == project.entry_library_path

    def test_missing_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="not a project directory"):
            ProjectAgent.existing(tmp_path)

    def test_does_not_create_directory(self, tmp_path: Path) -> None:
        missing = tmp_path / "nowhere"
        with pytest.raises(ValueError):
            ProjectAgent.existing(missing)
        assert not missing.exists()

    def test_manifest_without_name(self, tmp_path: Path) -> None:
        (tmp_path / "pubspec.yaml").write_text("version: 0.0.1\n")
        with pytest.raises(ValueError):
            ProjectAgent.existing(tmp_path)


class TestLibraryFiles:
    def test_add_source_file(self, project: ProjectAgent) -> None:
        path = project.add_source_file("x", "class X {}")
        assert path == project.src_directory / "x.dart"
        content = path.read_text()
        assert content.startswith("import 'package:test_project/test_project.dart';\n")
        assert "class X {}" in content
        assert project.entry_library_path.read_text() == "export 'src/x.dart';\n"

    def test_add_library_file(self, project: ProjectAgent) -> None:
        path = project.add_library_file("y", "class Y {}")
        assert path == project.library_directory / "y.dart"
        assert "import 'package:test_project/test_project.dart';" in path.read_text()
        assert project.entry_library_path.read_text() == "export 'y.dart';\n"

    def test_exports_most_recent_first(self, project: ProjectAgent) -> None:
        project.add_source_file("a", "")
        project.add_library_file("b", "")
        project.add_source_file("x", "body")
        lines = project.entry_library_path.read_text().splitlines()
        assert lines == [
            "export 'src/x.dart';",
            "export 'b.dart';",
            "export 'src/a.dart';",
        ]

    def test_duplicate_exports_persist(self, project: ProjectAgent) -> None:
        project.add_source_file("a", "")
        project.add_source_file("a", "changed")
        assert project.entry_library_path.read_text().count("export 'src/a.dart';") == 2

    def test_export_false_still_registers(self, project: ProjectAgent) -> None:
        project.add_source_file("internal", "", export=False)
        project.add_library_file("helpers", "", export=False)
        assert (project.src_directory / "internal.dart").is_file()
        assert project.entry_library_path.read_text() == (
            "export 'helpers.dart';\nexport 'src/internal.dart';\n"
        )

    def test_add_library_export(self, project: ProjectAgent) -> None:
        project.add_library_export("package:aqueduct/aqueduct.dart")
        assert (
            project.entry_library_path.read_text()
            == "export 'package:aqueduct/aqueduct.dart';\n"
        )

    def test_export_without_entry_library(self, project: ProjectAgent) -> None:
        project.entry_library_path.unlink()
        with pytest.raises(ValueError, match="doesn't exist"):
            project.add_library_export("src/a.dart")


class TestDelegation:
    def test_file_operations(self, project: ProjectAgent) -> None:
        project.add_or_replace_file("test/a_test.dart", "void main() {}")
        assert project.get_file("test/a_test.dart") is not None
        project.modify_file("test/a_test.dart", lambda c: c.replace("main", "run"))
        assert (project.test_directory / "a_test.dart").read_text() == "void run() {}"

    def test_get_dependencies(self, project: ProjectAgent) -> None:
        with patch.object(project.agent, "get_dependencies") as mock_get:
            project.get_dependencies(offline=False)
        mock_get.assert_called_once_with(offline=False)


class TestTearDownAll:
    def test_removes_root(self, project: ProjectAgent, root: Path) -> None:
        ProjectAgent.tear_down_all(root)
        assert not root.exists()

    def test_twice_does_not_raise(self, project: ProjectAgent, root: Path) -> None:
        ProjectAgent.tear_down_all(root)
        ProjectAgent.tear_down_all(root)
        assert not root.exists()

    def test_missing_root(self, tmp_path: Path) -> None:
        ProjectAgent.tear_down_all(tmp_path / "never-created")
