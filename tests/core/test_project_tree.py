#!/usr/bin/env python3
"""
Unit тесты для project_tree.py
"""

import pytest

from site_builder_mcp.core.artifact_parser import parse_artifact
from site_builder_mcp.core.errors import FileNotFoundInTreeError, MalformedPathError, PathCollisionError
from site_builder_mcp.core.project_tree import (
    apply_steps,
    ensure_folder,
    fold_steps,
    read_file,
    write_file,
)
from site_builder_mcp.models.steps import Step, StepKind
from site_builder_mcp.models.tree import FileItem, FolderItem, ProjectTree


def file_step(step_id: int, path: str | None, content: str) -> Step:
    return Step(id=step_id, kind=StepKind.CREATE_FILE, path=path, content=content)


class TestApplySteps:
    """Тесты для apply_steps"""

    @pytest.fixture
    def empty_tree(self):
        """Создает пустое дерево проекта"""
        return ProjectTree()

    def test_example_artifact_builds_nested_folder(self, empty_tree):
        """Тест примера src/index.js"""
        steps = parse_artifact(
            '<boltArtifact><boltAction type="file" filePath="src/index.js">console.log("hi")</boltAction></boltArtifact>'
        )

        tree = apply_steps(empty_tree, steps)

        assert tree == ProjectTree(
            children=(
                FolderItem(
                    name="src",
                    path="/src",
                    children=(FileItem(name="index.js", path="/src/index.js", content='console.log("hi")'),),
                ),
            )
        )

    def test_two_batches_same_path_keep_latest(self, empty_tree):
        """Тест двух последовательных пакетов для /a.txt"""
        tree = apply_steps(empty_tree, [file_step(0, "/a.txt", "1")])
        tree = apply_steps(tree, [file_step(1, "/a.txt", "2")])

        files = list(tree.iter_files())
        assert len(files) == 1
        assert files[0].path == "/a.txt"
        assert files[0].content == "2"

    def test_later_step_wins_within_batch(self, empty_tree):
        """Тест порядка шагов внутри пакета"""
        tree = apply_steps(empty_tree, [file_step(0, "/x/y.txt", "old"), file_step(1, "x/y.txt", "new")])

        assert read_file(tree, "/x/y.txt") == "new"
        assert len(list(tree.iter_files())) == 1

    def test_idempotent(self, empty_tree):
        """Тест идемпотентности"""
        steps = [
            file_step(0, "/src/a.js", "a"),
            file_step(1, "/src/lib/b.js", "b"),
            Step(id=2, kind=StepKind.CREATE_FOLDER, path="/public"),
            file_step(3, "/README.md", "# hi"),
        ]

        once = apply_steps(empty_tree, steps)
        twice = apply_steps(once, steps)

        assert twice == once

    def test_replacement_keeps_position(self, empty_tree):
        """Тест сохранения позиции при замене"""
        tree = apply_steps(
            empty_tree,
            [file_step(0, "/a.txt", "a"), file_step(1, "/b.txt", "b"), file_step(2, "/c.txt", "c")],
        )

        tree = apply_steps(tree, [file_step(3, "/a.txt", "A"), file_step(4, "/d.txt", "d")])

        assert [node.name for node in tree.children] == ["a.txt", "b.txt", "c.txt", "d.txt"]
        assert read_file(tree, "/a.txt") == "A"

    def test_original_tree_is_not_mutated(self, empty_tree):
        """Тест неизменяемости исходного дерева"""
        before = apply_steps(empty_tree, [file_step(0, "/src/a.js", "a")])
        src_before = before.find("/src")

        after = apply_steps(before, [file_step(1, "/src/b.js", "b"), file_step(2, "/src/a.js", "changed")])

        assert read_file(before, "/src/a.js") == "a"
        assert before.find("/src") is src_before
        assert len(src_before.children) == 1
        assert read_file(after, "/src/a.js") == "changed"

    def test_unchanged_siblings_are_shared(self, empty_tree):
        """Тест что незатронутые узлы переиспользуются"""
        tree = apply_steps(empty_tree, [file_step(0, "/lib/x.js", "x"), file_step(1, "/src/a.js", "a")])

        updated = apply_steps(tree, [file_step(2, "/src/a.js", "b")])

        assert updated.find("/lib") is tree.find("/lib")

    def test_run_command_does_not_touch_tree(self, empty_tree):
        """Тест команды shell"""
        tree = apply_steps(empty_tree, [Step(id=0, kind=StepKind.RUN_COMMAND, content="npm install")])

        assert tree == empty_tree

    def test_folder_step_creates_empty_folder_once(self, empty_tree):
        """Тест шага создания папки"""
        folder = Step(id=0, kind=StepKind.CREATE_FOLDER, path="/assets/img")
        tree = apply_steps(empty_tree, [folder, file_step(1, "/assets/img/logo.svg", "<svg/>"), folder])

        assets = tree.find("/assets")
        assert isinstance(assets, FolderItem)
        img = tree.find("/assets/img")
        assert [child.name for child in img.children] == ["logo.svg"]


class TestFoldErrors:
    """Тесты ошибок при применении шагов"""

    def test_file_where_folder_needed_is_rejected(self):
        """Тест коллизии файла и папки на промежуточном сегменте"""
        tree = apply_steps(ProjectTree(), [file_step(0, "/src", "i am a file")])

        result = fold_steps(tree, [file_step(1, "/src/index.js", "x"), file_step(2, "/ok.txt", "ok")])

        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, PathCollisionError)
        assert error.step_id == 1
        assert error.path == "/src"
        assert read_file(result.tree, "/src") == "i am a file"
        assert read_file(result.tree, "/ok.txt") == "ok"

    def test_file_over_folder_is_rejected(self):
        """Тест коллизии файла поверх папки"""
        tree = apply_steps(ProjectTree(), [file_step(0, "/src/index.js", "x")])

        result = fold_steps(tree, [file_step(1, "/src", "oops")])

        assert isinstance(result.errors[0], PathCollisionError)
        assert result.tree == tree

    def test_folder_over_file_is_rejected(self):
        """Тест коллизии папки поверх файла"""
        tree = apply_steps(ProjectTree(), [file_step(0, "/docs", "x")])

        with pytest.raises(PathCollisionError):
            ensure_folder(tree, "/docs")

    @pytest.mark.parametrize("path", [None, "", "/", "//", "  ", "../etc/passwd"])
    def test_malformed_path_is_dropped(self, path):
        """Тест некорректного пути"""
        tree = apply_steps(ProjectTree(), [file_step(0, "/keep.txt", "k")])

        result = fold_steps(tree, [file_step(1, path, "x")])

        assert result.tree == tree
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], MalformedPathError)

    def test_all_steps_are_marked_completed(self):
        """Тест статуса шагов после применения"""
        steps = [file_step(0, "/a", "1"), file_step(1, "", "bad"), Step(id=2, kind=StepKind.RUN_COMMAND, content="ls")]

        result = fold_steps(ProjectTree(), steps)

        assert [step.status for step in result.steps] == ["completed"] * 3
        assert [step.id for step in result.steps] == [0, 1, 2]
        # Input steps are left as they were.
        assert all(step.status == "pending" for step in steps)


class TestEditorOperations:
    """Тесты чтения и записи файлов редактором"""

    def test_write_file_creates_and_replaces(self):
        tree = write_file(ProjectTree(), "src/App.tsx", "v1")
        tree = write_file(tree, "/src/App.tsx", "v2")

        assert read_file(tree, "src/App.tsx") == "v2"
        assert len(list(tree.iter_files())) == 1

    def test_read_missing_file(self):
        with pytest.raises(FileNotFoundInTreeError):
            read_file(ProjectTree(), "/nope.txt")

    def test_read_folder_is_an_error(self):
        tree = write_file(ProjectTree(), "/src/a.js", "a")

        with pytest.raises(FileNotFoundInTreeError):
            read_file(tree, "/src")
