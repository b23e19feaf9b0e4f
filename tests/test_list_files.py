import json
from pathlib import Path
from typing import Callable

from launchpad_agent import ValidatedPath, list_files, validate
from launchpad_agent.tools import ListFilesTool
from launchpad_agent.tools.list_files import MAX_ENTRIES

MakeTree = Callable[[dict[str, str]], Path]


def paths(entries: list) -> list[str]:
    return [entry.relative_path for entry in entries]


class TestListFiles:
    def test_pattern_filters_and_skips_ignored(self, make_tree: MakeTree) -> None:
        root = make_tree(
            {"src/a.ts": "", "src/b.ts": "", "node_modules/x.js": ""}
        )

        entries = list_files(validate(str(root)), pattern="*.ts", max_depth=2)

        assert paths(entries) == ["src/a.ts", "src/b.ts"]

    def test_no_pattern_lists_everything_in_name_order(
        self, project: ValidatedPath
    ) -> None:
        entries = list_files(project)

        assert paths(entries) == [
            "README.md",
            "package.json",
            "src",
            "src/a.ts",
            "src/b.ts",
            "src/components",
            "src/components/Button.tsx",
        ]

    def test_base_is_never_listed(self, project: ValidatedPath) -> None:
        entries = list_files(project)
        assert "" not in paths(entries)
        assert "." not in paths(entries)

    def test_directory_and_size_fields(self, make_tree: MakeTree) -> None:
        root = make_tree({"docs/guide.md": "hello"})

        entries = list_files(validate(str(root)))

        docs, guide = entries
        assert docs.is_directory and docs.size_bytes is None
        assert not guide.is_directory and guide.size_bytes == 5
        assert guide.to_dict() == {
            "path": "docs/guide.md",
            "is_directory": False,
            "size": 5,
        }

    def test_depth_limit(self, make_tree: MakeTree) -> None:
        root = make_tree({"a/b/c/d.txt": ""})

        assert paths(list_files(validate(str(root)), max_depth=1)) == ["a"]
        assert paths(list_files(validate(str(root)), max_depth=2)) == ["a", "a/b"]
        assert list_files(validate(str(root)), max_depth=0) == []

    def test_all_ignored_directories(self, make_tree: MakeTree) -> None:
        root = make_tree(
            {
                "node_modules_cache/x": "",
                ".git/HEAD": "",
                ".github/workflows/ci.yml": "",
                "target/debug/app": "",
                ".next/build": "",
                "dist/bundle.js": "",
                "out/index.html": "",
                "outline/notes.md": "",
                "main.ts": "",
            }
        )

        entries = list_files(validate(str(root)), max_depth=5)

        # .github shares the .git prefix; "outline" is only ignored when exact.
        assert paths(entries) == ["main.ts", "outline", "outline/notes.md"]

    def test_ignored_name_as_file_is_listed(self, make_tree: MakeTree) -> None:
        root = make_tree({"dist": "not a directory"})
        assert paths(list_files(validate(str(root)))) == ["dist"]

    def test_cap_applies_after_filtering(self, make_tree: MakeTree) -> None:
        files = {f"f{i:03d}.txt": "" for i in range(150)}
        files.update({f"g{i:03d}.md": "" for i in range(50)})
        root = make_tree(files)

        everything = list_files(validate(str(root)))
        markdown = list_files(validate(str(root)), pattern="*.md")

        assert len(everything) == MAX_ENTRIES
        assert len(markdown) == 50

    def test_pattern_matches_bare_name(self, project: ValidatedPath) -> None:
        entries = list_files(project, pattern="Button.tsx")
        assert paths(entries) == ["src/components/Button.tsx"]

    def test_invalid_pattern_is_ignored(self, project: ValidatedPath) -> None:
        assert list_files(project, pattern="[oops") == list_files(project)

    def test_symlinked_directory_not_followed(self, make_tree: MakeTree) -> None:
        root = make_tree({"real/inner.txt": ""})
        (root / "alias").symlink_to(root / "real", target_is_directory=True)

        entries = list_files(validate(str(root)))

        assert paths(entries) == ["alias", "real", "real/inner.txt"]
        assert not entries[0].is_directory


class TestListFilesTool:
    async def test_returns_pretty_json(self, project: ValidatedPath) -> None:
        tool = ListFilesTool()

        result = await tool.execute(
            {"base_path": str(project), "pattern": "*.ts", "max_depth": 2}
        )

        src = project.path / "src"
        assert json.loads(result.text) == [
            {
                "path": "src/a.ts",
                "is_directory": False,
                "size": (src / "a.ts").stat().st_size,
            },
            {
                "path": "src/b.ts",
                "is_directory": False,
                "size": (src / "b.ts").stat().st_size,
            },
        ]
        assert result.text.startswith("[\n  {")

    async def test_empty_listing(self, make_tree: MakeTree) -> None:
        root = make_tree({"empty/": ""})
        result = await ListFilesTool().execute({"base_path": str(root / "empty")})
        assert result.text == "[]"

    async def test_bad_depth_falls_back_to_default(self, make_tree: MakeTree) -> None:
        root = make_tree({"a/b/c/d/e.txt": ""})
        tool = ListFilesTool()

        for depth in (-1, "2", 2.5, True):
            result = await tool.execute({"base_path": str(root), "max_depth": depth})
            assert [e["path"] for e in json.loads(result.text)] == [
                "a",
                "a/b",
                "a/b/c",
            ]

    def test_schema(self) -> None:
        schema = ListFilesTool().input_schema
        assert schema["type"] == "object"
        assert schema["required"] == ["base_path"]
        assert set(schema["properties"]) == {"base_path", "pattern", "max_depth"}
        assert schema["properties"]["max_depth"]["type"] == "integer"
