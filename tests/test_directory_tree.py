from pathlib import Path
from typing import Callable

from launchpad_agent import ValidatedPath, get_directory_tree, validate
from launchpad_agent.tools import DirectoryTreeTool

MakeTree = Callable[[dict[str, str]], Path]


class TestDirectoryTree:
    def test_layout(self, project: ValidatedPath) -> None:
        tree = get_directory_tree(project)

        assert tree == (
            "└── project/\n"
            "    ├── src/\n"
            "    │   ├── components/\n"
            "    │   │   └── Button.tsx\n"
            "    │   ├── a.ts\n"
            "    │   └── b.ts\n"
            "    ├── README.md\n"
            "    └── package.json\n"
        )

    def test_deterministic(self, project: ValidatedPath) -> None:
        assert get_directory_tree(project) == get_directory_tree(project)

    def test_directories_before_files(self, make_tree: MakeTree) -> None:
        root = make_tree({"a.txt": "", "z/": "", "b/": ""})

        tree = get_directory_tree(validate(str(root)))

        assert tree.splitlines()[1:] == [
            "    ├── b/",
            "    ├── z/",
            "    └── a.txt",
        ]

    def test_depth_zero_is_root_only(self, project: ValidatedPath) -> None:
        assert get_directory_tree(project, max_depth=0) == "└── project/\n"

    def test_depth_limit(self, make_tree: MakeTree) -> None:
        root = make_tree({"a/b/c/d.txt": ""})

        tree = get_directory_tree(validate(str(root)), max_depth=2)

        assert tree == "└── project/\n    └── a/\n        └── b/\n"

    def test_ignored_directories_pruned(self, make_tree: MakeTree) -> None:
        root = make_tree(
            {
                "node_modules/x.js": "",
                ".git/HEAD": "",
                "dist/out.js": "",
                "target/debug/app": "",
                "src/main.rs": "",
            }
        )

        tree = get_directory_tree(validate(str(root)))

        assert tree == "└── project/\n    └── src/\n        └── main.rs\n"

    def test_ignored_root_renders_empty(self, make_tree: MakeTree) -> None:
        root = make_tree({".git/HEAD": ""})
        assert get_directory_tree(validate(str(root / ".git"))) == ""

    def test_file_root(self, make_tree: MakeTree) -> None:
        root = make_tree({"notes.md": ""})
        assert get_directory_tree(validate(str(root / "notes.md"))) == "└── notes.md\n"

    def test_symlinked_directory_not_expanded(self, make_tree: MakeTree) -> None:
        root = make_tree({"real/inner.txt": ""})
        (root / "loop").symlink_to(root, target_is_directory=True)

        tree = get_directory_tree(validate(str(root)), max_depth=5)

        assert tree == (
            "└── project/\n"
            "    ├── real/\n"
            "    │   └── inner.txt\n"
            "    └── loop\n"
        )


class TestDirectoryTreeTool:
    async def test_default_depth(self, make_tree: MakeTree) -> None:
        root = make_tree({"a/b/c/d/e.txt": ""})

        result = await DirectoryTreeTool().execute({"base_path": str(root)})

        assert result.text.splitlines() == [
            "└── project/",
            "    └── a/",
            "        └── b/",
            "            └── c/",
        ]

    def test_name_and_schema(self) -> None:
        tool = DirectoryTreeTool()
        assert tool.name == "get_directory_tree"
        assert tool.input_schema["required"] == ["base_path"]
