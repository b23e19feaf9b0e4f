import logging
import os
from pathlib import Path

import pytest

from launchpad_agent import (
    AccessDeniedError,
    NotFoundError,
    TraversalDeniedError,
    ValidatedPath,
    validate,
)
from launchpad_agent.sandbox import (
    POSIX_DENIED_SEGMENTS,
    WINDOWS_DENIED_SEGMENTS,
    denied_segments,
)


class TestValidate:
    def test_existing_file_is_canonical(self, tmp_path: Path) -> None:
        target = tmp_path / "a.txt"
        target.write_text("hi")

        result = validate(str(target))

        assert isinstance(result, ValidatedPath)
        assert result.path == target.resolve()
        assert result.path.is_absolute()
        assert str(result) == str(target.resolve())
        assert os.fspath(result) == str(target.resolve())

    def test_dot_segments_are_collapsed(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.txt").write_text("hi")

        result = validate(str(tmp_path / "sub" / ".." / "a.txt"))

        assert result.path == (tmp_path / "a.txt").resolve()

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="Path does not exist"):
            validate(str(tmp_path / "missing.txt"))

    def test_relative_path_resolves_against_base(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.py").write_text("")
        base = validate(str(tmp_path))

        result = validate("src/main.py", required_base=base)

        assert result.path == (tmp_path / "src" / "main.py").resolve()

    def test_base_itself_is_inside_base(self, tmp_path: Path) -> None:
        base = validate(str(tmp_path))
        assert validate(str(tmp_path), required_base=base).path == base.path

    def test_missing_path_inside_base(self, tmp_path: Path) -> None:
        base = validate(str(tmp_path))
        with pytest.raises(NotFoundError):
            validate("nope.txt", required_base=base)

    def test_embedded_nul_byte(self, tmp_path: Path) -> None:
        (tmp_path / "a.ts").write_text("")
        base = validate(str(tmp_path))

        with pytest.raises(NotFoundError):
            validate("a\x00.ts", required_base=base)
        with pytest.raises(NotFoundError):
            validate(str(tmp_path / "a\x00.ts"))

    def test_nul_byte_outside_base_is_traversal(self, tmp_path: Path) -> None:
        (tmp_path / "project").mkdir()
        base = validate(str(tmp_path / "project"))

        with pytest.raises(TraversalDeniedError):
            validate("../x\x00", required_base=base)

    def test_existing_path_outside_base(self, tmp_path: Path) -> None:
        (tmp_path / "project").mkdir()
        (tmp_path / "outside.txt").write_text("secret")
        base = validate(str(tmp_path / "project"))

        with pytest.raises(TraversalDeniedError, match="escapes project root"):
            validate("../outside.txt", required_base=base)

    def test_absolute_path_outside_base(self, tmp_path: Path) -> None:
        (tmp_path / "project").mkdir()
        (tmp_path / "other").mkdir()
        base = validate(str(tmp_path / "project"))

        with pytest.raises(TraversalDeniedError):
            validate(str(tmp_path / "other"), required_base=base)

    def test_missing_path_escaping_base_is_traversal(self, tmp_path: Path) -> None:
        (tmp_path / "home" / "user" / "project").mkdir(parents=True)
        base = validate(str(tmp_path / "home" / "user" / "project"))

        with pytest.raises(TraversalDeniedError):
            validate("../../etc/ssh_keys", required_base=base)

    def test_sibling_with_common_prefix_is_outside(self, tmp_path: Path) -> None:
        (tmp_path / "app").mkdir()
        (tmp_path / "app-private").mkdir()
        (tmp_path / "app-private" / "key.txt").write_text("k")
        base = validate(str(tmp_path / "app"))

        with pytest.raises(TraversalDeniedError):
            validate(str(tmp_path / "app-private" / "key.txt"), required_base=base)

    def test_symlink_escaping_base(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "data.txt").write_text("x")
        (project / "link").symlink_to(outside, target_is_directory=True)
        base = validate(str(project))

        with pytest.raises(TraversalDeniedError):
            validate("link/data.txt", required_base=base)

    def test_symlink_inside_base_is_allowed(self, tmp_path: Path) -> None:
        (tmp_path / "real.txt").write_text("x")
        (tmp_path / "alias.txt").symlink_to(tmp_path / "real.txt")
        base = validate(str(tmp_path))

        result = validate("alias.txt", required_base=base)

        assert result.path == (tmp_path / "real.txt").resolve()

    def test_home_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "notes.md").write_text("n")

        result = validate("~/notes.md")

        assert result.path == (tmp_path / "notes.md").resolve()


class TestDenylist:
    def test_ssh_directory_denied(self, tmp_path: Path) -> None:
        (tmp_path / ".ssh").mkdir()
        (tmp_path / ".ssh" / "id_rsa").write_text("key")

        with pytest.raises(AccessDeniedError, match="sensitive path"):
            validate(str(tmp_path / ".ssh" / "id_rsa"))

    def test_denied_regardless_of_base(self, tmp_path: Path) -> None:
        (tmp_path / ".aws").mkdir()
        (tmp_path / ".aws" / "config").write_text("[default]")
        base = validate(str(tmp_path))

        with pytest.raises(AccessDeniedError):
            validate(".aws/config", required_base=base)

    def test_denied_substring_anywhere_in_path(self, tmp_path: Path) -> None:
        target = tmp_path / "my-credentials.json"
        target.write_text("{}")

        with pytest.raises(AccessDeniedError):
            validate(str(target))

    def test_denylist_wins_over_traversal(self, tmp_path: Path) -> None:
        (tmp_path / "project").mkdir()
        (tmp_path / ".kube").mkdir()
        (tmp_path / ".kube" / "config").write_text("")
        base = validate(str(tmp_path / "project"))

        with pytest.raises(AccessDeniedError):
            validate("../.kube/config", required_base=base)

    def test_symlink_into_denied_location(self, tmp_path: Path) -> None:
        (tmp_path / ".gnupg").mkdir()
        (tmp_path / ".gnupg" / "pubring.kbx").write_text("")
        (tmp_path / "innocent").symlink_to(tmp_path / ".gnupg" / "pubring.kbx")

        with pytest.raises(AccessDeniedError):
            validate(str(tmp_path / "innocent"))

    def test_denial_is_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / ".docker").mkdir()
        with caplog.at_level(logging.WARNING, logger="launchpad_agent.sandbox"):
            with pytest.raises(AccessDeniedError):
                validate(str(tmp_path / ".docker"))
        assert any("sensitive path" in r.getMessage() for r in caplog.records)

    def test_platform_lists(self) -> None:
        assert denied_segments("linux")[: len(POSIX_DENIED_SEGMENTS)] == (
            POSIX_DENIED_SEGMENTS
        )
        assert denied_segments("win32")[: len(WINDOWS_DENIED_SEGMENTS)] == (
            WINDOWS_DENIED_SEGMENTS
        )
        assert "/.ssh" in POSIX_DENIED_SEGMENTS
        assert "\\.ssh" in WINDOWS_DENIED_SEGMENTS

    def test_extra_segments(self, tmp_path: Path) -> None:
        (tmp_path / "vault").mkdir()
        (tmp_path / "vault" / "secret.txt").write_text("")
        with pytest.raises(AccessDeniedError):
            validate(str(tmp_path / "vault" / "secret.txt"), extra_denied=["/vault/"])
        assert denied_segments("linux", ["/vault/", ""])[-1] == "/vault/"
        assert validate(str(tmp_path / "vault" / "secret.txt")).name == "secret.txt"


class TestValidatedPath:
    def test_cannot_be_constructed_directly(self) -> None:
        with pytest.raises(TypeError):
            ValidatedPath(Path("/"))

    def test_is_dir_and_is_file(self, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("")
        assert validate(str(tmp_path)).is_dir()
        assert validate(str(tmp_path / "f.txt")).is_file()
