from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from explainer_doc.config import (
    ConfigError,
    ViewerConfig,
    apply_overrides,
    build_config,
    load_config,
    section_keys,
    validate_config,
)
from explainer_doc.constants import DEFAULT_SECTIONS
from explainer_doc.models import SectionKey


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".explainer-doc.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        scroll_offset = -120
        highlight_seconds = 1.5
        index_max_level = 3
        toc_min_level = 2
        toc_max_level = 4
        preserve_unicode = true
        max_file_size = 2048
        """,
    )

    config = load_config(tmp_path)

    assert config == ViewerConfig(
        scroll_offset=-120,
        highlight_seconds=1.5,
        index_max_level=3,
        toc_min_level=2,
        toc_max_level=4,
        preserve_unicode=True,
        max_file_size=2048,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [explainer-doc]
        scroll_offset = -40
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.scroll_offset == -40


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.explainer-doc]
        highlight_seconds = 4
        """,
    )

    assert load_config(tmp_path).highlight_seconds == 4


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        index_max_level = 1
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.index_max_level == 1


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        scroll_offset = -10
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "unrelated"
        """,
    )

    assert load_config(child).scroll_offset == -10


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        scroll_offset = -10
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.explainer-doc]
        """,
    )

    config = load_config(child)

    assert config == ViewerConfig()


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == ViewerConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        toc_max_level = 5
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.toc_max_level == 5


@pytest.mark.parametrize(
    "body",
    [
        """
        [tool.explainer-doc]
        unexpected = true
        """,
        """
        [tool]
        explainer-doc = "not a table"
        """,
    ],
)
def test_load_config_errors_on_invalid_table(tmp_path: Path, body: str):
    _write_pyproject(tmp_path, body)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_loads_custom_sections(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [[tool.explainer-doc.sections]]
        key = "faq"
        label = "FAQ"
        keywords = ["FAQ", "Questions"]

        [[tool.explainer-doc.sections]]
        key = "further-reading"
        """,
    )

    config = load_config(tmp_path)

    assert section_keys(config) == (
        SectionKey("faq", "FAQ", ("faq", "questions")),
        SectionKey("further-reading", "Further Reading", ("further reading",)),
    )


def test_section_keys_defaults_to_builtin_taxonomy():
    assert section_keys(ViewerConfig()) == DEFAULT_SECTIONS


@pytest.mark.parametrize(
    "sections",
    [
        "faq",
        [{"label": "No key"}],
        [{"key": ""}],
        [{"key": "a"}, {"key": "a"}],
        [{"key": "a", "label": " "}],
        [{"key": "a", "keywords": "a"}],
        [{"key": "a", "keywords": [1]}],
    ],
)
def test_section_keys_rejects_malformed_entries(sections):
    with pytest.raises(ConfigError):
        section_keys(ViewerConfig(sections=sections))


@pytest.mark.parametrize(
    "config",
    [
        ViewerConfig(scroll_offset=10),
        ViewerConfig(scroll_offset=0),
        ViewerConfig(highlight_seconds=0),
        ViewerConfig(highlight_seconds=-1.0),
        ViewerConfig(index_max_level=0),
        ViewerConfig(index_max_level=7),
        ViewerConfig(toc_min_level=0),
        ViewerConfig(toc_min_level=3, toc_max_level=2),
        ViewerConfig(toc_max_level=7),
        ViewerConfig(max_file_size=0),
        ViewerConfig(sections=[{"key": ""}]),
    ],
)
def test_validate_config_rejects_invalid_values(config: ViewerConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        ViewerConfig(scroll_offset="-80"),  # type: ignore[arg-type]
        ViewerConfig(highlight_seconds="2"),  # type: ignore[arg-type]
        ViewerConfig(highlight_seconds=True),  # type: ignore[arg-type]
        ViewerConfig(index_max_level=2.0),  # type: ignore[arg-type]
        ViewerConfig(toc_min_level="1"),  # type: ignore[arg-type]
        ViewerConfig(max_file_size="big"),  # type: ignore[arg-type]
        ViewerConfig(preserve_unicode="yes"),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_wrong_types(config: ViewerConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(ViewerConfig())


def test_apply_overrides_ignores_none():
    config = ViewerConfig()

    assert apply_overrides(config, scroll_offset=None) is config
    assert apply_overrides(config, scroll_offset=-5).scroll_offset == -5


def test_build_config_applies_overrides_and_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.explainer-doc]
        toc_max_level = 2
        """,
    )

    assert build_config(tmp_path, toc_min_level=2).toc_min_level == 2

    with pytest.raises(ConfigError):
        build_config(tmp_path, toc_min_level=3)
