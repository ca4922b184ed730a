"""Tests for configuration resolution."""
from pathlib import Path

import pytest

from stackctl.core.config import (
    StackConfig,
    get_config,
    load_project_variables,
    require,
    set_config,
)
from stackctl.core.errors import PRECONDITION_EXIT_CODE, ConfigurationMissing


class TestDefaults:
    """Built-in defaults apply when nothing is overridden."""

    def test_from_env_without_overrides(self, tmp_path):
        config = StackConfig.from_env(project_dir=tmp_path, environ={})

        assert config.project_dir == tmp_path
        assert config.image == "styled-java-patterns"
        assert config.image_repository == "styled-java-patterns"
        assert config.image_tag == "latest"
        assert config.okteto_image == "okteto/styled-java-patterns"
        assert config.docker_image == "alexanderr/styled-java-patterns"
        assert config.docker_tag is None
        assert config.cluster_name == "backend-java-patterns"
        assert config.cluster_namespace == "webapp"
        assert config.release_name == "release"
        assert config.gh_pages_name == "site"
        assert config.venv_name == "venv"
        assert config.tmp_base == ".tmp"
        assert config.dry_run is False

    def test_dataclass_defaults_match_from_env(self, tmp_path):
        assert StackConfig(project_dir=tmp_path) == StackConfig.from_env(
            project_dir=tmp_path, environ={}
        )


class TestOverrides:
    """Environment and project file overrides."""

    def test_environment_overrides(self, tmp_path):
        config = StackConfig.from_env(
            project_dir=tmp_path,
            environ={"IMAGE_TAG": "dev", "CLUSTER_NAMESPACE": "staging", "DOCKER_TAG": "jdk17"},
        )

        assert config.image_tag == "dev"
        assert config.cluster_namespace == "staging"
        assert config.docker_tag == "jdk17"

    def test_image_drives_derived_names(self, tmp_path):
        config = StackConfig.from_env(project_dir=tmp_path, environ={"IMAGE": "shop"})

        assert config.okteto_image == "okteto/shop"
        assert config.docker_image == "alexanderr/shop"
        # IMAGE_REPOSITORY has its own default
        assert config.image_repository == "styled-java-patterns"

    def test_empty_value_counts_as_unset(self, tmp_path):
        config = StackConfig.from_env(project_dir=tmp_path, environ={"IMAGE_TAG": ""})
        assert config.image_tag == "latest"

    def test_project_dir_from_environment(self, tmp_path):
        config = StackConfig.from_env(environ={"STACKCTL_PROJECT_DIR": str(tmp_path)})
        assert config.project_dir == tmp_path

    def test_dry_run_from_environment(self, tmp_path):
        config = StackConfig.from_env(project_dir=tmp_path, environ={"STACKCTL_DRY_RUN": "1"})
        assert config.dry_run is True

    def test_project_file_overrides_defaults(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text(
            "variables:\n  IMAGE_REPOSITORY: shop\n  CLUSTER_NAME: shop-dev\n"
        )

        config = StackConfig.from_env(project_dir=tmp_path, environ={})

        assert config.image_repository == "shop"
        assert config.cluster_name == "shop-dev"

    def test_environment_beats_project_file(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text("variables:\n  IMAGE_TAG: from-file\n")

        config = StackConfig.from_env(project_dir=tmp_path, environ={"IMAGE_TAG": "from-env"})

        assert config.image_tag == "from-env"

    def test_non_string_file_values_are_stringified(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text("variables:\n  IMAGE_TAG: 2\n")

        config = StackConfig.from_env(project_dir=tmp_path, environ={})

        assert config.image_tag == "2"


class TestProjectFile:
    """Loading stackctl.yml."""

    def test_missing_file(self, tmp_path):
        assert load_project_variables(tmp_path) == {}

    def test_empty_file(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text("")
        assert load_project_variables(tmp_path) == {}

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text("variables: [unclosed\n")

        with pytest.raises(ConfigurationMissing) as exc_info:
            load_project_variables(tmp_path)

        assert "Could not parse" in str(exc_info.value)

    def test_variables_must_be_mapping(self, tmp_path):
        (tmp_path / "stackctl.yml").write_text("variables:\n  - IMAGE\n")

        with pytest.raises(ConfigurationMissing):
            load_project_variables(tmp_path)


class TestRequire:
    """Presence checks for required variables."""

    def test_returns_value(self):
        assert require("IMAGE_TAG", "latest") == "latest"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value_aborts(self, value):
        with pytest.raises(ConfigurationMissing) as exc_info:
            require("DOCKER_TAG", value, hint="Set DOCKER_TAG.")

        assert exc_info.value.name == "DOCKER_TAG"
        assert exc_info.value.exit_code == PRECONDITION_EXIT_CODE
        assert "Required variable DOCKER_TAG is not set. Set DOCKER_TAG." == str(exc_info.value)


class TestGlobalConfig:
    """Global accessor behaviour."""

    def test_set_and_get(self, tmp_path):
        config = StackConfig(project_dir=tmp_path, image_tag="pinned")
        set_config(config)
        assert get_config() is config

    def test_get_creates_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STACKCTL_PROJECT_DIR", str(tmp_path))
        monkeypatch.setenv("IMAGE_TAG", "env-tag")

        config = get_config()

        assert config.project_dir == Path(tmp_path)
        assert config.image_tag == "env-tag"


def test_missing_project_dir_aborts(tmp_path):
    missing = tmp_path / "nope"

    with pytest.raises(ConfigurationMissing) as exc_info:
        StackConfig.from_env(project_dir=missing, environ={})

    assert f"Project directory {missing} does not exist" == str(exc_info.value)
    assert exc_info.value.exit_code == PRECONDITION_EXIT_CODE


def test_project_file_variables_are_kept_for_tools(tmp_path):
    (tmp_path / "stackctl.yml").write_text("variables:\n  NPM: pnpm\n  PYTHON: python3.11\n  IMAGE: ''\n")

    config = StackConfig.from_env(project_dir=tmp_path, environ={})

    assert config.variables == {"NPM": "pnpm", "PYTHON": "python3.11"}
