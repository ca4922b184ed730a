"""Shared test fixtures for stackctl tests."""
import subprocess

import pytest

from stackctl.core.config import set_config

REAL_RUN = subprocess.run

# Every tool override pointed at its plain executable name
TOOL_ENV = {
    "DOCKER_CMD": "docker",
    "DOCKER_COMPOSE_CMD": "docker-compose",
    "TILT_CMD": "tilt",
    "HELM_CMD": "helm",
    "OKTETO_CMD": "okteto",
    "PYTHON": "python3",
    "NPM": "npm",
    "GIT_CMD": "git",
    "VIRTUALENV_CMD": "virtualenv",
}

CONFIG_ENV = [
    "IMAGE", "IMAGE_REPOSITORY", "IMAGE_TAG", "OKTETO_IMAGE", "DOCKER_IMAGE",
    "DOCKER_TAG", "CLUSTER_NAME", "CLUSTER_NAMESPACE", "RELEASE_NAME",
    "GH_PAGES_NAME", "VENV_NAME", "TMP_BASE",
    "STACKCTL_DRY_RUN", "STACKCTL_PROJECT_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test from built-in defaults."""
    for name in CONFIG_ENV + list(TOOL_ENV):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


def _git(repo, *args):
    REAL_RUN(['git', *args], cwd=repo, check=True, capture_output=True)


@pytest.fixture
def git_repo(tmp_path):
    """Git repository with one committed file."""
    _git(tmp_path, 'init')
    _git(tmp_path, 'config', 'user.email', 'test@example.com')
    _git(tmp_path, 'config', 'user.name', 'Test User')
    _git(tmp_path, 'config', 'commit.gpgsign', 'false')

    (tmp_path / 'README.md').write_text('# project\n')
    (tmp_path / 'CHANGELOG.md').write_text('# changes\n')
    _git(tmp_path, 'add', 'README.md', 'CHANGELOG.md')
    _git(tmp_path, 'commit', '-m', 'Initial commit')
    return tmp_path


@pytest.fixture
def fake_tools(monkeypatch):
    """Resolve every tool by name and record external commands instead of running them.

    git still runs for real so workspace checks see the actual repository.
    Set ``fake_tools.returncodes[tool] = n`` to make a tool fail.
    """
    class Recorder(list):
        pass

    calls = Recorder()
    calls.returncodes = {}

    def fake_run(argv, *args, **kwargs):
        if argv[0] == 'git':
            return REAL_RUN(argv, *args, **kwargs)
        calls.append(list(argv))
        returncode = calls.returncodes.get(argv[0], 0)
        return subprocess.CompletedProcess(argv, returncode, stdout='', stderr='')

    for name, value in TOOL_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setattr('stackctl.core.runner.subprocess.run', fake_run)
    return calls
