import pytest

from slackmoji.config import Config
from slackmoji.core.errors import ConfigurationFatal


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in (Config.ENV_TOKEN, Config.ENV_WORKSPACE, Config.ENV_COOKIE, Config.ENV_PAGE_SIZE):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


def test_load_from_env_file(tmp_path):
    env_file = tmp_path / 'slack.env'
    env_file.write_text('SLACK_USER_TOKEN=xoxc-123\nSLACK_WORKSPACE=myteam\nSLACK_COOKIE=d=abc\n')

    config = Config.load(str(env_file))

    assert config.token == 'xoxc-123'
    assert config.workspace == 'myteam'
    assert config.cookie == 'd=abc'
    assert config.page_size == 100


def test_default_env_file_in_cwd(tmp_path):
    (tmp_path / '.env').write_text('SLACK_USER_TOKEN=xoxp-1\nSLACKMOJI_PAGE_SIZE=25\n')

    config = Config.load(workspace='other')

    assert config.workspace == 'other'
    assert config.page_size == 25


def test_arguments_override_env(monkeypatch):
    monkeypatch.setenv(Config.ENV_TOKEN, 't')
    monkeypatch.setenv(Config.ENV_WORKSPACE, 'from_env')

    config = Config.load(workspace='from_args', page_size=10)

    assert config.workspace == 'from_args'
    assert config.page_size == 10
    assert config.cookie is None


@pytest.mark.parametrize('env, kwargs, message', [
    ({}, {'workspace': 'w'}, 'SLACK_USER_TOKEN'),
    ({Config.ENV_TOKEN: 't'}, {}, 'Workspace is not set'),
    ({Config.ENV_TOKEN: 't', Config.ENV_PAGE_SIZE: 'many'}, {'workspace': 'w'}, 'Invalid'),
    ({Config.ENV_TOKEN: 't'}, {'workspace': 'w', 'page_size': 0}, 'positive'),
    ({Config.ENV_TOKEN: 't'}, {'env_file': 'missing.env', 'workspace': 'w'}, 'not found'),
])
def test_invalid_configuration(monkeypatch, env, kwargs, message):
    for var, value in env.items():
        monkeypatch.setenv(var, value)

    with pytest.raises(ConfigurationFatal, match=message):
        Config.load(**kwargs)
