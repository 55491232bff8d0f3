import pytest

from physiopro.core import config


def test_get_bool_reads_common_truthy_values() -> None:
    assert config._get_bool(' Yes ')
    assert not config._get_bool('off', default=True)
    assert config._get_bool(None, default=True)


def test_validate_runtime_config_accepts_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APPOINTMENT_STORE', 'sql')
    monkeypatch.setattr(config, 'OVERLAP_POLICY', 'allow')

    config.validate_runtime_config()


@pytest.mark.parametrize(
    ('app_env', 'store', 'policy'),
    [
        ('development', 'disk', 'allow'),
        ('development', 'sql', 'first-come'),
        ('production', 'memory', 'allow'),
    ],
)
def test_validate_runtime_config_rejects_bad_settings(
    monkeypatch: pytest.MonkeyPatch,
    app_env: str,
    store: str,
    policy: str,
) -> None:
    monkeypatch.setattr(config, 'APP_ENV', app_env)
    monkeypatch.setattr(config, 'APPOINTMENT_STORE', store)
    monkeypatch.setattr(config, 'OVERLAP_POLICY', policy)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()
