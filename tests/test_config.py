import pytest

from loquat.adapters.config import (
    AdapterConfig,
    ConfigError,
    ConnectionConfig,
    HeartbeatConfig,
    RetryConfig,
)


def test_adapter_config_creation():
    config = AdapterConfig.new("qq", "qq-001", "ws://localhost:8080")
    assert config.adapter_type == "qq"
    assert config.adapter_id == "qq-001"
    assert config.connection.url == "ws://localhost:8080"
    assert config.enabled is True


def test_adapter_config_builder():
    config = (
        AdapterConfig.new("telegram", "tg-001", "ws://api.telegram.org")
        .with_name("Telegram Adapter")
        .with_enabled(True)
    )
    assert config.name == "Telegram Adapter"
    assert config.enabled is True


def test_builder_leaves_original_untouched():
    original = AdapterConfig.new("qq", "qq-001", "ws://localhost")
    renamed = original.with_name("Renamed")
    assert original.name is None
    assert renamed.name == "Renamed"


def test_heartbeat_config():
    heartbeat = HeartbeatConfig(interval=30, timeout=10, enabled=True)
    config = AdapterConfig.new("qq", "qq-001", "ws://localhost").with_heartbeat(heartbeat)
    assert config.heartbeat is not None
    assert config.heartbeat.interval == 30


def test_retry_config():
    retry = RetryConfig(max_attempts=5, initial_delay=1000, max_delay=60000, backoff_multiplier=2.0)
    config = AdapterConfig.new("wechat", "wx-001", "ws://localhost").with_retry(retry)
    assert config.retry is not None
    assert config.retry.max_attempts == 5


def test_platform_config():
    config = (
        AdapterConfig.new("qq", "qq-001", "ws://localhost")
        .with_platform_config("app_id", "123456")
        .with_platform_config("app_secret", "abcdef")
    )
    assert config.platform["app_id"] == "123456"
    assert config.platform["app_secret"] == "abcdef"


def test_platform_config_replaces_non_object():
    config = AdapterConfig.new("qq", "qq-001", "ws://localhost")
    config.platform = [1, 2]
    updated = config.with_platform_config("k", 1)
    assert updated.platform == {"k": 1}


def test_platform_config_rejects_unserializable():
    config = AdapterConfig.new("qq", "qq-001", "ws://localhost")
    with pytest.raises(ConfigError):
        config.with_platform_config("bad", object())


def test_connection_config_defaults():
    config = AdapterConfig.new("test", "test-001", "ws://localhost")
    assert config.connection.timeout == 30
    assert config.connection.max_reconnect == 5
    assert config.connection.use_tls is False
    assert config.connection.conn_type == "ws"


def test_retry_config_defaults():
    retry = RetryConfig()
    assert retry.max_attempts == 3
    assert retry.initial_delay == 1000
    assert retry.max_delay == 30000
    assert retry.backoff_multiplier == 2.0


def test_default_config():
    config = AdapterConfig.default()
    assert config.adapter_type == "unknown"
    assert config.adapter_id == "default"
    assert config.connection.url == "ws://localhost"


def test_from_dict_applies_defaults():
    config = AdapterConfig.from_dict(
        {
            "adapter_type": "qq",
            "adapter_id": "qq-002",
            "connection": {"conn_type": "ws", "url": "ws://localhost"},
        }
    )
    assert config.enabled is True
    assert config.name is None
    assert config.heartbeat is None
    assert config.connection.timeout == 30
    assert config.connection.max_reconnect == 5
    assert config.platform is None


def test_heartbeat_from_dict_default_enabled():
    heartbeat = HeartbeatConfig.from_dict({"interval": 15})
    assert heartbeat.enabled is True
    assert heartbeat.timeout is None


def test_round_trip():
    config = (
        AdapterConfig.new("qq", "qq-003", "ws://localhost")
        .with_name("QQ")
        .with_heartbeat(HeartbeatConfig(interval=5))
        .with_retry(RetryConfig(max_attempts=7))
        .with_platform_config("app_id", "42")
    )
    assert AdapterConfig.from_dict(config.to_dict()) == config


def test_connection_round_trip():
    conn = ConnectionConfig(conn_type="tcp", url="tcp://h:1", keep_alive=9, params={"a": 1})
    assert ConnectionConfig.from_dict(conn.to_dict()) == conn


def test_missing_connection_raises():
    with pytest.raises(ConfigError):
        AdapterConfig.from_dict({"adapter_type": "qq", "adapter_id": "x"})


def test_missing_url_raises():
    with pytest.raises(ConfigError):
        ConnectionConfig.from_dict({"conn_type": "ws"})


def test_wrong_type_raises():
    with pytest.raises(ConfigError):
        ConnectionConfig.from_dict({"conn_type": "ws", "url": "u", "timeout": "slow"})


def test_non_mapping_raises():
    with pytest.raises(ConfigError):
        RetryConfig.from_dict([1, 2, 3])