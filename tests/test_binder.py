import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

import pytest

from envbind.core.binder import LoadOptions, load
from envbind.core.descriptors import env_field
from envbind.core.exceptions import (
    BindingTypeError,
    CoercionError,
    ConfigLoadError,
    FallbackFileError,
    FallbackParseError,
    UnsupportedKindError,
    ValidationError,
)
from envbind.core.kinds import (
    BoolKind,
    DurationKind,
    IntKind,
    OptionalKind,
    StringListKind,
    UnsupportedKind,
)
from envbind.core.resolver import ValueSource


@dataclass
class ServerConfig:
    port: int = 0
    host: str = ""
    debug: bool = False


SERVER_FIELDS = [
    env_field("port", "APP_TEST_PORT", IntKind(bits=64), default="8080"),
    env_field("host", "APP_TEST_HOST", required=True),
    env_field("debug", "APP_TEST_DEBUG", BoolKind(), default="false"),
]


@dataclass
class Holder:
    value: object = None

# ============================================================================
# BASIC BINDING
# ============================================================================

def test_load_success(monkeypatch):
    monkeypatch.setenv("APP_TEST_HOST", "localhost")
    monkeypatch.setenv("APP_TEST_PORT", "9090")

    cfg = ServerConfig()
    load(cfg, SERVER_FIELDS)

    assert cfg.port == 9090
    assert cfg.host == "localhost"
    assert cfg.debug is False


def test_load_default_value(monkeypatch):
    monkeypatch.setenv("APP_TEST_HOST", "localhost")

    cfg = ServerConfig()
    load(cfg, SERVER_FIELDS)

    assert cfg.port == 8080


def test_int32_default_scenario():
    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_PORT", IntKind(bits=32), default="8080")])
    assert cfg.value == 8080


def test_required_missing():
    cfg = Holder()

    with pytest.raises(ValidationError) as exc_info:
        load(cfg, [env_field("value", "APP_TEST_REQUIRED_MISSING", required=True)])

    assert exc_info.value.key == "APP_TEST_REQUIRED_MISSING"
    assert exc_info.value.context["reason"] == "missing_required"


def test_required_rejects_explicit_empty(monkeypatch):
    monkeypatch.setenv("APP_TEST_REQUIRED_EMPTY", "")

    with pytest.raises(ValidationError) as exc_info:
        load(Holder(), [env_field("value", "APP_TEST_REQUIRED_EMPTY", required=True)])

    assert exc_info.value.context["reason"] == "empty_required"


def test_required_allows_explicit_empty_when_allow_empty(monkeypatch):
    monkeypatch.setenv("APP_TEST_REQUIRED_ALLOW_EMPTY", "")

    cfg = Holder(value="untouched")
    load(cfg, [env_field("value", "APP_TEST_REQUIRED_ALLOW_EMPTY", required=True, allow_empty=True)])

    assert cfg.value == ""


def test_required_empty_default_is_rejected():
    with pytest.raises(ValidationError):
        load(Holder(), [env_field("value", "APP_TEST_EMPTY_DEFAULT", required=True, default="")])


def test_optional_empty_value_is_bound(monkeypatch):
    monkeypatch.setenv("APP_TEST_OPTIONAL_EMPTY", "")

    cfg = Holder(value="untouched")
    load(cfg, [env_field("value", "APP_TEST_OPTIONAL_EMPTY")])

    assert cfg.value == ""


def test_invalid_int(monkeypatch):
    monkeypatch.setenv("APP_TEST_HOST", "localhost")
    monkeypatch.setenv("APP_TEST_PORT", "notanumber")

    with pytest.raises(CoercionError) as exc_info:
        load(ServerConfig(), SERVER_FIELDS)

    err = exc_info.value
    assert err.key == "APP_TEST_PORT"
    assert err.context["value"] == "notanumber"
    assert err.context["source"] == "environment"
    assert isinstance(err.__cause__, CoercionError)
    assert "APP_TEST_PORT" in str(err)


@pytest.mark.parametrize(
    "kind, raw",
    [
        (IntKind(bits=32), "9" * 5000),
        (DurationKind(), "9" * 5000 + "s"),
    ],
)
def test_very_long_number_is_coercion_error(monkeypatch, kind, raw):
    monkeypatch.setenv("APP_TEST_LONG", raw)
    cfg = Holder(value="untouched")

    with pytest.raises(CoercionError) as exc_info:
        load(cfg, [env_field("value", "APP_TEST_LONG", kind)])

    assert exc_info.value.key == "APP_TEST_LONG"
    assert exc_info.value.context["source"] == "environment"
    assert cfg.value == "untouched"


def test_int64():
    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_TIMEOUT_I64", IntKind(bits=64), default="60")])
    assert cfg.value == 60


def test_duration():
    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_TIMEOUT_DURATION", DurationKind(), default="5s")])
    assert cfg.value == timedelta(seconds=5)


def test_invalid_duration(monkeypatch):
    monkeypatch.setenv("APP_TEST_TIMEOUT_DURATION", "bogus")

    with pytest.raises(CoercionError) as exc_info:
        load(Holder(), [env_field("value", "APP_TEST_TIMEOUT_DURATION", DurationKind())])

    assert exc_info.value.key == "APP_TEST_TIMEOUT_DURATION"


def test_string_list():
    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_HOSTS", StringListKind(), default="a.com,b.com")])
    assert cfg.value == ["a.com", "b.com"]


def test_string_list_trimming(monkeypatch):
    monkeypatch.setenv("APP_TEST_LIST", " one, two , three ")

    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_LIST", StringListKind())])

    assert cfg.value == ["one", "two", "three"]


def test_unset_optional_field_is_untouched():
    @dataclass
    class Cfg:
        port: int = 0

    cfg = Cfg()
    report = load(cfg, [env_field("port", "APP_TEST_OPTIONAL_INT", int)])

    assert cfg.port == 0
    assert report.skipped == ["APP_TEST_OPTIONAL_INT"]


def test_optional_kind_is_set_only_when_resolved(monkeypatch):
    @dataclass
    class Cfg:
        port: Optional[int] = None
        timeout: Optional[timedelta] = None

    monkeypatch.setenv("APP_TEST_PTR_PORT", "8080")
    fields = [
        env_field("port", "APP_TEST_PTR_PORT", OptionalKind(inner=IntKind())),
        env_field("timeout", "APP_TEST_PTR_TIMEOUT", OptionalKind(inner=DurationKind())),
    ]

    cfg = Cfg()
    load(cfg, fields)

    assert cfg.port == 8080
    assert cfg.timeout is None

# ============================================================================
# FALLBACK FILE
# ============================================================================

def test_dotenv_fallback(write_dotenv):
    path = write_dotenv(
        "APP_TEST_DOTENV_KEY=\"secret-key-123\"\nAPP_TEST_DOTENV_NAME='My App'"
    )

    @dataclass
    class Cfg:
        key: str = ""
        name: str = ""

    cfg = Cfg()
    report = load(
        cfg,
        [
            env_field("key", "APP_TEST_DOTENV_KEY", secret=True),
            env_field("name", "APP_TEST_DOTENV_NAME"),
        ],
        LoadOptions(fallback_path=path),
    )

    assert cfg.key == "secret-key-123"
    assert cfg.name == "My App"
    assert report.fallback_path == str(path)
    assert report.source_of("APP_TEST_DOTENV_KEY") is ValueSource.FALLBACK_FILE


def test_env_overrides_dotenv(monkeypatch, write_dotenv):
    path = write_dotenv("APP_TEST_ORDER_KEY=from_file")
    monkeypatch.setenv("APP_TEST_ORDER_KEY", "from_env")

    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_ORDER_KEY")], LoadOptions(fallback_path=str(path)))

    assert cfg.value == "from_env"


def test_explicit_empty_env_overrides_dotenv_and_default(monkeypatch, write_dotenv):
    path = write_dotenv("APP_TEST_EMPTY_OVERRIDES=from_file")
    monkeypatch.setenv("APP_TEST_EMPTY_OVERRIDES", "")

    cfg = Holder()
    load(
        cfg,
        [env_field("value", "APP_TEST_EMPTY_OVERRIDES", default="fallback")],
        LoadOptions(fallback_path=path),
    )

    assert cfg.value == ""


def test_dotenv_does_not_mutate_process_env(write_dotenv):
    path = write_dotenv("APP_TEST_NO_MUTATE=from_file\nAPP_TEST_UNUSED=x")
    before = dict(os.environ)

    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_NO_MUTATE")], LoadOptions(fallback_path=path))

    assert cfg.value == "from_file"
    assert "APP_TEST_NO_MUTATE" not in os.environ
    assert "APP_TEST_UNUSED" not in os.environ
    assert dict(os.environ) == before


def test_empty_fallback_path_means_no_file():
    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_X", default="d")], LoadOptions(fallback_path=""))
    assert cfg.value == "d"


def test_missing_fallback_file(tmp_path):
    cfg = Holder(value="untouched")

    with pytest.raises(FallbackFileError):
        load(
            cfg,
            [env_field("value", "APP_TEST_X", default="d")],
            LoadOptions(fallback_path=tmp_path / "missing.env"),
        )

    assert cfg.value == "untouched"


def test_missing_fallback_file_logged_once(tmp_path, caplog):
    with caplog.at_level(logging.DEBUG, logger="envbind"):
        with pytest.raises(FallbackFileError):
            load(
                Holder(),
                [env_field("value", "APP_TEST_X")],
                LoadOptions(fallback_path=tmp_path / "missing.env"),
            )

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "Configuration load failed" in errors[0].getMessage()


def test_fallback_parse_error_aborts_before_binding(write_dotenv):
    path = write_dotenv("APP_TEST_X=1\n  =broken\n")
    cfg = Holder(value="untouched")

    with pytest.raises(FallbackParseError) as exc_info:
        load(cfg, [env_field("value", "APP_TEST_X", default="d")], LoadOptions(fallback_path=path))

    assert exc_info.value.line_number == 2
    assert cfg.value == "untouched"


def test_discovers_fallback_file(monkeypatch, tmp_path, write_dotenv):
    write_dotenv("APP_TEST_DISCOVERED=yes")
    nested = tmp_path / "service" / "app"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    cfg = Holder()
    report = load(
        cfg,
        [env_field("value", "APP_TEST_DISCOVERED")],
        LoadOptions(discover_fallback=True),
    )

    assert cfg.value == "yes"
    assert Path(report.fallback_path).resolve() == (tmp_path / ".env").resolve()


def test_discovery_uses_configured_filename(monkeypatch, tmp_path, write_dotenv):
    write_dotenv("APP_TEST_DISCOVERED=local", name=".env.local")
    monkeypatch.setenv("ENVBIND_FALLBACK_FILENAME", ".env.local")
    monkeypatch.chdir(tmp_path)

    cfg = Holder()
    load(cfg, [env_field("value", "APP_TEST_DISCOVERED")], LoadOptions(discover_fallback=True))

    assert cfg.value == "local"

# ============================================================================
# TARGET & DESCRIPTOR CHECKS
# ============================================================================

@pytest.mark.parametrize("target", [None, ServerConfig, "text", 42, (1, 2)])
def test_rejects_non_writable_targets(monkeypatch, target):
    monkeypatch.setenv("APP_TEST_HOST", "localhost")

    with pytest.raises(BindingTypeError) as exc_info:
        load(target, SERVER_FIELDS)

    assert isinstance(exc_info.value, TypeError)
    assert exc_info.value.error_code == "TYPE_ERROR"


def test_target_check_runs_before_fallback_file(tmp_path):
    with pytest.raises(BindingTypeError):
        load(None, SERVER_FIELDS, LoadOptions(fallback_path=tmp_path / "missing.env"))


def test_unsupported_kind_detected_before_any_field(monkeypatch):
    monkeypatch.setenv("APP_TEST_FIRST", "1")
    monkeypatch.setenv("APP_TEST_SECOND", "1.5")

    @dataclass
    class Cfg:
        first: int = 0
        second: float = 0.0

    cfg = Cfg()
    with pytest.raises(UnsupportedKindError) as exc_info:
        load(cfg, [
            env_field("first", "APP_TEST_FIRST", int),
            env_field("second", "APP_TEST_SECOND", float),
        ])

    assert exc_info.value.key == "APP_TEST_SECOND"
    assert cfg.first == 0


def test_rejects_non_descriptor_entries():
    with pytest.raises(BindingTypeError):
        load(Holder(), [{"key": "APP_TEST_X"}])


def test_frozen_target_field_write_fails(monkeypatch):
    @dataclass(frozen=True)
    class Frozen:
        value: str = ""

    monkeypatch.setenv("APP_TEST_FROZEN", "x")

    with pytest.raises(BindingTypeError) as exc_info:
        load(Frozen(), [env_field("value", "APP_TEST_FROZEN")])

    assert exc_info.value.key == "APP_TEST_FROZEN"


def test_custom_setter_into_mapping(monkeypatch):
    monkeypatch.setenv("APP_TEST_PORT", "7000")
    target = {}

    load(target, [
        env_field("port", "APP_TEST_PORT", int, setter=lambda t, v: t.__setitem__("port", v)),
    ])

    assert target == {"port": 7000}

# ============================================================================
# FAIL FAST
# ============================================================================

def test_fail_fast_keeps_earlier_fields(monkeypatch):
    @dataclass
    class Cfg:
        first: str = ""
        second: int = 0
        third: str = "untouched"

    monkeypatch.setenv("APP_TEST_FIRST", "bound")
    monkeypatch.setenv("APP_TEST_SECOND", "oops")
    monkeypatch.setenv("APP_TEST_THIRD", "never")

    cfg = Cfg()
    with pytest.raises(CoercionError):
        load(cfg, [
            env_field("first", "APP_TEST_FIRST"),
            env_field("second", "APP_TEST_SECOND", int),
            env_field("third", "APP_TEST_THIRD"),
        ])

    assert cfg.first == "bound"
    assert cfg.second == 0
    assert cfg.third == "untouched"


def test_first_error_wins(monkeypatch):
    monkeypatch.setenv("APP_TEST_BAD_INT", "x")

    with pytest.raises(ValidationError):
        load(Holder(), [
            env_field("value", "APP_TEST_MISSING", required=True),
            env_field("value", "APP_TEST_BAD_INT", int),
        ])


def test_all_errors_share_base_class(monkeypatch):
    monkeypatch.setenv("APP_TEST_BAD_INT", "x")

    with pytest.raises(ConfigLoadError):
        load(Holder(), [env_field("value", "APP_TEST_BAD_INT", int)])

# ============================================================================
# REPORT, SNAPSHOTS, SECRETS
# ============================================================================

def test_report_records_sources(monkeypatch, write_dotenv):
    path = write_dotenv("APP_TEST_FROM_FILE=f")
    monkeypatch.setenv("APP_TEST_FROM_ENV", "e")

    @dataclass
    class Cfg:
        a: str = ""
        b: str = ""
        c: str = ""
        d: str = ""

    report = load(
        Cfg(),
        [
            env_field("a", "APP_TEST_FROM_ENV"),
            env_field("b", "APP_TEST_FROM_FILE"),
            env_field("c", "APP_TEST_FROM_DEFAULT", default="x"),
            env_field("d", "APP_TEST_FROM_NOWHERE"),
        ],
        LoadOptions(fallback_path=path),
    )

    assert [(item.name, item.source) for item in report.bound] == [
        ("a", ValueSource.ENVIRONMENT),
        ("b", ValueSource.FALLBACK_FILE),
        ("c", ValueSource.DEFAULT),
    ]
    assert report.skipped == ["APP_TEST_FROM_NOWHERE"]
    assert report.source_of("APP_TEST_FROM_NOWHERE") is ValueSource.NONE


def test_environ_snapshot_option(monkeypatch):
    monkeypatch.setenv("APP_TEST_HOST", "process")

    cfg = ServerConfig()
    load(cfg, SERVER_FIELDS, LoadOptions(environ={"APP_TEST_HOST": "snapshot", "APP_TEST_DEBUG": "t"}))

    assert cfg.host == "snapshot"
    assert cfg.debug is True


def test_secret_value_masked_in_error(monkeypatch):
    monkeypatch.setenv("APP_TEST_SECRET_PIN", "hunter2")

    with pytest.raises(CoercionError) as exc_info:
        load(Holder(), [env_field("value", "APP_TEST_SECRET_PIN", int, secret=True)])

    assert exc_info.value.context["value"] == "***"
    assert "hunter2" not in str(exc_info.value.to_dict())


def test_unsupported_kind_shorthand_in_load():
    with pytest.raises(UnsupportedKindError):
        load(Holder(), [env_field("value", "APP_TEST_X", UnsupportedKind(annotation="complex"))])


def test_accepts_generator_of_descriptors(monkeypatch):
    monkeypatch.setenv("APP_TEST_HOST", "gen")

    cfg = ServerConfig()
    load(cfg, (d for d in SERVER_FIELDS))

    assert cfg.host == "gen"


def test_string_list_type_hint_is_plain_list():
    @dataclass
    class Cfg:
        hosts: List[str] = field(default_factory=list)

    cfg = Cfg()
    load(cfg, [env_field("hosts", "APP_TEST_HOSTS", list, default="x, y")])

    assert cfg.hosts == ["x", "y"]
