"""Тесты настроек по умолчанию и вспомогательного логгера."""

import json
import logging

import pytest

import ringkit
from ringkit import (
    DEFAULT_CONFIG,
    ZZ,
    configure,
    get_option,
    load_config,
    make_power_series_ring,
    make_residue_ring,
    reset_config,
    setup_basic_logger,
)


@pytest.fixture(autouse=True)
def _restore_config():
    yield
    reset_config()


def test_defaults():
    assert get_option("cache_parents") is True
    assert get_option("series_model") == "capped_absolute"
    assert get_option("check_exact") is True
    assert get_option("check_sqrt") is True
    assert set(DEFAULT_CONFIG) == {"cache_parents", "series_model", "check_exact", "check_sqrt"}


def test_unknown_option():
    with pytest.raises(KeyError):
        get_option("bogus")
    with pytest.raises(KeyError):
        configure(bogus=1)


def test_configure_returns_previous():
    prev = configure(check_exact=False)
    assert prev == {"check_exact": True}
    assert get_option("check_exact") is False
    reset_config()
    assert get_option("check_exact") is True


def test_cache_parents_option():
    configure(cache_parents=False)
    assert make_residue_ring(ZZ, 17) is not make_residue_ring(ZZ, 17)
    # явный аргумент важнее настройки
    assert make_residue_ring(ZZ, 17, cached=True) is make_residue_ring(ZZ, 17, cached=True)


def test_series_model_option():
    configure(series_model="capped_relative")
    with pytest.raises(NotImplementedError):
        make_power_series_ring(ZZ, 5, "x")
    S, x = make_power_series_ring(ZZ, 5, "x", model="capped_absolute")
    assert x.prec == 5


def test_check_exact_option():
    S, x = make_power_series_ring(ZZ, 5, "x")
    configure(check_exact=False)
    with pytest.warns(RuntimeWarning):
        1 / (2 + x)


def test_check_sqrt_option():
    S, x = make_power_series_ring(ZZ, 5, "x")
    configure(check_sqrt=False)
    with pytest.warns(RuntimeWarning):
        (1 + x).sqrt()


def test_load_config_merges(tmp_path):
    path = tmp_path / "ringkit.json"
    path.write_text(json.dumps({"check_exact": False, "series_model": "capped_relative"}), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["check_exact"] is False
    assert cfg["series_model"] == "capped_relative"
    assert cfg["cache_parents"] is True
    # текущие настройки не меняются
    assert get_option("check_exact") is True
    configure(**cfg)
    assert get_option("series_model") == "capped_relative"


def test_load_config_with_base(tmp_path):
    path = tmp_path / "ringkit.json"
    path.write_text(json.dumps({"check_sqrt": False}), encoding="utf-8")
    cfg = load_config(str(path), base={"cache_parents": False})
    assert cfg == {"cache_parents": False, "check_sqrt": False}


def test_load_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


# --- Логирование ---

def test_package_logger_has_null_handler():
    logger = logging.getLogger("ringkit")
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_setup_basic_logger_is_idempotent():
    name = "ringkit.tests.basic"
    logger = setup_basic_logger(name, level=logging.DEBUG)
    try:
        again = setup_basic_logger(name)
        assert again is logger
        stream = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream) == 1
        assert logger.level == logging.DEBUG
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)


def test_public_exports():
    for name in ringkit.__all__:
        assert hasattr(ringkit, name)
