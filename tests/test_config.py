import pytest

from linkhop.config import DEFAULT_CAPS, CrawlConfig, format_caps, parse_caps


def test_parse_caps_zero_means_uncapped():
    assert parse_caps("50,10,0") == (50, 10, None)
    assert parse_caps(" 5 , 0 ,7") == (5, None, 7)


@pytest.mark.parametrize("bad", ["50,10", "50,10,0,1", "a,1,2", "-1,2,3", "1,,2"])
def test_parse_caps_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_caps(bad)


def test_format_caps_round_trips_default():
    assert format_caps(DEFAULT_CAPS) == "50,10,0"
    assert parse_caps(format_caps(DEFAULT_CAPS)) == DEFAULT_CAPS


def test_defaults_match_baseline():
    config = CrawlConfig()
    assert config.seed_url == "https://pl.wikipedia.org/wiki/Java"
    assert config.origin_prefix == "https://pl.wikipedia.org"
    assert config.selector == "div.mw-body-content a[href]"
    assert config.keep_substring == "wiki"
    assert config.image_extensions == {"jpg", "png", "svg", "jpeg", "webp"}
    assert (config.cap(1), config.cap(2), config.cap(3)) == (50, 10, None)
    assert config.workers == 50
    assert config.drain_timeout == 60.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"workers": 0},
        {"caps": (50, 10)},
        {"caps": (50, -1, None)},
        {"seed_url": ""},
        {"origin_prefix": ""},
        {"selector": ""},
        {"user_agent": ""},
        {"drain_timeout": 0},
        {"timeout": -1},
    ],
)
def test_invalid_config_rejected(overrides):
    with pytest.raises(ValueError):
        CrawlConfig(**overrides)
