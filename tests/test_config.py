import pytest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from buddhabrot.config import (
    DEFAULT_CHANNELS, Channel, RenderConfig, config_from_dict, default_viewport, load_config,
)


def test_defaults_follow_classic_render():
    cfg = RenderConfig()
    assert [ch.max_iter for ch in cfg.channels] == [200, 100, 50]
    assert cfg.max_iter == 200
    assert cfg.viewport.shape == (1440, 2560)
    assert cfg.viewport.width == pytest.approx(4.3)
    assert cfg.worker_count >= 1
    assert cfg.total_samples == cfg.worker_count * cfg.samples_per_worker


def test_load_yaml(tmp_path):
    path = tmp_path / "render.yaml"
    path.write_text(
        "viewport:\n"
        "  center: '-0.5+0.25j'\n"
        "  width: 3.0\n"
        "  grid_width: 300\n"
        "  grid_height: 200\n"
        "channels:\n"
        "  - {name: deep, max_iter: 1000}\n"
        "  - {name: shallow, max_iter: 20}\n"
        "workers: 3\n"
        "samples_per_worker: 5000\n"
        "exponent: 2.5\n"
    )
    cfg = load_config(path)
    assert cfg.viewport.grid_width == 300
    assert cfg.viewport.height == pytest.approx(2.0)
    assert cfg.viewport.left == pytest.approx(-2.0)
    assert cfg.viewport.top == pytest.approx(1.25)
    assert cfg.channels == (Channel("deep", 1000), Channel("shallow", 20))
    assert cfg.total_samples == 15000
    assert cfg.exponent == 2.5
    assert cfg.batch_size == 4096


def test_load_yaml_top_left(tmp_path):
    path = tmp_path / "tl.yaml"
    path.write_text("viewport: {top_left: '-2+2j', width: 4.0, height: 4.0, grid_width: 10, grid_height: 10}\n")
    cfg = load_config(path)
    assert cfg.viewport.map_to_pixel(-2 + 2j) == (0, 0)
    assert cfg.channels == DEFAULT_CHANNELS


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    cfg = load_config(path)
    assert cfg.viewport == default_viewport()
    assert cfg.workers is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize("bad", [
    {"channels": []},
    {"channels": "red"},
    {"channels": [{"name": "r"}]},
    {"channels": [{"name": "r", "max_iter": 0}]},
    {"channels": [{"name": "r", "max_iter": 10}, {"name": "r", "max_iter": 5}]},
    {"workers": 0},
    {"exponent": 0.0},
    {"batch_size": 0},
    {"viewport": {"width": "wide"}},
    {"viewport": {"center": "not-a-number"}},
    {"viewport": "wide"},
    {"viewport": [4.0, 100, 100]},
    {"viewport": {"grid_width": float("inf")}},
    {"workers": [4]},
    {"samples_per_worker": {"n": 10}},
    {"exponent": "steep"},
    {"batch_size": float("inf")},
    {"channels": [{"name": "r", "max_iter": float("inf")}]},
    {"channels": [{"name": "r", "max_iter": float("nan")}]},
    {"channels": [{"name": "r", "max_iter": "200"}]},
])
def test_invalid_settings_raise(bad):
    with pytest.raises(ValueError):
        config_from_dict(bad)


def test_with_exponent_is_a_copy():
    cfg = RenderConfig(samples_per_worker=10)
    other = cfg.with_exponent(3.0)
    assert other.exponent == 3.0
    assert cfg.exponent == 2.0
    assert other.viewport == cfg.viewport


def test_yaml_infinite_cap_is_rejected(tmp_path):
    path = tmp_path / "inf.yaml"
    path.write_text("channels:\n  - {name: red, max_iter: .inf}\n")
    with pytest.raises(ValueError):
        load_config(path)
