"""Tests for the panel orchestrator, configuration and snapshot files."""

import numpy as np
import pytest

from vantwin.config import PanelConfig, load_panel_config, save_panel_config
from vantwin.control import AsyncioScheduler, HeaterStatus, StageDelays, TimedDeviceController
from vantwin.core import PanelTwin, TwinHistory
from vantwin.io import load_config, load_snapshot, save_config, save_snapshot
from vantwin.physics import SurfaceParams, TankConfig


def _config(**overrides) -> PanelConfig:
    values = dict(
        surface=SurfaceParams(disturbance_probability=0.0),
        tank=TankConfig(slosh_amount=0.0),
        frame_dt=0.5,
    )
    values.update(overrides)
    return PanelConfig(**values)


def test_panel_drives_tanks_and_heater() -> None:
    history = TwinHistory()
    panel = PanelTwin(config=_config(), history=history)
    panel.add_tank("fresh", 82.0, width=120, height=200, seed=1)
    panel.add_tank("gray", 34.0)
    assert panel.set_heater_power(True) is True

    result = panel.step()
    assert result.frame == 1
    assert result.time == pytest.approx(0.5)
    assert set(result.heights) == {"fresh"}
    assert result.heights["fresh"].shape == (30,)
    assert result.heater_status is HeaterStatus.STARTING

    result = panel.run(5)
    assert result.time == pytest.approx(3.0)
    assert result.heater_status is HeaterStatus.WARMING_UP
    result = panel.run(10)
    assert result.heater_status is HeaterStatus.RUNNING

    assert len(history) == 16
    assert history.last("heater_status") == "running"
    np.testing.assert_allclose(history.get("fresh_mean_height"), np.full(16, 36.0), atol=1e-9)


def test_panel_input_forwarding() -> None:
    panel = PanelTwin(config=_config())
    panel.add_tank("fresh", 50.0, width=40, height=100)
    assert panel.press("fresh", 20.0) == 5
    panel.set_level("fresh", 10.0)
    assert panel.tank("fresh").level == 10.0
    with pytest.raises(KeyError):
        panel.press("black", 1.0)
    with pytest.raises(ValueError):
        panel.add_tank("fresh", 20.0)
    with pytest.raises(ValueError):
        panel.run(0)


def test_panel_uses_heater_scheduler() -> None:
    heater = TimedDeviceController(delays=StageDelays(starting=1.0, warming_up=1.0, shutting_down=1.0))
    panel = PanelTwin(config=_config(frame_dt=1.0), heater=heater)
    assert panel.scheduler is heater.scheduler
    panel.set_heater_power(True)
    panel.run(2)
    assert panel.heater_state.status is HeaterStatus.RUNNING
    with pytest.raises(ValueError):
        PanelTwin(heater=TimedDeviceController(scheduler=AsyncioScheduler()))


def test_heater_stage_fires_on_exact_frame_at_60_fps() -> None:
    panel = PanelTwin(config=PanelConfig(surface=SurfaceParams(disturbance_probability=0.0)))
    assert panel.dt == pytest.approx(1.0 / 60.0)
    panel.set_heater_power(True)
    result = panel.run(179)
    assert result.heater_status is HeaterStatus.STARTING
    result = panel.step()
    assert result.frame == 180
    assert result.time == pytest.approx(3.0)
    assert result.heater_status is HeaterStatus.WARMING_UP
    result = panel.run(300)
    assert result.frame == 480
    assert result.heater_status is HeaterStatus.RUNNING


def test_heater_stage_frame_when_powered_mid_run() -> None:
    panel = PanelTwin(config=PanelConfig(surface=SurfaceParams(disturbance_probability=0.0)))
    panel.run(7)
    panel.set_heater_power(True)
    assert panel.run(179).heater_status is HeaterStatus.STARTING
    assert panel.frame == 186
    result = panel.step()
    assert result.frame == 187
    assert result.heater_status is HeaterStatus.WARMING_UP


def test_panel_state_dict() -> None:
    panel = PanelTwin(config=_config())
    panel.add_tank("fresh", 50.0, width=40, height=100)
    panel.step()
    state = panel.state_dict()
    assert state["frame"] == 1
    assert state["heater"].status is HeaterStatus.OFF
    assert state["tanks"]["fresh"]["surface"]["frame"] == 1


def test_config_round_trip(tmp_path) -> None:
    config = _config(heater_delays=StageDelays(starting=2.0))
    path = tmp_path / "cfg" / "panel.json"
    save_panel_config(config, path)
    raw = load_config(path)
    assert raw["heater_delays"]["starting"] == 2.0
    loaded = load_panel_config(path)
    assert loaded == config


@pytest.mark.parametrize(
    "data",
    [
        {"colour": "blue"},
        {"surface": {"tension": 0.01, "viscosity": 2}},
        {"surface": {"tension": 1.5}},
        {"heater_delays": {"warming_up": -1}},
        {"frame_dt": 0},
    ],
)
def test_config_rejects_invalid(data) -> None:
    with pytest.raises(ValueError):
        PanelConfig.from_dict(data)


def test_load_config_requires_object(tmp_path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_save_config_converts_numpy_and_enums(tmp_path) -> None:
    path = tmp_path / "values.json"
    save_config({"h": np.array([1.5, 2.0]), "n": np.int64(3), "status": HeaterStatus.RUNNING}, path)
    assert load_config(path) == {"h": [1.5, 2.0], "n": 3, "status": "running"}


def test_snapshot_round_trip(tmp_path) -> None:
    panel = PanelTwin(config=_config())
    tank = panel.add_tank("fresh", 50.0, width=40, height=100)
    tank.press(10.0)
    panel.run(3)
    path = tmp_path / "fresh"
    save_snapshot(tank.state_dict(), path)
    data = load_snapshot(path)
    np.testing.assert_allclose(data["surface.height"], tank.heights())
    assert data["level"] == 50.0
    assert data["slosh.frame"] == 3


def test_history_to_csv(tmp_path) -> None:
    history = TwinHistory(max_length=2)
    history.append(time=0.0, heights=np.array([1.0, 2.0]), heater_status="off")
    history.append(time=0.5, heights=np.array([1.5, 2.5]), heater_status="starting")
    history.append(time=1.0, heights=np.array([2.0, 3.0]), heater_status="starting")
    assert len(history) == 2
    path = tmp_path / "history.csv"
    history.to_csv(path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "time,heights,heater_status"
    assert lines[1] == "0.5,1.5 2.5,starting"
    assert len(lines) == 3
