import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


_WALKRPG_ENV_VARS = (
    "WALKRPG_DATABASE_URL",
    "WALKRPG_DB_AUTO_MIGRATE",
    "WALKRPG_MIN_ENCOUNTER_DISTANCE",
    "WALKRPG_ENCOUNTER_CHANCE_PER_METER",
    "WALKRPG_MIN_TIME_BETWEEN_ENCOUNTERS_MS",
    "WALKRPG_AUTO_FLEE_DISTANCE",
    "WALKRPG_TEMPLATE_SELECTION",
    "WALKRPG_NOTIFY_WEBHOOK_URL",
    "WALKRPG_SEED",
)


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def clean_walkrpg_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _WALKRPG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def block_external_http(monkeypatch: pytest.MonkeyPatch) -> None:
    import httpx

    def _deny_external_http(self, method, url, *args, **kwargs):
        if getattr(self, "_transport", None).__class__.__name__ == "MockTransport":
            return _original_request(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP disabled during tests: {url}")

    _original_request = httpx.Client.request
    monkeypatch.setattr(httpx.Client, "request", _deny_external_http)
