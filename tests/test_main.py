import pytest

from app import main
from app.config import Settings


def test_run_serves_on_configured_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setattr(main, "get_settings", lambda: Settings(_env_file=None))
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    main.run()

    assert calls == [
        (("app.main:app",), {"host": "0.0.0.0", "port": 9100, "log_config": None})
    ]
