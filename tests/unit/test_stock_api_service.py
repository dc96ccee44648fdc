from location_stock.services import stock_api


def test_main_runs_uvicorn_on_configured_port(monkeypatch) -> None:
    calls = {}

    def fake_run(app, host, port, log_level):
        calls.update(app=app, host=host, port=port, log_level=log_level)

    monkeypatch.setenv("LOCATION_STOCK_SERVICE_PORTS", "stock_api=9123")
    monkeypatch.setattr(stock_api.config_settings, "_settings", None)
    monkeypatch.setattr(stock_api.uvicorn, "run", fake_run)

    stock_api.main([])

    assert calls["port"] == 9123
    assert calls["host"] == "0.0.0.0"
    assert calls["app"] is stock_api.get_app()
