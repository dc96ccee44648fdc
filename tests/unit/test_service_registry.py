from location_stock.config import constants


def test_service_registry_names() -> None:
    assert constants.SERVICE_NAMES == ["stock_api"]


def test_every_service_has_a_default_port() -> None:
    assert set(constants.DEFAULT_SERVICE_PORTS) == set(constants.SERVICE_NAMES)
