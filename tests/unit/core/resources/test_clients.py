import pytest

from conftest import BASE_URL
from merakidash.core.resources.clients import Clients
from merakidash.domain.exceptions import ValidationError


@pytest.fixture
def clients(engine):
    return Clients(engine)


def test_timespan_over_a_month_rejected_before_engine(clients, mocker):
    execute = mocker.spy(clients._engine, "execute")
    with pytest.raises(ValidationError):
        clients.get_client_info_for_device("Q2XX-AAAA-BBBB", 2_592_001)
    execute.assert_not_called()


def test_non_numeric_timespan_rejected(clients, fake_transport):
    with pytest.raises(ValidationError):
        clients.get_client_info_for_device("Q2XX-AAAA-BBBB", "a week")
    assert fake_transport.calls == 0


def test_client_info_sends_timespan(clients, fake_transport):
    fake_transport.queue_response(200, [{"mac": "00:11:22:33:44:55"}])
    result = clients.get_client_info_for_device("Q2XX-AAAA-BBBB", 2_592_000)
    assert result == [{"mac": "00:11:22:33:44:55"}]
    request = fake_transport.requests[0]
    assert request.url == f"{BASE_URL}/devices/Q2XX-AAAA-BBBB/clients"
    assert request.params == [("timespan", "2592000")]


def test_list_clients_in_network(clients, fake_transport):
    fake_transport.queue_response(200, [])
    clients.list_clients_in_network("N_1", {"perPage": 50, "vlan": 10})
    assert fake_transport.requests[0].params == [("perPage", "50"), ("vlan", "10")]


def test_list_clients_rejects_non_mapping(clients, fake_transport):
    with pytest.raises(ValidationError):
        clients.list_clients_in_network("N_1", "perPage=50")
    assert fake_transport.calls == 0
