import pytest

from conftest import BASE_URL
from merakidash.core.resources.switch_ports import SwitchPorts
from merakidash.domain.exceptions import ValidationError
from merakidash.domain.models.http import HttpMethod


@pytest.fixture
def switch_ports(engine):
    return SwitchPorts(engine)


def test_get_switch_ports(switch_ports, fake_transport):
    fake_transport.queue_response(200, [{"portId": "1"}, {"portId": "2"}])
    assert len(switch_ports.get_switch_ports("Q2SW")) == 2
    assert fake_transport.requests[0].url == f"{BASE_URL}/devices/Q2SW/switch/ports"


def test_get_switch_ports_by_switch_passes_options(switch_ports, fake_transport):
    fake_transport.queue_response(200, [])
    switch_ports.get_switch_ports_by_switch("1", {"serial": "Q2SW"})
    request = fake_transport.requests[0]
    assert request.url == f"{BASE_URL}/organizations/1/switch/ports/bySwitch"
    assert request.params == [("serial", "Q2SW")]


@pytest.mark.parametrize("port", ["1", 1.0, True, None])
def test_port_must_be_int(switch_ports, fake_transport, port):
    with pytest.raises(ValidationError, match="Invalid switchport"):
        switch_ports.get_single_switch_port("Q2SW", port)
    assert fake_transport.calls == 0


def test_update_switchport(switch_ports, fake_transport):
    fake_transport.queue_response(200, {"portId": "5", "vlan": 20})
    result = switch_ports.update_switchport("Q2SW", 5, {"vlan": 20})
    assert result["vlan"] == 20
    request = fake_transport.requests[0]
    assert request.method is HttpMethod.PUT
    assert request.url == f"{BASE_URL}/devices/Q2SW/switch/ports/5"
    assert request.json_body == {"vlan": 20}


def test_update_switchport_rejects_string_port(switch_ports, fake_transport):
    with pytest.raises(ValidationError):
        switch_ports.update_switchport("Q2SW", "5", {"vlan": 20})
    assert fake_transport.calls == 0
