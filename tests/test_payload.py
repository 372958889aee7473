from qrsolid.payload import WifiNetwork, wifi_uri


def test_open_network():
    assert wifi_uri(WifiNetwork(ssid="Home", security="none", hidden=False)) == "WIFI:S:Home"


def test_secured_hidden_network():
    network = WifiNetwork(ssid="Home", security="WPA", password="secret", hidden=True)
    assert wifi_uri(network) == "WIFI:S:Home;T:WPA;P:secret;H:true"


def test_default_security_is_none():
    assert wifi_uri(WifiNetwork(ssid="Cafe")) == "WIFI:S:Cafe"


def test_empty_security_counts_as_none():
    assert wifi_uri(WifiNetwork(ssid="Cafe", security="", password="ignored")) == "WIFI:S:Cafe"


def test_from_form_defaults_missing_security_to_wpa():
    network = WifiNetwork.from_form({"ssid": "Office", "password": "pw"})
    assert network.security == "WPA"
    assert wifi_uri(network) == "WIFI:S:Office;T:WPA;P:pw"


def test_from_form_keeps_explicit_none():
    network = WifiNetwork.from_form({"ssid": "Office", "security": "none", "password": "pw"})
    assert wifi_uri(network) == "WIFI:S:Office"


def test_from_form_hidden_checkbox():
    assert WifiNetwork.from_form({"ssid": "a", "security": "none", "hidden": "on"}).hidden
    assert not WifiNetwork.from_form({"ssid": "a", "security": "none", "hidden": "false"}).hidden
    assert not WifiNetwork.from_form({"ssid": "a", "security": "none"}).hidden
