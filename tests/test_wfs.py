from layermap.wfs import WFSClient


def _client(calls):
    def transport(url, form):
        calls.append((url, form))
        return {"type": "FeatureCollection", "features": []}

    return WFSClient("https://maps.example.org/service", transport, repository="demo", project="city")


def test_get_feature_defaults_and_overrides():
    calls = []
    client = _client(calls)

    result = client.get_feature({"TYPENAME": "roads", "MAXFEATURES": 10})

    assert result["type"] == "FeatureCollection"
    url, form = calls[0]
    assert url == "https://maps.example.org/service"
    assert form == {
        "repository": "demo",
        "project": "city",
        "SERVICE": "WFS",
        "VERSION": "1.0.0",
        "REQUEST": "GetFeature",
        "OUTPUTFORMAT": "GeoJSON",
        "TYPENAME": "roads",
        "MAXFEATURES": "10",
    }


def test_describe_feature_type_and_removed_defaults():
    calls = []
    client = _client(calls)

    client.describe_feature_type({"TYPENAME": "roads", "OUTPUTFORMAT": None})

    _, form = calls[0]
    assert form["REQUEST"] == "DescribeFeatureType"
    assert "OUTPUTFORMAT" not in form
    assert client.describe_feature_type_params()["OUTPUTFORMAT"] == "JSON"
