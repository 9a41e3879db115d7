import json

import pytest

from chemprice import main as cli
from chemprice.errors import NotFoundError
from chemprice.schema import PriceLine, PriceLookupResult, VendorResult, VendorStatus


def fake_aggregate(identifier):
    return PriceLookupResult(
        identifier=identifier,
        cid=2244,
        vendors=[
            VendorResult(vendor_name="BLD", status=VendorStatus.SUCCESS,
                         prices=[PriceLine(quantity="5g", price="$10.00")],
                         url="https://www.bldpharm.com/products/50-78-2.html"),
            VendorResult(vendor_name="Accela", status=VendorStatus.NOT_FOUND,
                         message="Company does not offer this product"),
        ],
    )


def test_json_output(monkeypatch, capsys):
    monkeypatch.setattr(cli, "aggregate", fake_aggregate)

    cli.main(["aspirin"])

    body = json.loads(capsys.readouterr().out)
    assert body["cid"] == 2244
    assert body["vendors"][0]["vendorName"] == "BLD"
    assert body["vendors"][1]["status"] == "not_found"


def test_table_output(monkeypatch, capsys):
    monkeypatch.setattr(cli, "aggregate", fake_aggregate)

    cli.main(["aspirin", "--output", "table", "--verbose"])

    out = capsys.readouterr().out
    assert "PubChem CID: 2244" in out
    assert "$10.00" in out
    assert "not_found" in out


def test_lookup_failure_exits_nonzero(monkeypatch, capsys):
    def missing(identifier):
        raise NotFoundError("No compound found for identifier", details=identifier)

    monkeypatch.setattr(cli, "aggregate", missing)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["unobtainium"])

    assert excinfo.value.code == 1
    assert "No compound found" in capsys.readouterr().out
