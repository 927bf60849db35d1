"""
API tests through the Flask test client.

The app runs with TestingConfig: bundled data/catalog.json, electricity at
0.15 per kWh and a 30% default margin.
"""

import pytest


SCENARIO_JOB = {
    "printerId": "mk4",
    "printTimeHours": 5,
    "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 100}],
    "quantity": 3,
    "packagingCost": 2,
    "additionalCosts": 1,
    "workPackageId": "setup",
    "taxRate": 19,
    "margin": {"kind": "tier", "percent": 40},
}


class TestMain:

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "/api/calculate" in response.get_json()["endpoints"]

    def test_health(self, client):
        data = client.get("/health").get_json()
        assert data["status"] == "ok"
        assert data["catalogLoaded"] is True


class TestCalculate:

    def test_breakdown(self, client):
        response = client.post("/api/calculate", json=SCENARIO_JOB)

        assert response.status_code == 200
        data = response.get_json()
        breakdown = data["breakdown"]
        assert breakdown["totalLaborCost"] == 13
        assert breakdown["subtotalCost"] == pytest.approx(28.45)
        assert breakdown["totalCost"] == pytest.approx(33.8555)
        assert breakdown["finalValue"] == pytest.approx(33.8555 * 1.4)
        assert data["pricePerUnit"] == pytest.approx(33.8555 * 1.4 / 3)
        assert data["margin"] == {"kind": "tier", "percent": 40.0}
        assert data["currency"] == "COP"
        assert [t["percent"] for t in data["tiers"]] == [25.0, 40.0, 60.0, 80.0]

    def test_half_filled_form(self, client):
        response = client.post("/api/calculate", json={
            "filamentConsumptions": [{"filamentId": "", "gramsUsed": ""}],
            "printTimeHours": "",
            "quantity": "",
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["breakdown"]["finalValue"] == 0
        assert data["pricePerUnit"] == 0
        assert data["margin"]["kind"] == "default"

    def test_default_electricity_from_config(self, client):
        data = client.post("/api/calculate", json={
            "printerId": "mk4", "printTimeHours": 5,
        }).get_json()
        assert data["breakdown"]["totalEnergyCost"] == pytest.approx(0.2 * 0.15 * 5)

    def test_invalid_tier(self, client):
        response = client.post("/api/calculate", json={"margin": {"kind": "tier", "percent": 45}})

        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "margin"

    @pytest.mark.parametrize("quantity", [1e308, 10001])
    def test_oversized_quantity_is_rejected(self, client, quantity):
        response = client.post("/api/calculate", json={
            "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 100}],
            "quantity": quantity,
        })

        assert response.status_code == 400
        assert b"NaN" not in response.data
        assert response.get_json()["details"]["field"] == "quantity"

    def test_huge_inputs_never_produce_nan(self, client):
        response = client.post("/api/calculate", json={
            "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 1e308}],
            "printerId": "mk4",
            "printTimeHours": 1e308,
            "quantity": 10000,
        })

        assert response.status_code == 200
        assert b"NaN" not in response.data
        assert b"Infinity" not in response.data

    def test_body_must_be_object(self, client):
        response = client.post("/api/calculate", json=[1, 2])
        assert response.status_code == 400

    def test_margin_tiers(self, client):
        data = client.get("/api/margin-tiers").get_json()
        assert data["defaultMargin"] == 30.0
        assert data["tiers"][0] == {"label": "competitive", "percent": 25.0}


class TestQuotations:

    def test_create_and_fetch(self, client):
        response = client.post("/api/quotations", json=dict(
            SCENARIO_JOB, title="  <b>Drone arm</b> ", clientId="c-1",
            finalValue=1,  # client totals are ignored
        ))

        assert response.status_code == 201
        quotation = response.get_json()
        assert quotation["title"] == "Drone arm"
        assert quotation["clientId"] == "c-1"
        assert quotation["breakdown"]["totalCost"] == pytest.approx(33.8555)
        assert quotation["printingHistoryId"] is None

        fetched = client.get(f"/api/quotations/{quotation['id']}").get_json()
        assert fetched == quotation

        listed = client.get("/api/quotations").get_json()["quotations"]
        assert [q["id"] for q in listed] == [quotation["id"]]

    def test_title_is_required(self, client):
        response = client.post("/api/quotations", json=dict(SCENARIO_JOB, title="<i></i>"))
        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "title"

    def test_with_printing_history(self, client):
        quotation = client.post("/api/quotations", json=dict(
            SCENARIO_JOB, title="Batch", createPrintingHistory=True, printingType="production",
        )).get_json()

        history_id = quotation["printingHistoryId"]
        assert history_id

        record = client.get(f"/api/printing-history/{history_id}").get_json()
        assert record["type"] == "production"
        assert record["quotationId"] == quotation["id"]
        assert record["totalCost"] == pytest.approx(5.15)
        assert record["totalCost"] == quotation["breakdown"]["costPerUnit"]

    def test_delete(self, client):
        quotation = client.post("/api/quotations", json=dict(SCENARIO_JOB, title="Temp")).get_json()

        assert client.delete(f"/api/quotations/{quotation['id']}").status_code == 204
        assert client.get(f"/api/quotations/{quotation['id']}").status_code == 404
        assert client.delete(f"/api/quotations/{quotation['id']}").status_code == 404


class TestPrintingHistory:

    PRINT = {
        "printerId": "x1c",
        "printTimeHours": 1,
        "printTimeMinutes": 30,
        "filamentConsumptions": [
            {"filamentId": "petg-clear", "gramsUsed": 50},
            {"filamentId": "ghost", "gramsUsed": 999},
        ],
    }

    def test_preview(self, client):
        data = client.post("/api/printing-history/calculate", json=self.PRINT).get_json()

        assert data["totalGramsUsed"] == 50
        assert data["totalFilamentCost"] == pytest.approx(4.0)
        assert data["totalEnergyCost"] == pytest.approx(0.35 * 0.15 * 1.5)
        assert data["totalCost"] == pytest.approx(4.0 + 0.35 * 0.15 * 1.5)
        assert client.get("/api/printing-history").get_json()["printingHistory"] == []

    def test_create_and_list(self, client):
        response = client.post("/api/printing-history", json=dict(self.PRINT, type="calibration"))

        assert response.status_code == 201
        record = response.get_json()
        assert record["type"] == "calibration"
        assert record["printTimeHours"] == 1.5

        listed = client.get("/api/printing-history").get_json()["printingHistory"]
        assert [r["id"] for r in listed] == [record["id"]]

    def test_unknown_record(self, client):
        response = client.get("/api/printing-history/nope")
        assert response.status_code == 404
        assert "not found" in response.get_json()["error"]


class TestSaleDetailPrice:

    def test_from_printing_history(self, client):
        record = client.post("/api/printing-history", json={
            "printerId": "mk4",
            "printTimeHours": 5,
            "filamentConsumptions": [{"filamentId": "pla-black", "gramsUsed": 100}],
        }).get_json()

        data = client.post("/api/sales/detail-price", json={
            "printingHistoryId": record["id"],
            "quantity": 2,
            "workPackageId": "post-processing",
            "workPackageHours": 1,
        }).get_json()

        breakdown = data["breakdown"]
        assert breakdown["workPackageCost"] == 8
        assert breakdown["subtotalCost"] == pytest.approx(5.15 * 2 + 8)
        assert breakdown["taxAmount"] == 0
        assert breakdown["marginPercent"] == 30.0
        assert breakdown["finalValue"] == pytest.approx((5.15 * 2 + 8) * 1.3)

    def test_from_unit_cost_with_custom_margin(self, client):
        data = client.post("/api/sales/detail-price", json={
            "unitCost": {"totalFilamentCost": 3, "totalEnergyCost": 1},
            "quantity": 5,
            "margin": {"kind": "custom", "percent": 50},
        }).get_json()

        assert data["breakdown"]["totalCost"] == 20
        assert data["breakdown"]["finalValue"] == 30
        assert data["pricePerUnit"] == 6

    def test_oversized_quantity_is_rejected(self, client):
        response = client.post("/api/sales/detail-price", json={
            "unitCost": {"totalFilamentCost": 3, "totalEnergyCost": 1},
            "quantity": 1e308,
        })

        assert response.status_code == 400
        assert b"NaN" not in response.data

    def test_unknown_history(self, client):
        response = client.post("/api/sales/detail-price", json={"printingHistoryId": "missing"})
        assert response.status_code == 404


class TestCatalog:

    def test_get(self, client):
        data = client.get("/api/catalog").get_json()

        assert {f["id"] for f in data["filaments"]} == {"pla-black", "petg-clear", "tpu-red"}
        assert data["ageSeconds"] >= 0

    def test_reload(self, client):
        response = client.post("/api/catalog/reload")
        assert response.status_code == 200
        assert len(response.get_json()["printers"]) == 2

    def test_not_ready(self, app, client):
        service = app.config["CATALOG_SERVICE"]
        service._current_snapshot = service._current_snapshot.create_empty()

        response = client.post("/api/calculate", json={})
        assert response.status_code == 503


def test_unknown_route_is_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"
