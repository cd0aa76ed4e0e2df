"""
Tests for the eligibility API: CRS compute, draw comparison and helpers.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.scoring.crs_policy import LATEST_EPOCH
from app.utils.crs_requirements import analyze_crs_requirements
from app.utils.education_labels import EDUCATION_LABELS, parse_education
from app.scoring.crs_profile import EducationLevel

API = "/api/v1/eligibility"


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def scenario_profile(**overrides):
    body = {
        "age": 26,
        "education": "three_year",
        "english": {"speak": 9, "listen": 9, "read": 9, "write": 9},
        "work_years_domestic": 3,
        "domestic_education": "three_year_or_more",
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestCompute:
    def test_breakdown(self, client):
        response = client.post(f"{API}/crs/compute", json=scenario_profile())
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 498
        assert data["core"] == {"age": 110, "education": 120, "language": 124, "domestic_work": 64, "subtotal": 418}
        assert data["spouse_factors"]["subtotal"] == 0
        assert data["transferability"]["education_combo"] == 50
        assert data["additional"]["domestic_education_bonus"] == 30
        assert data["with_spouse"] is False
        assert data["policy_epoch"] == LATEST_EPOCH
        assert "Not legal advice" in data["disclaimer"]

    def test_accepts_display_labels_and_loose_choices(self, client):
        body = scenario_profile(
            education="Bachelor's degree OR three or more year program",
            marital_status="Common-Law",
            spouse={
                "accompanying": True,
                "education": "Master's degree, or professional degree",
                "work_years_domestic": 1,
                "english": {"speak": 9, "listen": 9, "read": 9, "write": 9},
            },
        )
        data = client.post(f"{API}/crs/compute", json=body).json()
        assert data["with_spouse"] is True
        assert data["core"]["age"] == 100
        assert data["spouse_factors"] == {"education": 10, "language": 20, "work": 5, "subtotal": 35}

    def test_domestic_spouse_scores_as_single(self, client):
        body = scenario_profile(
            marital_status="married",
            spouse={"accompanying": True, "is_domestic_citizen_or_resident": True, "education": "phd"},
        )
        data = client.post(f"{API}/crs/compute", json=body).json()
        assert data["with_spouse"] is False
        assert data["total"] == 498

    @pytest.mark.parametrize("overrides", [
        {"work_years_domestic": -1},
        {"age": -3},
        {"english": {"speak": 13, "listen": 9, "read": 9, "write": 9}},
        {"education": "kindergarten"},
        {"marital_status": "engaged"},
        {"occupation_category": "astronaut"},
        {"favourite_colour": "red"},
    ])
    def test_rejects_out_of_domain_input(self, client, overrides):
        response = client.post(f"{API}/crs/compute", json=scenario_profile(**overrides))
        assert response.status_code == 422

    def test_requires_core_fields(self, client):
        response = client.post(f"{API}/crs/compute", json={"age": 30})
        assert response.status_code == 422

    def test_explicit_epoch(self, client):
        response = client.post(f"{API}/crs/compute", params={"epoch": LATEST_EPOCH}, json=scenario_profile())
        assert response.status_code == 200

    def test_unknown_epoch(self, client):
        response = client.post(f"{API}/crs/compute", params={"epoch": "1999-01-01"}, json=scenario_profile())
        assert response.status_code == 404


class TestDraws:
    def test_compare(self, client):
        response = client.post(
            f"{API}/draws/compare",
            json=scenario_profile(occupation_category="healthcare"),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["breakdown"]["total"] == 498

        streams = data["streams"]
        assert [s["stream"] for s in streams[:4]] == [
            "General / All Programs",
            "Provincial Nominee Program (PNP)",
            "Canadian Experience Class (CEC)",
            "Healthcare Occupations",
        ]
        by_name = {s["stream"]: s for s in streams}
        assert by_name["Healthcare Occupations"]["qualified"] is True
        assert by_name["Healthcare Occupations"]["category"] == "healthcare"
        assert by_name["General / All Programs"]["qualified"] is False
        assert by_name["STEM Occupations"]["relevant"] is False
        history = by_name["General / All Programs"]["recent_history"]
        assert history[0] == {"score": 529, "date": "2024-04-23", "qualified": False}
        assert len(history) == 5

    def test_history_limit_from_environment(self, client, monkeypatch):
        monkeypatch.setenv("DRAW_HISTORY_LIMIT", "2")
        streams = client.post(f"{API}/draws/compare", json=scenario_profile()).json()["streams"]
        assert all(len(s["recent_history"]) <= 2 for s in streams)

    @pytest.mark.parametrize("raw", ["-1", "all"])
    def test_invalid_history_limit_is_a_server_error(self, client, monkeypatch, raw):
        monkeypatch.setenv("DRAW_HISTORY_LIMIT", raw)
        response = client.post(f"{API}/draws/compare", json=scenario_profile())
        assert response.status_code == 500
        assert "DRAW_HISTORY_LIMIT" in response.json()["detail"]

    def test_list_draws(self, client):
        data = client.get(f"{API}/draws").json()
        assert len(data) == 8
        assert data[0]["stream"] == "General / All Programs"
        assert data[0]["latest_cutoff"] == 529
        assert data[0]["latest_date"] == "2024-04-23"
        assert data[0]["category"] == "general"


class TestPolicyAndOptions:
    def test_policy_status(self, client):
        data = client.get(f"{API}/crs/policy").json()
        assert data["epoch"] == LATEST_EPOCH
        assert len(data["signature"]) == 16
        assert LATEST_EPOCH in data["available_epochs"]
        assert data["rules"]["core_max_single"] == 500

    def test_policy_unknown_epoch(self, client):
        assert client.get(f"{API}/crs/policy", params={"epoch": "nope"}).status_code == 404

    def test_bad_configured_epoch_names_the_epoch(self, client, monkeypatch):
        monkeypatch.setenv("CRS_POLICY_EPOCH", "1999-01-01")
        response = client.get(f"{API}/crs/policy")
        assert response.status_code == 404
        assert response.json()["detail"] == "Unknown CRS policy epoch: 1999-01-01"

    def test_education_levels(self, client):
        data = client.get(f"{API}/education-levels").json()
        assert [o["value"] for o in data] == [level.value for level in EducationLevel]
        assert data[-1]["label"] == "Doctoral level university degree (Ph.D.)"


class TestRequirements:
    def test_empty_profile(self, client):
        data = client.post(f"{API}/crs/requirements", json={}).json()
        assert data["can_calculate"] is False
        assert data["missing_required"] == ["age", "education", "english"]
        assert data["missing_conditional"] == []

    def test_partnered_profile_asks_spouse_questions(self):
        result = analyze_crs_requirements({
            "age": 30,
            "education": "masters",
            "english": {"speak": 8},
            "marital_status": "married",
            "spouse": {},
        })
        assert result["can_calculate"] is True
        assert result["missing_conditional"] == [
            "spouse.is_domestic_citizen_or_resident",
            "spouse.accompanying",
        ]

    @pytest.mark.parametrize("status", ["Common Law", "common-law", "MARRIED"])
    def test_marital_status_read_like_compute(self, client, status):
        compute = client.post(f"{API}/crs/compute", json=scenario_profile(
            marital_status=status,
            spouse={"accompanying": True},
        )).json()
        requirements = client.post(f"{API}/crs/requirements", json={
            "marital_status": status,
            "spouse": {},
        }).json()
        assert compute["with_spouse"] is True
        assert requirements["missing_conditional"] == [
            "spouse.is_domestic_citizen_or_resident",
            "spouse.accompanying",
        ]

    def test_accompanying_spouse_needs_spouse_factors(self):
        result = analyze_crs_requirements({
            "marital_status": "common_law",
            "spouse": {"accompanying": True, "is_domestic_citizen_or_resident": False},
        })
        assert result["missing_conditional"] == [
            "spouse.education",
            "spouse.work_years_domestic",
            "spouse.english",
        ]

    def test_complete_single_profile(self, client):
        body = scenario_profile(
            marital_status="single",
            french={"speak": 0, "listen": 0, "read": 0, "write": 0},
            work_years_foreign=0,
            has_trade_certificate=False,
            has_provincial_nomination=False,
            has_sibling_domestic=False,
            occupation_category="none",
        )
        data = client.post(f"{API}/crs/requirements", json=body).json()
        assert data["can_calculate"] is True
        assert data["is_complete"] is True


class TestEducationLabels:
    @pytest.mark.parametrize("level", list(EducationLevel))
    def test_label_round_trip(self, level):
        assert parse_education(EDUCATION_LABELS[level]) is level
        assert parse_education(level.value) is level

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            parse_education("some college")
