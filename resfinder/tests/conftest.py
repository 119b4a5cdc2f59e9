from __future__ import annotations

import json
from pathlib import Path

import pytest


def sample_records() -> list:
    """Four raw records: three complete entries and one nearly empty one."""

    return [
        {
            "identity": {
                "id": "gdc",
                "resource_name": "Genomic Data Commons",
                "short_name": "GDC",
                "ic_code": "NCI",
                "ic_name": "National Cancer Institute",
                "primary_url": "https://portal.gdc.cancer.gov",
                "docs_url": "https://docs.gdc.cancer.gov",
                "api_url": "https://api.gdc.cancer.gov",
            },
            "type_content": {"resource_type": ["Data Repository"], "domains": ["Cancer", "Genomics"]},
            "access_cost": {
                "cost_status": "Free",
                "access_model": "Open access with controlled tier (dbGaP approval)",
                "requires_dua": True,
                "requires_registration": False,
                "data_sensitivity": "Controlled access",
                "has_human_data": True,
            },
            "practical_usage": {
                "compute_location": ["Web portal", "Cloud"],
                "skills_required": ["Python", "R"],
                "typical_use_cases": "Download harmonized tumor sequencing data",
                "integration_parents": ["CRDC"],
            },
            "lifecycle_curation": {"maintaining_ic": ["NCI"], "notes": "", "status": "Active"},
            "tagging": {"keywords": ["TCGA", "sequencing"]},
        },
        {
            "identity": {
                "id": "pubchem",
                "resource_name": "PubChem",
                "ic_code": "NLM",
                "ic_name": "National Library of Medicine",
                "api_url": "https://pubchem.ncbi.nlm.nih.gov/rest/pug",
            },
            "type_content": {"resource_type": ["Database"], "domains": ["Chemistry"]},
            "access_cost": {
                "cost_status": "Free",
                "access_model": "Open access",
                "data_sensitivity": "Public",
            },
            "practical_usage": {"compute_location": ["Web browser"]},
            "tagging": {"keywords": ["compounds"]},
        },
        {
            "identity": {"id": "dbgap", "resource_name": "dbGaP", "ic_code": "NLM"},
            "type_content": {"resource_type": ["Data Repository"], "domains": ["Genomics"]},
            "access_cost": {
                "cost_status": "Free",
                "access_model": "Controlled access; DUA required",
                "requires_dua": True,
                "requires_registration": True,
                "data_sensitivity": "De-identified individual-level data",
                "has_human_data": True,
            },
            "practical_usage": {"compute_location": ["Local download"]},
            "lifecycle_curation": {
                "maintaining_ic": ["NLM", "NHGRI"],
                "notes": "Genotype and phenotype studies",
            },
        },
        {"identity": {"resource_name": "Mystery Tool"}},
    ]


@pytest.fixture
def raw_records() -> list:
    return sample_records()


@pytest.fixture
def catalog_file(tmp_path: Path, raw_records: list) -> Path:
    p = tmp_path / "resources.json"
    p.write_text(json.dumps(raw_records), encoding="utf-8")
    return p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "RESFINDER_CATALOG_PATH",
        "RESFINDER_METRICS_PATH",
        "RESFINDER_SEARCH_ENGINE",
        "RESFINDER_SEARCH_LIMIT",
        "RESFINDER_FIRST_YEAR",
    ):
        monkeypatch.delenv(name, raising=False)
