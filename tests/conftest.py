"""
Test configuration for the portal analytics project.

Ensures the project root is on sys.path so tests can import `portal.*` modules,
and provides a small portfolio shared by the service and route tests.
"""
import os
import sys
from datetime import date


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from portal.schemas.analytics_schema import ClaimRecord, PolicyRecord


@pytest.fixture
def sample_policies():
    return [
        PolicyRecord(
            id="POL-1",
            policy_number="TRF-1",
            policy_type="Trafik",
            premium_amount=12000,
            start_date=date(2024, 1, 1),
            end_date=date(2025, 1, 1),
            plate="34 ABC 123",
            company_name="Anadolu",
            status="active",
        ),
        PolicyRecord(
            id="POL-2",
            policy_number="KSK-1",
            policy_type="Kasko",
            premium_amount=1000,
            start_date=date(2023, 1, 1),
            end_date=date(2024, 1, 1),
            plate="06 XYZ 99",
            company_name="Allianz",
            status="expired",
        ),
        PolicyRecord(
            id="POL-3",
            policy_number="DSK-1",
            policy_type="Dask",
            premium_amount=500,
            start_date=date(2024, 1, 1),
            end_date=date(2025, 1, 1),
            status="active",
        ),
    ]


@pytest.fixture
def sample_claims():
    return [
        ClaimRecord(
            id="CLM-1",
            claim_number="H-1",
            policy_type="Trafik",
            payment_amount=3000,
            claim_date=date(2024, 7, 1),
            plate="34abc123",
            status="closed",
        ),
        ClaimRecord(
            id="CLM-2",
            claim_number="H-2",
            policy_type="Kasko",
            payment_amount=400,
            claim_date=date(2023, 6, 10),
            plate="06 XYZ 99",
            status="open",
        ),
        ClaimRecord(
            id="CLM-3",
            claim_number="H-3",
            policy_type="Trafik",
            payment_amount=250,
            claim_date=date(2024, 5, 20),
            plate="35 KLM 7",
            status="rejected",
        ),
    ]
