"""Tests for the Transfer and Beneficiary models: references, transitions, encryption."""

import re
import uuid
from decimal import Decimal

import pytest
from cryptography.fernet import Fernet

from kundapay.models.beneficiary import Beneficiary, configure_fernet
from kundapay.models.transfer import (
    VALID_TRANSITIONS,
    Transfer,
    TransferStatus,
    _to_base36,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def transfer():
    """Create a minimal Transfer instance."""
    return Transfer(
        user_id=uuid.uuid4(),
        direction="GABON_TO_FRANCE",
        payment_method="AIRTEL_MONEY",
        receiving_method="BANK_TRANSFER",
        amount_sent=Decimal("100000"),
        amount_received=Decimal("144.02"),
        sender_currency="XAF",
        receiver_currency="EUR",
        exchange_rate=Decimal("0.001524"),
        original_fee_percentage=Decimal("0.055"),
        effective_fee_percentage=Decimal("0.055"),
        funds_origin="Savings",
        transfer_reason="Tuition",
    )


# ---------------------------------------------------------------------------
# Creation & Reference
# ---------------------------------------------------------------------------


class TestTransferCreation:
    def test_defaults(self, transfer):
        assert transfer.id is not None
        assert transfer.status == TransferStatus.PENDING
        assert transfer.fees == Decimal("0")
        assert transfer.terms_accepted is False
        assert transfer.validated_at is None
        assert transfer.created_at is not None

    def test_reference_format(self, transfer):
        assert re.match(r"^KP[0-9A-Z]{8,}[0-9A-Z]{4}$", transfer.reference)
        assert len(transfer.reference) <= 20

    def test_reference_uniqueness(self):
        refs = {Transfer.generate_reference() for _ in range(200)}
        assert len(refs) == 200

    def test_base36(self):
        assert _to_base36(0) == "0"
        assert _to_base36(35) == "Z"
        assert _to_base36(36) == "10"

    def test_repr_contains_reference(self, transfer):
        r = repr(transfer)
        assert transfer.reference in r
        assert "pending" in r


# ---------------------------------------------------------------------------
# Status Transitions
# ---------------------------------------------------------------------------


class TestStatusTransitions:

    @pytest.mark.parametrize("target", [
        TransferStatus.COMPLETED, TransferStatus.CANCELLED, TransferStatus.FAILED,
    ])
    def test_pending_can_close(self, transfer, target):
        transfer.transition_to(target)
        assert transfer.status == target
        assert transfer.validated_at is not None

    @pytest.mark.parametrize("closed", [
        TransferStatus.COMPLETED, TransferStatus.CANCELLED, TransferStatus.FAILED,
    ])
    def test_closed_states_are_terminal(self, transfer, closed):
        transfer.transition_to(closed)
        for target in TransferStatus:
            with pytest.raises(ValueError, match="Invalid transition"):
                transfer.transition_to(target)

    def test_pending_to_pending_invalid(self, transfer):
        assert not Transfer.is_valid_transition(TransferStatus.PENDING, TransferStatus.PENDING)

    def test_every_status_in_map(self):
        assert set(VALID_TRANSITIONS) == set(TransferStatus)


# ---------------------------------------------------------------------------
# Beneficiary encryption
# ---------------------------------------------------------------------------


class TestBeneficiary:
    def test_payment_details_encrypted(self, transfer):
        beneficiary = Beneficiary(
            transfer_id=transfer.id, first_name="Jean", last_name="Dupont",
            email="jean@example.fr",
        )
        details = {"bankDetails": {"iban": "FR7630006000011234567890189"}, "phone": None}
        beneficiary.set_payment_details(details)

        assert "FR76" not in beneficiary.payment_details
        assert beneficiary.get_payment_details() == details
        assert beneficiary.full_name == "Jean Dupont"

    def test_unset_details(self):
        beneficiary = Beneficiary(
            transfer_id=uuid.uuid4(), first_name="A", last_name="B", email="a@b.cd",
        )
        assert beneficiary.get_payment_details() == {}

    def test_wrong_key_raises(self):
        beneficiary = Beneficiary(
            transfer_id=uuid.uuid4(), first_name="A", last_name="B", email="a@b.cd",
        )
        beneficiary.set_payment_details({"alipayId": "13800138000"})

        configure_fernet(Fernet.generate_key())
        with pytest.raises(ValueError, match="Failed to decrypt"):
            beneficiary.get_payment_details()
