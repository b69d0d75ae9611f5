"""Testes dos registros normalizados e resultados do núcleo."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.domain.events import CloseReason, CredentialsRotated, InboundMessage
from app.domain.records import ContactRecord, GroupRecord
from app.domain.results import BulkItemResult, BulkReport, ConnectionStatus, LogoutAck
from fsm import ConnectionState


class TestContactRecord:
    @pytest.mark.parametrize(
        ("raw", "name"),
        [
            ({"id": "1@s.whatsapp.net", "name": "Ana", "notify": "A"}, "Ana"),
            ({"id": "1@s.whatsapp.net", "notify": "Bia"}, "Bia"),
            ({"id": "1@s.whatsapp.net", "verified_name": "Loja"}, "Loja"),
            ({"id": "1@s.whatsapp.net"}, "Unknown"),
        ],
    )
    def test_name_fallback_chain(self, raw: dict, name: str) -> None:
        contact = ContactRecord.from_transport(raw)
        assert contact.name == name
        assert contact.number == "1"

    def test_missing_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ContactRecord.from_transport({"name": "x"})


class TestGroupRecord:
    def test_participants_counted_and_subject_mapped(self) -> None:
        group = GroupRecord.from_transport(
            {"id": "9@g.us", "subject": "Time", "participants": [{}, {}, {}], "owner": "1@s"}
        )
        assert group.model_dump() == {
            "id": "9@g.us",
            "name": "Time",
            "participants": 3,
            "owner": "1@s",
        }

    def test_missing_participants_defaults_to_zero(self) -> None:
        assert GroupRecord.from_transport({"id": "9@g.us"}).participants == 0


class TestEvents:
    def test_only_logged_out_skips_reconnect(self) -> None:
        assert CloseReason.LOGGED_OUT.should_reconnect is False
        assert all(
            reason.should_reconnect for reason in CloseReason if reason != CloseReason.LOGGED_OUT
        )

    def test_credentials_repr_hides_secret(self) -> None:
        assert "segredo" not in repr(CredentialsRotated(b"segredo"))

    def test_inbound_message_classification(self) -> None:
        assert InboundMessage(sender="x").is_new_incoming is True
        assert InboundMessage(sender="x", from_me=True).is_new_incoming is False
        assert InboundMessage(sender="x", kind="append").is_new_incoming is False


class TestResults:
    def test_connection_status_dict(self) -> None:
        status = ConnectionStatus(ConnectionState.ERROR, last_error="falhou")
        assert status.to_dict() == {
            "connected": False,
            "state": "error",
            "hasQR": False,
            "lastError": "falhou",
        }

    def test_bulk_report_counts(self) -> None:
        report = BulkReport(
            (BulkItemResult("1", True), BulkItemResult("2", False, "erro"))
        )
        assert report.to_dict() == {
            "total": 2,
            "succeeded": 1,
            "failed": 1,
            "results": [
                {"number": "1", "success": True},
                {"number": "2", "success": False, "error": "erro"},
            ],
        }

    def test_logout_ack(self) -> None:
        assert LogoutAck().to_dict() == {
            "success": True,
            "message": "Logout realizado com sucesso",
        }
