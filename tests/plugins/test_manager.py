"""Tests for PluginManager."""

from __future__ import annotations

from gigledger.plugins import PluginManager, hookimpl


class _Audit:
    def __init__(self) -> None:
        self.seen: list[int] = []

    @hookimpl
    def post_pay_job(self, job_id: int) -> None:
        self.seen.append(job_id)


class TestPluginManager:
    def test_discover_without_entry_points(self) -> None:
        assert PluginManager().discover() == []

    def test_discover_reports_registered_plugins(self) -> None:
        pm = PluginManager()
        pm.register(_Audit())
        assert pm.discover() == ["_Audit"]

    def test_register_and_call(self) -> None:
        pm = PluginManager()
        audit = _Audit()
        assert pm.register(audit) == "_Audit"

        pm.hook.post_pay_job(
            job_id=3,
            contract_id=1,
            client_id=1,
            contractor_id=2,
            amount="10.00",
            payment_date="2024-01-01T00:00:00+00:00",
        )

        assert audit.seen == [3]

    def test_custom_name_and_unregister(self) -> None:
        pm = PluginManager()
        audit = _Audit()
        pm.register(audit, name="audit")
        assert pm.plugin_names() == ["audit"]

        pm.unregister(audit)
        assert pm.plugin_names() == []
