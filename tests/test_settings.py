"""Tests for configuration loading."""

import pytest

from monthly_ledger.config import LedgerSettings, get_settings, validate_all_settings
from monthly_ledger.router import create_app_components


class TestLedgerSettings:
    
    def test_defaults(self, monkeypatch):
        for name in ("LEDGER_BACKEND", "LEDGER_DEFAULT_BUDGET", "LEDGER_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = LedgerSettings()
        assert settings.backend == "google_sheets"
        assert settings.default_budget == 1600
        assert settings.log_level == "INFO"
    
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DEFAULT_BUDGET", "2500")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "debug")
        settings = LedgerSettings()
        assert settings.default_budget == 2500
        assert settings.log_level == "DEBUG"
    
    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("LEDGER_BACKEND", "postgres")
        with pytest.raises(ValueError):
            LedgerSettings()
    
    def test_memory_backend_from_env(self, monkeypatch):
        """Test the factory builds the in-memory store with the configured budget."""
        monkeypatch.setenv("LEDGER_BACKEND", "memory")
        monkeypatch.setenv("LEDGER_DEFAULT_BUDGET", "900")
        get_settings.cache_clear()
        
        router = create_app_components()
        router.handle({"action": "addEntry", "timestamp": "15/03/2026 10:00:00", "eur": "90"})
        stats = router.handle({"action": "getStats", "year": "2026", "month": "3"})
        
        assert stats["budget"] == {"amount": 900, "percent": 90}


class TestValidateAllSettings:
    
    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()
    
    def test_reports_failing_section(self, monkeypatch):
        """Test a section without its required values is reported with the error."""
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        monkeypatch.delenv("LEDGER_BACKEND", raising=False)
        
        results = validate_all_settings()
        
        assert results["google_sheets"] is False
        assert "credentials_path" in results["google_sheets_error"]
        assert results["ledger"] is True
        assert "ledger_error" not in results
    
    def test_sections_checked_independently(self, monkeypatch, tmp_path):
        credentials = tmp_path / "service-account.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-id")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "verbose")
        
        results = validate_all_settings()
        
        assert results["google_sheets"] is True
        assert results["ledger"] is False
        assert "log_level" in results["ledger_error"]
