from odds_aggregator.config.settings import AppSettings
from odds_aggregator.logging.setup import make_sensitive_data_filter


def test_api_key_is_masked_in_messages_and_extra():
    log_filter = make_sensitive_data_filter(AppSettings(odds_api_key="abcd1234efgh5678"))
    record = {
        "message": "GET https://odds.test/v4/sports?apiKey=abcd1234efgh5678",
        "extra": {"params": {"apiKey": "abcd1234efgh5678", "regions": "us"}},
    }

    assert log_filter(record) is True
    assert "abcd1234efgh5678" not in record["message"]
    assert record["extra"]["params"]["apiKey"] == "abcd****5678"
    assert record["extra"]["params"]["regions"] == "us"


def test_filter_passes_records_through_without_a_key():
    log_filter = make_sensitive_data_filter(AppSettings(odds_api_key=None))
    record = {"message": "Fetching odds", "extra": {}}

    assert log_filter(record) is True
    assert record["message"] == "Fetching odds"
