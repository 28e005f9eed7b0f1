import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv


DEFAULT_CHECKO_BASE_URL = "https://api.checko.ru/v3/companies"
DEFAULT_SAMPLE_DATA_PATH = Path(__file__).resolve().parent / "data" / "sample_financials.json"


@dataclass
class AppConfig:
    checko_api_key: str
    checko_base_url: str
    mock_mode: bool
    request_timeout_seconds: int
    request_max_retries: int
    daily_request_limit: int
    fetch_max_concurrency: int
    sample_data_path: Path
    run_log_dir: str
    port: int
    debug: bool


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_config() -> AppConfig:
    load_dotenv()
    api_key = os.getenv("CHECKO_API_KEY", "").strip()
    mock_mode = os.getenv("CHECKO_MOCK_MODE", "false").lower() == "true" or not api_key

    fetch_max_concurrency = max(1, min(_int_env("FETCH_MAX_CONCURRENCY", 4), 16))

    sample_path = os.getenv("SAMPLE_DATA_PATH", "").strip()

    return AppConfig(
        checko_api_key=api_key,
        checko_base_url=os.getenv("CHECKO_API_BASE", DEFAULT_CHECKO_BASE_URL).rstrip("/"),
        mock_mode=mock_mode,
        request_timeout_seconds=_int_env("CHECKO_TIMEOUT_SECONDS", 20),
        request_max_retries=max(0, _int_env("CHECKO_MAX_RETRIES", 2)),
        daily_request_limit=max(0, _int_env("CHECKO_DAILY_LIMIT", 100)),
        fetch_max_concurrency=fetch_max_concurrency,
        sample_data_path=Path(sample_path).expanduser() if sample_path else DEFAULT_SAMPLE_DATA_PATH,
        run_log_dir=os.getenv("RUN_LOG_DIR", "").strip(),
        port=_int_env("PORT", 3000),
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )
