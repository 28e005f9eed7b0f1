import json
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_required_project_files_exist():
    required_paths = [
        PROJECT_ROOT / "pyproject.toml",
        PROJECT_ROOT / ".gitignore",
        PROJECT_ROOT / ".env.example",
        PROJECT_ROOT / "ofc_analyzer" / "data" / "sample_financials.json",
    ]
    missing = [str(path) for path in required_paths if not path.exists()]
    assert not missing, f"Missing required project files: {missing}"


def test_env_example_does_not_contain_real_key():
    env_example = (PROJECT_ROOT / ".env.example").read_text(encoding="utf-8")
    assert "your_checko_api_key_here" in env_example


def test_gitignore_covers_main_runtime_artifacts():
    gitignore = (PROJECT_ROOT / ".gitignore").read_text(encoding="utf-8")
    for pattern in [".venv/", ".env", "runs/*"]:
        assert pattern in gitignore


def test_sample_dataset_is_a_list_of_reports():
    data = json.loads(
        (PROJECT_ROOT / "ofc_analyzer" / "data" / "sample_financials.json").read_text(encoding="utf-8")
    )
    assert isinstance(data, list)
    assert all("balance_sheet" in item or "balance" in item for item in data)
