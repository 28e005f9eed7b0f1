import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional


def log_step(log_dir: Optional[Path], step: str, payload: Dict[str, Any]) -> None:
    if log_dir is None:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    entry = {"ts": time.time(), "step": step, "payload": payload}
    with open(log_dir / "run.log", "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")


def summarize_results(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    summary = []
    for result in results:
        periods = result.get("periods") or []
        summary.append(
            {
                "inn": result.get("inn"),
                "error": result.get("error"),
                "computed": [p["label"] for p in periods if p.get("metrics") is not None],
                "missing": [p["label"] for p in periods if p.get("metrics") is None],
            }
        )
    return summary
