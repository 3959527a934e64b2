# loan_optimizer/inputs/inputs.py
"""
Inputs loader for the home-loan prepayment optimizer.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Accept the bare request records (single loan or portfolio) as well as a
  structured shape that adds run options (report path, schedule rows shown).
- Accept amounts the way people type them ("45L", "1.2 Cr", "35,000") and
  rates either as fractions (0.085) or percentages (8.5).
- Minimal environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Bare single loan (root = LoanOptimizerInput)
   { "loan": {...}, "prepayment": {...}, "has_emergency_fund": true, ... }

2) Bare portfolio (root = MultiPropertyInput)
   { "loans": [...], "total_prepayment_amount": "10L", "strategy": "highest_rate", ... }

3) Structured (root = AppInputs)
   {
     "single": { ... } | "portfolio": { ... },
     "run": { "out": "loan_optimization.md", "report_months": 12, "yearly": true }
   }

Environment overrides (optional)
--------------------------------
- LOAN_OPTIMIZER_OUT            -> AppInputs.run.out
- LOAN_OPTIMIZER_REPORT_MONTHS  -> AppInputs.run.report_months (int)
- LOAN_OPTIMIZER_START_DATE     -> start_date of the request (YYYY-MM-DD)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError, model_validator

from loan_optimizer.core.finance.dates import parse_iso_date
from loan_optimizer.core.normalize.amounts import parse_indian_number
from loan_optimizer.schemas.models import LoanOptimizerInput, MultiPropertyInput

_MONEY_KEYS = ("principal", "existing_emi", "amount", "total_prepayment_amount")

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the report."""

    out: str = Field("loan_optimization.md", description="Path to write the Markdown report.")
    report_months: int = Field(12, ge=0, le=600, description="Leading schedule months rendered per scenario.")
    yearly: bool = Field(True, description="Include the year-by-year roll-up of each schedule.")


class AppInputs(BaseModel):
    """
    Full input payload: exactly one request (single loan or portfolio) plus run options.
    """

    single: LoanOptimizerInput | None = None
    portfolio: MultiPropertyInput | None = None
    run: RunOptions = RunOptions()

    @model_validator(mode="after")
    def _exactly_one_request(self) -> AppInputs:
        if (self.single is None) == (self.portfolio is None):
            raise ValueError("provide exactly one of 'single' or 'portfolio'")
        return self


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Default search (when path=None):
        1) ./data/sample/loan.json
        2) ./config.json
    """

    env_prefix: str = "LOAN_OPTIMIZER_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        return self._finish(raw)

    def load_json(self, text: str) -> AppInputs:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Inputs JSON must be an object at the root.")
        return self._finish(raw)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        report_months: int | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if report_months is not None:
            updates["report_months"] = report_months

        if not updates:
            return cfg

        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})

    # ---------- Internals ----------

    def _finish(self, raw: dict[str, Any]) -> AppInputs:
        data = self._maybe_wrap_bare(raw)
        data = self._normalize_values(data)
        cfg = self._parse_root(data)
        return self._apply_env_overrides(cfg)

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/loan.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/loan.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Inputs JSON in {p} must be an object at the root.")
        return cast(dict[str, Any], data)

    def _maybe_wrap_bare(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Accept bare request records by wrapping them into the structured shape."""
        if "single" in raw or "portfolio" in raw:
            return raw
        if "loans" in raw:
            return {"portfolio": raw}
        return {"single": raw}

    def _normalize_values(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Best-effort bridge for hand-written inputs:
          - money given as text ("45L", "1.2 Cr", "35,000") is parsed;
          - rates above 1 are read as percentages (8.5 -> 0.085).
        """

        def _walk(node: Any) -> Any:
            if isinstance(node, dict):
                out: dict[str, Any] = {}
                for key, value in node.items():
                    if key in _MONEY_KEYS and isinstance(value, str):
                        out[key] = parse_indian_number(value)
                    elif key == "annual_rate" and isinstance(value, (int, float)) and value > 1:
                        out[key] = value / 100.0
                    else:
                        out[key] = _walk(value)
                return out
            if isinstance(node, list):
                return [_walk(item) for item in node]
            return node

        return cast(dict[str, Any], _walk(data))

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        prefix = self.env_prefix
        run_updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            run_updates["out"] = out

        months = os.getenv(f"{prefix}REPORT_MONTHS")
        if months:
            try:
                run_updates["report_months"] = max(0, int(months))
            except ValueError:
                # Ignore bad value; keep validated cfg.run.report_months
                pass

        if run_updates:
            cfg = cfg.model_copy(update={"run": cfg.run.model_copy(update=run_updates)})

        start = os.getenv(f"{prefix}START_DATE")
        if start:
            start_date = parse_iso_date(start)
            if cfg.single is not None:
                cfg = cfg.model_copy(update={"single": cfg.single.model_copy(update={"start_date": start_date})})
            if cfg.portfolio is not None:
                cfg = cfg.model_copy(update={"portfolio": cfg.portfolio.model_copy(update={"start_date": start_date})})

        return cfg


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
