"""
JSON Schema Contract Validators

Output contract of the engine towards the presentation layer: every result
model, dumped with ``model_dump(mode="json")``, must satisfy its JSON Schema.
Decimal fields travel as numeric strings, never as JSON floats.

Schemas (src/core/contracts/schema/):
- holding_pnl.json
- portfolio_return_summary.json
- benchmark_analysis.json
- beta_statistics.json
- ratio_result.json
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    JSON Schema file loader.

    Looks up schemas in the ``schema/`` directory next to this module.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Loaded schemas by name
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load a JSON Schema file.

        Args:
            schema_name: schema name without extension (e.g. 'holding_pnl')

        Returns:
            Parsed schema

        Raises:
            FileNotFoundError: no such schema file
            json.JSONDecodeError: file is not valid JSON
            ValueError: file is not a valid Draft 2020-12 schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation of the schema itself
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


def _as_payload(data: Dict[str, Any] | BaseModel) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    return data


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Base contract validator.

    Accepts either a plain dict or a result model (dumped in JSON mode).
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any] | BaseModel) -> None:
        """
        Raises:
            ValidationError: data does not match the schema
        """
        self.validator.validate(_as_payload(data))

    def is_valid(self, data: Dict[str, Any] | BaseModel) -> bool:
        return self.validator.is_valid(_as_payload(data))

    def iter_errors(self, data: Dict[str, Any] | BaseModel):
        """Yield every ValidationError found in ``data``."""
        return self.validator.iter_errors(_as_payload(data))


class HoldingPnLValidator(ContractValidator):
    def __init__(self):
        super().__init__("holding_pnl")


class PortfolioReturnSummaryValidator(ContractValidator):
    def __init__(self):
        super().__init__("portfolio_return_summary")


class BenchmarkAnalysisValidator(ContractValidator):
    def __init__(self):
        super().__init__("benchmark_analysis")


class BetaStatisticsValidator(ContractValidator):
    def __init__(self):
        super().__init__("beta_statistics")


class RatioResultValidator(ContractValidator):
    def __init__(self):
        super().__init__("ratio_result")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_holding_pnl(data: Dict[str, Any] | BaseModel) -> None:
    """Raises ValidationError if ``data`` breaks the holding_pnl contract."""
    HoldingPnLValidator().validate(data)


def validate_portfolio_return_summary(data: Dict[str, Any] | BaseModel) -> None:
    """Raises ValidationError if ``data`` breaks the portfolio_return_summary contract."""
    PortfolioReturnSummaryValidator().validate(data)


def validate_benchmark_analysis(data: Dict[str, Any] | BaseModel) -> None:
    """Raises ValidationError if ``data`` breaks the benchmark_analysis contract."""
    BenchmarkAnalysisValidator().validate(data)


def validate_beta_statistics(data: Dict[str, Any] | BaseModel) -> None:
    """Raises ValidationError if ``data`` breaks the beta_statistics contract."""
    BetaStatisticsValidator().validate(data)


def validate_ratio_result(data: Dict[str, Any] | BaseModel) -> None:
    """Raises ValidationError if ``data`` breaks the ratio_result contract."""
    RatioResultValidator().validate(data)
