"""Configuration loader and validation for categorization settings."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import copy
import json
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models.transaction import Categories
from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: Categories = {
    "Income": {
        "Kinect": ["dataannotation", "kinect"],
        "Other": ["e-transfer", "deposit", "income"],
    },
    "Expenses": {
        "Living Expenses": ["rent", "hydro", "utility", "insurance", "bill", "property tax"],
        "Groceries": [
            "walmart",
            "superstore",
            "loblaws",
            "costco",
            "iga",
            "super c",
            "the village store",
            "freshmarket",
            "athens fresh market",
        ],
        "Pets": ["vet", "petco", "petland"],
        "Subscriptions": [
            "spotify",
            "netflix",
            "crave",
            "subscription",
            "prime",
            "virgin plus",
            "disney",
            "github",
        ],
        "Phone Bill": ["rogers", "bell", "fido", "koodo", "phone"],
        "Alcohol": ["liquor", "beer store", "lcbo", "fpos Saq"],
        "Non-Grocery Food": [
            "restaurant",
            "ubereats",
            "skipthe",
            "fast food",
            "mcdonalds",
            "tim hortons",
            "coffee",
            "couchetard",
            "convenien",
            "A & W",
            "Picton On vic social",
            "Picton On metro",
            "Kettleman'S",
        ],
        "Misc Spending": [
            "service charge",
            "fee",
            "bank charge",
            "big al's aquarium",
            "value village",
            "amzn",
            "affirm canada",
            "physio outaouais",
            "amazon.ca",
            "sail",
            "kindle",
            " L'As Des Jeux ",
            "sessions cannabis",
            "interest charges",
            "justice quebec amendes",
            "dollarama",
            "cdkeys",
        ],
        "Automotive": [
            "petro-canada",
            "esso",
            "shell",
            "gas",
            "car",
            "tire",
            "maintenance",
            "pioneer",
            "macewen",
        ],
        "Gifts": [],
        "Dates": [
            "cinema",
            "famous players",
            "dinner",
            "flower",
            "midtown brewing",
            "currah's cafe",
            "karlo estates",
            "prince eddy",
        ],
        "Loans": ["loan", "student", "repayment", "nslsc"],
        "Trips": ["airbnb", "flight", "air canada", "hotel", "expedia", "mecp-ontpark-int-resorill"],
        "Sailboat Work": ["marine", "boat", "chandlery"],
    },
}

DEFAULT_SPLIT_RULES: list[dict[str, Any]] = [
    {
        "name": "virgin_plus_bundle",
        "keyword": "virgin plus",
        "amount": "-153.34",
        "enabled": True,
        "allocations": [
            {
                "main_category": "Expenses",
                "sub_category": "Living Expenses",
                "description": "Internet + TV",
                "amount": "-60.16",
            },
            {
                "main_category": "Expenses",
                "sub_category": "Phone Bill",
                "description": "Phone Bill",
            },
        ],
    },
]

# Config sections that replace the defaults wholesale instead of merging
_REPLACED_SECTIONS = ("categories", "split_rules")


def _exact_decimal(value: Any) -> Any:
    """Route floats through str() so YAML's -153.34 stays -153.34."""
    if isinstance(value, float):
        return str(value)
    return value


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    encoding: str = "utf-8"
    strict: bool = True


class SplitAllocation(BaseModel):
    """One synthetic entry produced by a split rule.

    An allocation without an amount receives whatever is left of the
    transaction after the fixed allocations.
    """

    main_category: str
    sub_category: str
    description: str
    amount: Optional[Decimal] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_exact(cls, value: Any) -> Any:
        return _exact_decimal(value)


class SplitRuleConfig(BaseModel):
    """A pre-match rule that splits one bill into several entries."""

    name: str
    keyword: str
    amount: Decimal
    enabled: bool = True
    allocations: list[SplitAllocation] = Field(default_factory=list)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_exact(cls, value: Any) -> Any:
        return _exact_decimal(value)


class MatchingSettings(BaseModel):
    """Settings for keyword matching and the unmatched fallback."""

    report_category: str = "Expenses"
    skip_marker: str = "date="


class ReconciliationSettings(BaseModel):
    """Settings for merging shared expenses into the report."""

    amount_tolerance: Decimal = Decimal("0.01")
    recompute_totals: bool = False

    @field_validator("amount_tolerance", mode="before")
    @classmethod
    def _tolerance_exact(cls, value: Any) -> Any:
        return _exact_decimal(value)


class OutputConfig(BaseModel):
    """Configuration for output files."""

    csv_filename_template: str = "categorized_output_{timestamp}.csv"
    excel_sheet_name: str = "Categorized"


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown logging level: {value}")
        return level


class CategorizerConfig(BaseModel):
    """Main configuration model for categorization."""

    input: InputConfig = Field(default_factory=InputConfig)
    categories: Categories = Field(default_factory=lambda: copy.deepcopy(DEFAULT_CATEGORIES))
    split_rules: list[SplitRuleConfig] = Field(
        default_factory=lambda: [SplitRuleConfig(**rule) for rule in DEFAULT_SPLIT_RULES]
    )
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    reconciliation: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "encoding": "utf-8",
            "strict": True,
        },
        "categories": copy.deepcopy(DEFAULT_CATEGORIES),
        "split_rules": copy.deepcopy(DEFAULT_SPLIT_RULES),
        "matching": {
            "report_category": "Expenses",
            "skip_marker": "date=",
        },
        "reconciliation": {
            "amount_tolerance": "0.01",
            "recompute_totals": False,
        },
        "output": {
            "csv_filename_template": "categorized_output_{timestamp}.csv",
            "excel_sheet_name": "Categorized",
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> CategorizerConfig:
    """
    Load configuration from a YAML file or use defaults.

    ``categories`` and ``split_rules`` in the file replace the defaults
    rather than merging into them.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        CategorizerConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        replaced = {key: user_config.pop(key) for key in _REPLACED_SECTIONS if key in user_config}
        config_dict = _deep_merge(config_dict, user_config)
        config_dict.update(replaced)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        config = CategorizerConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    _validate_categories(config.categories)
    return config


def load_categories(path: Path) -> Categories:
    """
    Load a standalone category taxonomy.

    ``.json`` files are read as JSON; anything else as YAML. The document
    must be a two-level mapping ``{main: {sub: [keyword, ...]}}``.

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    logger.info(f"Loading categories from: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read categories from {path}: {e}") from e

    _validate_categories(data)
    return data


def _validate_categories(categories: Any) -> None:
    """Check the two-level taxonomy shape."""
    if not isinstance(categories, dict):
        raise ConfigurationError("Categories must be a mapping of main categories")

    for main, subs in categories.items():
        if not isinstance(subs, dict):
            raise ConfigurationError(f"Main category '{main}' must map sub-categories to keywords")
        for sub, keywords in subs.items():
            if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
                raise ConfigurationError(
                    f"Sub-category '{main}/{sub}' must have a list of keyword strings"
                )


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Expense categorizer configuration
# categories and split_rules replace the built-in defaults when present

"""
    yaml_content += yaml.dump(
        config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
