import os
import logging
from functools import lru_cache
from typing import Tuple

import yaml

from models.technology import SIGNAL_SOURCES, EvidenceRule, Technology

RULES_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_SIGNATURES_FILE = os.path.join(RULES_DIR, "signatures.yaml")

logger = logging.getLogger(__name__)


def load_rules(path: str = DEFAULT_SIGNATURES_FILE) -> Tuple[Technology, ...]:
    """
    Loads the ordered technology signature table from a YAML file.

    Entries without a name or evidence, and evidence with an unknown source
    or empty pattern, are skipped with a warning.
    """
    with open(path, "r", encoding="utf-8") as f:
        rules_data = yaml.safe_load(f) or []

    technologies = []
    for rule_data in rules_data:
        if not isinstance(rule_data, dict) or not all(k in rule_data for k in ["name", "evidence"]):
            logger.warning(f"Skipping invalid signature in {path}: {rule_data}")
            continue

        evidence_rules = []
        for evidence_item in rule_data["evidence"] or []:
            if not isinstance(evidence_item, dict):
                logger.warning(f"Skipping invalid evidence for {rule_data['name']}: {evidence_item}")
                continue
            source = str(evidence_item.get("source", "")).lower()
            pattern = str(evidence_item.get("pattern") or "").lower()
            if source not in SIGNAL_SOURCES or not pattern:
                logger.warning(f"Skipping invalid evidence for {rule_data['name']}: {evidence_item}")
                continue
            evidence_rules.append(EvidenceRule(source=source, pattern=pattern))

        if evidence_rules:
            technologies.append(
                Technology(name=rule_data["name"], evidence_rules=tuple(evidence_rules))
            )

    logger.debug(f"Loaded {len(technologies)} technology signatures from {path}")
    return tuple(technologies)


@lru_cache(maxsize=None)
def get_rules() -> Tuple[Technology, ...]:
    """The built-in signature table, read once per process."""
    return load_rules()
