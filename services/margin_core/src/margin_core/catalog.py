import os
import yaml
import logging
from pydantic import ValidationError
from typing import Any, Dict, List, Optional

from .models import Briefing, CollateralItem, HandbookSection, Policy, PolicyKind, Purpose

logger = logging.getLogger("margin_core.catalog")

DEFAULT_CONTENT_PATH = os.path.join(os.path.dirname(__file__), "content.yaml")

REQUIRED_SECTIONS = ["names", "collaterals", "purposes", "policies", "briefings"]

_catalog = None


class CatalogError(ValueError):
    pass


class Catalog:
    """
    Static content tables for the desk: applicant names, collateral items,
    loan purposes, policy memos, tutorial briefings and handbook sections.
    """

    def __init__(
        self,
        names: List[str],
        collaterals: List[CollateralItem],
        purposes: List[Purpose],
        policies: List[Policy],
        briefings: List[Briefing],
        handbook: Optional[List[HandbookSection]] = None,
    ):
        self.names = names
        self.collaterals = collaterals
        self.purposes = purposes
        self.policies = policies
        self.briefings = briefings
        self.handbook = handbook or []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        _validate_content(data)
        try:
            return cls(
                names=[str(n) for n in data["names"]],
                collaterals=[CollateralItem(**c) for c in data["collaterals"]],
                purposes=[Purpose(**p) for p in data["purposes"]],
                policies=[Policy(**p) for p in data["policies"]],
                briefings=[Briefing(**b) for b in data["briefings"]],
                handbook=[HandbookSection(**h) for h in data.get("handbook") or []],
            )
        except (TypeError, ValidationError) as e:
            raise CatalogError(f"Invalid content entry: {e}") from e

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Catalog":
        path = path or DEFAULT_CONTENT_PATH
        catalog = cls.from_dict(_load_yaml(path))
        logger.info(
            f"Loaded content from {path}: {len(catalog.names)} names, "
            f"{len(catalog.collaterals)} collaterals, {len(catalog.purposes)} purposes, "
            f"{len(catalog.policies)} policies"
        )
        return catalog

    def policy(self, kind: PolicyKind) -> Policy:
        for p in self.policies:
            if p.kind == kind:
                return p
        raise KeyError(kind)


def _load_yaml(path: str) -> Dict:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except Exception as e:
        logger.error(f"Failed to load content from {path}: {e}")
        raise
    if not isinstance(data, dict):
        raise CatalogError(f"Content file {path} must contain a mapping")
    return data


def _validate_content(data: Dict[str, Any]):
    for section in REQUIRED_SECTIONS:
        if not data.get(section):
            raise CatalogError(f"Content missing '{section}'")

    # Every policy kind needs exactly one memo
    kinds = [p.get("kind") if isinstance(p, dict) else None for p in data["policies"]]
    known = {k.value for k in PolicyKind}
    unknown = [k for k in kinds if k not in known]
    if unknown:
        raise CatalogError(f"Unknown policy kinds: {unknown}")
    if len(set(kinds)) != len(kinds):
        raise CatalogError("Duplicate policy kinds in content")
    missing = known - set(kinds)
    if missing:
        raise CatalogError(f"Policy kinds without a memo: {sorted(missing)}")


def init_catalog(path: Optional[str] = None) -> Catalog:
    global _catalog
    _catalog = Catalog.load(path)
    return _catalog


def get_catalog() -> Catalog:
    if _catalog is None:
        init_catalog(os.environ.get("MARGIN_CONTENT_PATH"))
    return _catalog


def reset_catalog():
    global _catalog
    _catalog = None
